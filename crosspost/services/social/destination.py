# crosspost/services/social/destination.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Union

from ...config import Config
from .errors import DestinationConnectionError


# networks that authorize with an OAuth 1.0a signature instead of a bearer token
SIGNED_REQUEST_PLATFORMS = {"x"}


@dataclass(frozen=True)
class BearerCredentials:
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None


@dataclass(frozen=True)
class SignedCredentials:
    consumer_key: str
    consumer_secret: str
    access_token: str
    access_token_secret: str


Credentials = Union[BearerCredentials, SignedCredentials]


@dataclass
class Destination:
    platform: str
    account_id: str
    credentials: Credentials
    account_name: Optional[str] = None
    config: Dict[str, Any] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)
    record_id: Optional[str] = None

    @property
    def access_token(self) -> str:
        return self.credentials.access_token

    @property
    def refresh_token(self) -> Optional[str]:
        return getattr(self.credentials, "refresh_token", None)

    def with_access_token(self, access_token: str, refresh_token: Optional[str] = None, expires_at=None) -> "Destination":
        if not isinstance(self.credentials, BearerCredentials):
            return self
        creds = BearerCredentials(
            access_token=access_token,
            refresh_token=refresh_token or self.credentials.refresh_token,
            expires_at=expires_at or self.credentials.expires_at,
        )
        return Destination(
            platform=self.platform,
            account_id=self.account_id,
            credentials=creds,
            account_name=self.account_name,
            config=self.config,
            meta=self.meta,
            record_id=self.record_id,
        )

    @classmethod
    def from_account(cls, account: Dict[str, Any], config: Optional[Dict[str, Any]] = None) -> "Destination":
        """
        Build from a decrypted SocialAccount doc. Missing credential fields
        raise here so no adapter ever starts with half a credential.
        """
        platform = (account.get("platform") or "").lower()
        account_id = str(account.get("account_id") or "")
        if not account_id:
            raise DestinationConnectionError(f"{platform or 'Destination'} connection has no account id")

        merged_config = dict(account.get("config") or {})
        merged_config.update(config or {})

        if platform in SIGNED_REQUEST_PLATFORMS:
            credentials = cls._signed_credentials(platform, account)
        else:
            access_token = account.get("access_token_plain")
            if not access_token:
                raise DestinationConnectionError(f"{platform} connection is missing an access token")
            credentials = BearerCredentials(
                access_token=access_token,
                refresh_token=account.get("refresh_token_plain"),
                expires_at=account.get("token_expires_at"),
            )

        return cls(
            platform=platform,
            account_id=account_id,
            credentials=credentials,
            account_name=account.get("account_name"),
            config=merged_config,
            meta=account.get("meta") or {},
            record_id=account.get("_id"),
        )

    @staticmethod
    def _signed_credentials(platform: str, account: Dict[str, Any]) -> SignedCredentials:
        bundle = account.get("credentials_plain") or {}
        if not isinstance(bundle, dict):
            raise DestinationConnectionError(f"{platform} credential bundle is malformed")

        values = {
            "consumer_key": bundle.get("apiKey") or bundle.get("consumer_key") or Config.X_CONSUMER_KEY,
            "consumer_secret": bundle.get("apiKeySecret") or bundle.get("consumer_secret") or Config.X_CONSUMER_SECRET,
            "access_token": bundle.get("accessToken") or bundle.get("access_token") or account.get("access_token_plain"),
            "access_token_secret": bundle.get("accessTokenSecret") or bundle.get("access_token_secret"),
        }
        missing = [k for k, v in values.items() if not v]
        if missing:
            raise DestinationConnectionError(
                f"{platform} connection is missing credentials: {', '.join(missing)}"
            )
        return SignedCredentials(**values)
