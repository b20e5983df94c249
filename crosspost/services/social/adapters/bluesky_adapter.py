# crosspost/services/social/adapters/bluesky_adapter.py

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests

from ....config import Config
from ..http_utils import raise_if_http_error


class BlueskyAdapter:
    """AT Protocol XRPC calls against the account's PDS."""

    PDS_BASE = os.getenv("BLUESKY_PDS_URL", "https://bsky.social")

    @classmethod
    def _base(cls, pds_url: Optional[str] = None) -> str:
        return (pds_url or cls.PDS_BASE).rstrip("/")

    @classmethod
    def refresh_session(cls, refresh_jwt: str, pds_url: Optional[str] = None) -> Dict[str, Any]:
        r = requests.post(
            f"{cls._base(pds_url)}/xrpc/com.atproto.server.refreshSession",
            headers={"Authorization": f"Bearer {refresh_jwt}"},
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        data = raise_if_http_error(r, "Bluesky session refresh")
        return {
            "access_token": data.get("accessJwt"),
            "refresh_token": data.get("refreshJwt"),
        }

    @classmethod
    def upload_blob(cls, access_token: str, data: bytes, mime_type: str, pds_url: Optional[str] = None, log_tag: str = "") -> Dict[str, Any]:
        r = requests.post(
            f"{cls._base(pds_url)}/xrpc/com.atproto.repo.uploadBlob",
            headers={"Authorization": f"Bearer {access_token}", "Content-Type": mime_type},
            data=data,
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "Bluesky upload blob", log_tag).get("blob") or {}

    @classmethod
    def create_post(
        cls,
        access_token: str,
        did: str,
        text: str,
        *,
        images: Optional[List[Dict[str, Any]]] = None,
        pds_url: Optional[str] = None,
        log_tag: str = "",
    ) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "$type": "app.bsky.feed.post",
            "text": text or "",
            "createdAt": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }
        if images:
            record["embed"] = {
                "$type": "app.bsky.embed.images",
                "images": [{"alt": "", "image": blob} for blob in images],
            }

        r = requests.post(
            f"{cls._base(pds_url)}/xrpc/com.atproto.repo.createRecord",
            headers={"Authorization": f"Bearer {access_token}", "Content-Type": "application/json"},
            json={"repo": did, "collection": "app.bsky.feed.post", "record": record},
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "Bluesky create post", log_tag)
