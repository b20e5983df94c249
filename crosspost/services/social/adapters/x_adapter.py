# crosspost/services/social/adapters/x_adapter.py

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import requests

from ....config import Config
from ..destination import SignedCredentials
from ..http_utils import raise_if_http_error
from ..upload_strategies import oauth1_authorization


class XAdapter:
    """
    X (Twitter) with OAuth 1.0a user context.

      - media upload: INIT / APPEND / FINALIZE (+ STATUS) on upload.twitter.com v1.1
      - tweet: POST /2/tweets

    Every request is signed on its own with a new nonce and timestamp.
    """

    API_BASE = os.environ.get("X_API_BASE_URL", "https://api.x.com")
    UPLOAD_BASE = os.environ.get("X_UPLOAD_BASE_URL", "https://upload.twitter.com")

    CREATE_TWEET_URL = f"{API_BASE}/2/tweets"
    MEDIA_UPLOAD_URL = f"{UPLOAD_BASE}/1.1/media/upload.json"

    @staticmethod
    def _auth(creds: SignedCredentials, method: str, url: str, params: Optional[Dict[str, Any]] = None) -> str:
        header, _ = oauth1_authorization(
            method,
            url,
            consumer_key=creds.consumer_key,
            consumer_secret=creds.consumer_secret,
            token=creds.access_token,
            token_secret=creds.access_token_secret,
            params=params,
        )
        return header

    # ----------------------------
    # Media upload
    # ----------------------------
    @classmethod
    def media_init(cls, creds: SignedCredentials, *, total_bytes: int, media_type: str, media_category: str, log_tag: str = "") -> Dict[str, Any]:
        params = {
            "command": "INIT",
            "total_bytes": str(int(total_bytes)),
            "media_type": media_type,
            "media_category": media_category,
        }
        r = requests.post(
            cls.MEDIA_UPLOAD_URL,
            headers={"Authorization": cls._auth(creds, "POST", cls.MEDIA_UPLOAD_URL, params)},
            data=params,
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "X media INIT", log_tag)

    @classmethod
    def media_append(cls, creds: SignedCredentials, *, media_id: str, segment_index: int, chunk: bytes, log_tag: str = "") -> None:
        # multipart body is not part of the signature
        r = requests.post(
            cls.MEDIA_UPLOAD_URL,
            headers={"Authorization": cls._auth(creds, "POST", cls.MEDIA_UPLOAD_URL)},
            data={"command": "APPEND", "media_id": media_id, "segment_index": str(segment_index)},
            files={"media": ("chunk", chunk, "application/octet-stream")},
            timeout=Config.UPLOAD_TIMEOUT_SECONDS,
        )
        raise_if_http_error(r, "X media APPEND", log_tag)

    @classmethod
    def media_finalize(cls, creds: SignedCredentials, *, media_id: str, log_tag: str = "") -> Dict[str, Any]:
        params = {"command": "FINALIZE", "media_id": media_id}
        r = requests.post(
            cls.MEDIA_UPLOAD_URL,
            headers={"Authorization": cls._auth(creds, "POST", cls.MEDIA_UPLOAD_URL, params)},
            data=params,
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "X media FINALIZE", log_tag)

    @classmethod
    def media_status(cls, creds: SignedCredentials, *, media_id: str, log_tag: str = "") -> Dict[str, Any]:
        params = {"command": "STATUS", "media_id": media_id}
        r = requests.get(
            cls.MEDIA_UPLOAD_URL,
            headers={"Authorization": cls._auth(creds, "GET", cls.MEDIA_UPLOAD_URL, params)},
            params=params,
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "X media STATUS", log_tag)

    # ----------------------------
    # Tweet
    # ----------------------------
    @classmethod
    def create_tweet(cls, creds: SignedCredentials, *, text: str, media_ids: Optional[List[str]] = None, log_tag: str = "") -> Dict[str, Any]:
        payload: Dict[str, Any] = {"text": text or ""}
        if media_ids:
            payload["media"] = {"media_ids": media_ids}

        r = requests.post(
            cls.CREATE_TWEET_URL,
            headers={
                "Authorization": cls._auth(creds, "POST", cls.CREATE_TWEET_URL),
                "Content-Type": "application/json",
            },
            json=payload,
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "X create tweet", log_tag)
