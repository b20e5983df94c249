# crosspost/services/social/adapters/tiktok_adapter.py

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import requests

from ....config import Config
from ..http_utils import raise_if_http_error


class TikTokAdapter:
    """
    TikTok Content Posting API.

      - video: init (FILE_UPLOAD, exact size) -> PUT chunks with Content-Range
      - photo: init (PULL_FROM_URL)
      - status/fetch until PUBLISH_COMPLETE or FAILED
    """

    OPEN_API_BASE = os.environ.get("TIKTOK_OPEN_API_BASE", "https://open.tiktokapis.com")

    OAUTH_TOKEN_URL = f"{OPEN_API_BASE}/v2/oauth/token/"
    VIDEO_INIT_URL = f"{OPEN_API_BASE}/v2/post/publish/video/init/"
    PHOTO_INIT_URL = f"{OPEN_API_BASE}/v2/post/publish/content/init/"
    STATUS_FETCH_URL = f"{OPEN_API_BASE}/v2/post/publish/status/fetch/"

    UNAUDITED_ERROR = "unaudited_client_can_only_post_to_private_accounts"

    @classmethod
    def _headers_bearer(cls, access_token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json; charset=UTF-8",
        }

    @staticmethod
    def _post_info(post_text: str, privacy_level: str, options: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "title": (post_text or "")[:2200],
            "privacy_level": privacy_level,
            "disable_comment": bool(options.get("disable_comment", False)),
            "disable_duet": bool(options.get("disable_duet", False)),
            "disable_stitch": bool(options.get("disable_stitch", False)),
        }

    # --------------------------
    # OAuth refresh
    # --------------------------
    @classmethod
    def refresh_access_token(cls, refresh_token: str) -> Dict[str, Any]:
        r = requests.post(
            cls.OAUTH_TOKEN_URL,
            data={
                "client_key": Config.TIKTOK_CLIENT_KEY or "",
                "client_secret": Config.TIKTOK_CLIENT_SECRET or "",
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        data = raise_if_http_error(r, "TikTok token refresh")
        # some app versions nest the token under "data"
        return data.get("data") if isinstance(data.get("data"), dict) and data["data"].get("access_token") else data

    # --------------------------
    # VIDEO
    # --------------------------
    @classmethod
    def init_video_post(
        cls,
        *,
        access_token: str,
        post_text: str,
        video_size_bytes: int,
        chunk_size: int,
        total_chunk_count: int,
        privacy_level: str = "PUBLIC_TO_EVERYONE",
        options: Optional[Dict[str, Any]] = None,
        log_tag: str = "",
    ) -> Dict[str, Any]:
        payload = {
            "post_info": cls._post_info(post_text, privacy_level, options or {}),
            "source_info": {
                "source": "FILE_UPLOAD",
                "video_size": int(video_size_bytes),
                "chunk_size": int(chunk_size),
                "total_chunk_count": int(total_chunk_count),
            },
        }
        r = requests.post(
            cls.VIDEO_INIT_URL,
            headers=cls._headers_bearer(access_token),
            json=payload,
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "TikTok video init", log_tag)

    @classmethod
    def upload_chunk(
        cls,
        *,
        upload_url: str,
        chunk,
        first_byte: int,
        last_byte: int,
        total_bytes: int,
        content_type: str = "video/mp4",
        log_tag: str = "",
    ) -> None:
        r = requests.put(
            upload_url,
            headers={
                "Content-Type": content_type,
                "Content-Length": str(last_byte - first_byte + 1),
                "Content-Range": f"bytes {first_byte}-{last_byte}/{total_bytes}",
            },
            data=chunk,
            timeout=Config.UPLOAD_TIMEOUT_SECONDS,
        )
        raise_if_http_error(r, "TikTok video upload", log_tag)

    # --------------------------
    # PHOTO
    # --------------------------
    @classmethod
    def init_photo_post(
        cls,
        *,
        access_token: str,
        post_text: str,
        image_urls: List[str],
        privacy_level: str = "PUBLIC_TO_EVERYONE",
        options: Optional[Dict[str, Any]] = None,
        log_tag: str = "",
    ) -> Dict[str, Any]:
        post_info = cls._post_info(post_text, privacy_level, options or {})
        post_info.pop("disable_duet", None)
        post_info.pop("disable_stitch", None)
        post_info["title"] = (post_text or "")[:90]
        post_info["description"] = (post_text or "")[:4000]

        payload = {
            "post_info": post_info,
            "source_info": {
                "source": "PULL_FROM_URL",
                "photo_cover_index": 0,
                "photo_images": image_urls,
            },
            "post_mode": "DIRECT_POST",
            "media_type": "PHOTO",
        }
        r = requests.post(
            cls.PHOTO_INIT_URL,
            headers=cls._headers_bearer(access_token),
            json=payload,
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "TikTok photo init", log_tag)

    # --------------------------
    # STATUS
    # --------------------------
    @classmethod
    def fetch_publish_status(cls, *, access_token: str, publish_id: str, log_tag: str = "") -> Dict[str, Any]:
        r = requests.post(
            cls.STATUS_FETCH_URL,
            headers=cls._headers_bearer(access_token),
            json={"publish_id": publish_id},
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "TikTok status fetch", log_tag)
