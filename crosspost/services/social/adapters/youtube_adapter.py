# crosspost/services/social/adapters/youtube_adapter.py

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import requests

from ....config import Config
from ..http_utils import raise_if_http_error
from ..upload_strategies import resumable_upload


class YouTubeAdapter:
    """
    YouTube Data API v3.

    Upload is the resumable protocol: init (declared length/type) -> Location -> PUT.
    """

    OAUTH_TOKEN_URL = os.getenv("GOOGLE_OAUTH_TOKEN_URL", "https://oauth2.googleapis.com/token")
    API_BASE = os.getenv("YOUTUBE_API_BASE", "https://www.googleapis.com/youtube/v3")
    UPLOAD_URL = os.getenv("YOUTUBE_UPLOAD_URL", "https://www.googleapis.com/upload/youtube/v3/videos")

    @classmethod
    def refresh_access_token(cls, refresh_token: str) -> Dict[str, Any]:
        r = requests.post(
            cls.OAUTH_TOKEN_URL,
            data={
                "client_id": Config.YOUTUBE_CLIENT_ID or "",
                "client_secret": Config.YOUTUBE_CLIENT_SECRET or "",
                "refresh_token": refresh_token,
                "grant_type": "refresh_token",
            },
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "YouTube token refresh")

    @classmethod
    def upload_video(
        cls,
        *,
        access_token: str,
        file_obj,
        size_bytes: int,
        content_type: str,
        title: str,
        description: str,
        privacy_status: str = "public",
        tags: Optional[List[str]] = None,
        category_id: str = "22",
        made_for_kids: bool = False,
        log_tag: str = "",
    ) -> Dict[str, Any]:
        metadata = {
            "snippet": {
                "title": title,
                "description": description,
                "categoryId": category_id,
            },
            "status": {
                "privacyStatus": privacy_status,
                "selfDeclaredMadeForKids": bool(made_for_kids),
            },
        }
        if tags:
            metadata["snippet"]["tags"] = tags

        return resumable_upload(
            cls.UPLOAD_URL,
            access_token=access_token,
            metadata=metadata,
            body=file_obj,
            content_length=size_bytes,
            content_type=content_type,
            params={"uploadType": "resumable", "part": "snippet,status"},
            log_tag=log_tag,
        )

    @classmethod
    def comment(cls, video_id: str, access_token: str, message: str, log_tag: str = "") -> Dict[str, Any]:
        r = requests.post(
            f"{cls.API_BASE}/commentThreads",
            params={"part": "snippet"},
            headers={"Authorization": f"Bearer {access_token}"},
            json={
                "snippet": {
                    "videoId": video_id,
                    "topLevelComment": {"snippet": {"textOriginal": message}},
                }
            },
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "YouTube comment", log_tag)
