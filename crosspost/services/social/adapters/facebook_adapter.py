# crosspost/services/social/adapters/facebook_adapter.py

import os
from typing import Any, Dict, Optional

import requests

from ....config import Config
from ..http_utils import raise_if_http_error


class FacebookAdapter:
    GRAPH_BASE = os.getenv("FACEBOOK_GRAPH_API_URL", f"https://graph.facebook.com/{Config.GRAPH_API_VERSION}")
    RUPLOAD_BASE = os.getenv("FACEBOOK_RUPLOAD_URL", f"https://rupload.facebook.com/video-upload/{Config.GRAPH_API_VERSION}")

    @classmethod
    def post_feed(cls, page_id: str, page_access_token: str, message: str, link: Optional[str] = None, log_tag: str = "") -> Dict[str, Any]:
        """POST /{page-id}/feed -> {"id": "<page>_<post>"}"""
        data = {"access_token": page_access_token, "message": message or ""}
        if link:
            data["link"] = link
        r = requests.post(f"{cls.GRAPH_BASE}/{page_id}/feed", data=data, timeout=Config.HTTP_TIMEOUT_SECONDS)
        return raise_if_http_error(r, "Facebook feed post", log_tag)

    @classmethod
    def post_photo(cls, page_id: str, page_access_token: str, image_url: str, caption: str, log_tag: str = "") -> Dict[str, Any]:
        """POST /{page-id}/photos -> {"id": "<photo>", "post_id": "<page>_<post>"}"""
        data = {
            "access_token": page_access_token,
            "url": image_url,
            "caption": caption or "",
            "published": "true",
        }
        r = requests.post(f"{cls.GRAPH_BASE}/{page_id}/photos", data=data, timeout=Config.HTTP_TIMEOUT_SECONDS)
        return raise_if_http_error(r, "Facebook photo post", log_tag)

    @classmethod
    def post_video(cls, page_id: str, page_access_token: str, video_url: str, description: str, log_tag: str = "") -> Dict[str, Any]:
        """POST /{page-id}/videos with file_url; Facebook fetches the file itself."""
        data = {
            "access_token": page_access_token,
            "file_url": video_url,
            "description": description or "",
        }
        r = requests.post(f"{cls.GRAPH_BASE}/{page_id}/videos", data=data, timeout=Config.UPLOAD_TIMEOUT_SECONDS)
        return raise_if_http_error(r, "Facebook video post", log_tag)

    # -----------------------------
    # Reels: start -> transfer -> finish
    # -----------------------------
    @classmethod
    def reel_start(cls, page_id: str, page_access_token: str, log_tag: str = "") -> Dict[str, Any]:
        r = requests.post(
            f"{cls.GRAPH_BASE}/{page_id}/video_reels",
            data={"upload_phase": "start", "access_token": page_access_token},
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "Facebook reel start", log_tag)

    @classmethod
    def reel_transfer_from_url(cls, video_id: str, page_access_token: str, video_url: str, log_tag: str = "") -> Dict[str, Any]:
        r = requests.post(
            f"{cls.RUPLOAD_BASE}/{video_id}",
            headers={"Authorization": f"OAuth {page_access_token}", "file_url": video_url},
            timeout=Config.UPLOAD_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "Facebook reel upload", log_tag)

    @classmethod
    def reel_finish(cls, page_id: str, page_access_token: str, video_id: str, description: str, log_tag: str = "") -> Dict[str, Any]:
        r = requests.post(
            f"{cls.GRAPH_BASE}/{page_id}/video_reels",
            data={
                "upload_phase": "finish",
                "video_id": video_id,
                "video_state": "PUBLISHED",
                "description": description or "",
                "access_token": page_access_token,
            },
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "Facebook reel publish", log_tag)

    @classmethod
    def comment(cls, object_id: str, page_access_token: str, message: str, log_tag: str = "") -> Dict[str, Any]:
        r = requests.post(
            f"{cls.GRAPH_BASE}/{object_id}/comments",
            data={"message": message, "access_token": page_access_token},
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "Facebook comment", log_tag)
