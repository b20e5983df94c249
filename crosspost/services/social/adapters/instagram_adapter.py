# crosspost/services/social/adapters/instagram_adapter.py

import os
from typing import Any, Dict, List, Optional

import requests

from ....config import Config
from ..http_utils import raise_if_http_error


class InstagramAdapter:
    GRAPH_BASE = os.getenv("FACEBOOK_GRAPH_API_URL", f"https://graph.facebook.com/{Config.GRAPH_API_VERSION}")

    @classmethod
    def create_media_container(
        cls,
        ig_user_id: str,
        access_token: str,
        *,
        caption: str = "",
        image_url: Optional[str] = None,
        video_url: Optional[str] = None,
        media_type: Optional[str] = None,
        children: Optional[List[str]] = None,
        is_carousel_item: bool = False,
        share_to_feed: Optional[bool] = None,
        log_tag: str = "",
    ) -> Dict[str, Any]:
        """
        POST /{ig-user-id}/media
        Returns {"id": "<creation_id>"}
        """
        payload = {"access_token": access_token}
        if caption:
            payload["caption"] = caption
        if is_carousel_item:
            payload["is_carousel_item"] = "true"
        if media_type:
            payload["media_type"] = media_type  # REELS, STORIES, CAROUSEL (omit for a plain image)
        if image_url:
            payload["image_url"] = image_url
        if video_url:
            payload["video_url"] = video_url
        if children:
            payload["children"] = ",".join(children)
        if share_to_feed is not None:
            payload["share_to_feed"] = "true" if share_to_feed else "false"

        r = requests.post(f"{cls.GRAPH_BASE}/{ig_user_id}/media", data=payload, timeout=Config.HTTP_TIMEOUT_SECONDS)
        return raise_if_http_error(r, "Instagram create container", log_tag)

    @classmethod
    def get_container_status(cls, creation_id: str, access_token: str, log_tag: str = "") -> Dict[str, Any]:
        """
        GET /{creation_id}?fields=status_code,status
        status_code: IN_PROGRESS, FINISHED, ERROR, EXPIRED, PUBLISHED
        """
        r = requests.get(
            f"{cls.GRAPH_BASE}/{creation_id}",
            params={"fields": "status_code,status", "access_token": access_token},
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "Instagram container status", log_tag)

    @classmethod
    def publish_container(cls, ig_user_id: str, access_token: str, creation_id: str, log_tag: str = "") -> Dict[str, Any]:
        """
        POST /{ig-user-id}/media_publish
        Returns {"id": "<ig_media_id>"}
        """
        r = requests.post(
            f"{cls.GRAPH_BASE}/{ig_user_id}/media_publish",
            data={"creation_id": creation_id, "access_token": access_token},
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "Instagram publish", log_tag)

    @classmethod
    def comment(cls, media_id: str, access_token: str, message: str, log_tag: str = "") -> Dict[str, Any]:
        r = requests.post(
            f"{cls.GRAPH_BASE}/{media_id}/comments",
            data={"message": message, "access_token": access_token},
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "Instagram comment", log_tag)
