# crosspost/services/social/adapters/threads_adapter.py

import os
from typing import Any, Dict, List, Optional

import requests

from ....config import Config
from ..http_utils import raise_if_http_error


class ThreadsAdapter:
    GRAPH_BASE = os.getenv("THREADS_GRAPH_API_URL", "https://graph.threads.net/v1.0")

    @classmethod
    def create_container(
        cls,
        user_id: str,
        access_token: str,
        *,
        media_type: str,
        text: str = "",
        image_url: Optional[str] = None,
        video_url: Optional[str] = None,
        children: Optional[List[str]] = None,
        is_carousel_item: bool = False,
        log_tag: str = "",
    ) -> Dict[str, Any]:
        """POST /{user-id}/threads -> {"id": "<creation_id>"}"""
        payload = {"media_type": media_type, "access_token": access_token}
        if text:
            payload["text"] = text
        if image_url:
            payload["image_url"] = image_url
        if video_url:
            payload["video_url"] = video_url
        if children:
            payload["children"] = ",".join(children)
        if is_carousel_item:
            payload["is_carousel_item"] = "true"

        r = requests.post(f"{cls.GRAPH_BASE}/{user_id}/threads", data=payload, timeout=Config.HTTP_TIMEOUT_SECONDS)
        return raise_if_http_error(r, "Threads create container", log_tag)

    @classmethod
    def get_container_status(cls, creation_id: str, access_token: str, log_tag: str = "") -> Dict[str, Any]:
        """status: IN_PROGRESS, FINISHED, ERROR, EXPIRED, PUBLISHED"""
        r = requests.get(
            f"{cls.GRAPH_BASE}/{creation_id}",
            params={"fields": "status,error_message", "access_token": access_token},
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "Threads container status", log_tag)

    @classmethod
    def publish_container(cls, user_id: str, access_token: str, creation_id: str, log_tag: str = "") -> Dict[str, Any]:
        r = requests.post(
            f"{cls.GRAPH_BASE}/{user_id}/threads_publish",
            data={"creation_id": creation_id, "access_token": access_token},
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "Threads publish", log_tag)
