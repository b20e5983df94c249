# crosspost/services/social/adapters/pinterest_adapter.py

from __future__ import annotations

import base64
import os
from typing import Any, Dict, Optional

import requests

from ....config import Config
from ..http_utils import raise_if_http_error


class PinterestAdapter:
    API_BASE = os.getenv("PINTEREST_API_BASE", "https://api.pinterest.com/v5")

    @classmethod
    def refresh_access_token(cls, refresh_token: str) -> Dict[str, Any]:
        basic = base64.b64encode(
            f"{Config.PINTEREST_CLIENT_ID or ''}:{Config.PINTEREST_CLIENT_SECRET or ''}".encode()
        ).decode()
        r = requests.post(
            f"{cls.API_BASE}/oauth/token",
            headers={
                "Authorization": f"Basic {basic}",
                "Content-Type": "application/x-www-form-urlencoded",
            },
            data={"grant_type": "refresh_token", "refresh_token": refresh_token},
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "Pinterest token refresh")

    @classmethod
    def create_pin(
        cls,
        access_token: str,
        *,
        board_id: str,
        image_url: str,
        title: str = "",
        description: str = "",
        link: Optional[str] = None,
        log_tag: str = "",
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "board_id": board_id,
            "title": (title or "")[:100],
            "description": (description or "")[:500],
            "media_source": {"source_type": "image_url", "url": image_url},
        }
        if link:
            payload["link"] = link

        r = requests.post(
            f"{cls.API_BASE}/pins",
            headers={"Authorization": f"Bearer {access_token}", "Content-Type": "application/json"},
            json=payload,
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "Pinterest create pin", log_tag)
