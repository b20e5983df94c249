# crosspost/services/social/adapters/linkedin_adapter.py

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import requests

from ....config import Config
from ..errors import ProtocolError
from ..http_utils import raise_if_http_error


class LinkedInAdapter:
    API_BASE = os.getenv("LINKEDIN_API_BASE", "https://api.linkedin.com/v2")
    OAUTH_TOKEN_URL = os.getenv("LINKEDIN_OAUTH_TOKEN_URL", "https://www.linkedin.com/oauth/v2/accessToken")

    @classmethod
    def _headers(cls, access_token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "X-Restli-Protocol-Version": "2.0.0",
            "Content-Type": "application/json",
        }

    @classmethod
    def refresh_access_token(cls, refresh_token: str) -> Dict[str, Any]:
        r = requests.post(
            cls.OAUTH_TOKEN_URL,
            data={
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
                "client_id": Config.LINKEDIN_CLIENT_ID or "",
                "client_secret": Config.LINKEDIN_CLIENT_SECRET or "",
            },
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        return raise_if_http_error(r, "LinkedIn token refresh")

    @classmethod
    def register_upload(cls, access_token: str, owner_urn: str, *, is_video: bool, log_tag: str = "") -> Dict[str, str]:
        """Returns {"upload_url", "asset"}."""
        recipe = "urn:li:digitalmediaRecipe:feedshare-video" if is_video else "urn:li:digitalmediaRecipe:feedshare-image"
        payload = {
            "registerUploadRequest": {
                "recipes": [recipe],
                "owner": owner_urn,
                "serviceRelationships": [
                    {"relationshipType": "OWNER", "identifier": "urn:li:userGeneratedContent"}
                ],
            }
        }
        r = requests.post(
            f"{cls.API_BASE}/assets",
            params={"action": "registerUpload"},
            headers=cls._headers(access_token),
            json=payload,
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        data = raise_if_http_error(r, "LinkedIn register upload", log_tag)

        value = data.get("value") or {}
        mech = (value.get("uploadMechanism") or {}).get(
            "com.linkedin.digitalmedia.uploading.MediaUploadHttpRequest"
        ) or {}
        upload_url = mech.get("uploadUrl")
        asset = value.get("asset")
        if not upload_url or not asset:
            raise ProtocolError("LinkedIn register upload returned no upload url", payload=data)
        return {"upload_url": upload_url, "asset": asset}

    @classmethod
    def upload_binary(cls, access_token: str, upload_url: str, file_obj, size_bytes: int, content_type: str, log_tag: str = "") -> None:
        r = requests.put(
            upload_url,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Content-Type": content_type,
                "Content-Length": str(int(size_bytes)),
            },
            data=file_obj,
            timeout=Config.UPLOAD_TIMEOUT_SECONDS,
        )
        raise_if_http_error(r, "LinkedIn media upload", log_tag)

    @classmethod
    def create_ugc_post(
        cls,
        access_token: str,
        author_urn: str,
        text: str,
        *,
        media_category: str = "NONE",
        assets: Optional[List[str]] = None,
        visibility: str = "PUBLIC",
        log_tag: str = "",
    ) -> str:
        share = {
            "shareCommentary": {"text": text or ""},
            "shareMediaCategory": media_category,
        }
        if assets:
            share["media"] = [{"status": "READY", "media": a} for a in assets]

        payload = {
            "author": author_urn,
            "lifecycleState": "PUBLISHED",
            "specificContent": {"com.linkedin.ugc.ShareContent": share},
            "visibility": {"com.linkedin.ugc.MemberNetworkVisibility": visibility},
        }
        r = requests.post(
            f"{cls.API_BASE}/ugcPosts",
            headers=cls._headers(access_token),
            json=payload,
            timeout=Config.HTTP_TIMEOUT_SECONDS,
        )
        data = raise_if_http_error(r, "LinkedIn create post", log_tag)
        post_id = r.headers.get("x-restli-id") or r.headers.get("X-RestLi-Id") or data.get("id")
        if not post_id:
            raise ProtocolError("LinkedIn create post returned no id", status_code=r.status_code, payload=data)
        return post_id
