# crosspost/services/social/platforms/bluesky.py

from __future__ import annotations

from typing import Any, Dict, List

import jwt
import requests

from ....config import Config
from ..adapters.bluesky_adapter import BlueskyAdapter
from ..errors import DestinationConnectionError, MediaValidationError, ProtocolError
from ..media_resolver import MediaRef
from ..publisher_base import SocialPublisherBase


MAX_IMAGES = 4
TEXT_LIMIT = 300


def did_from_token(access_token: str) -> str:
    """The posting DID lives in the access JWT's `sub` claim."""
    try:
        claims = jwt.decode(access_token, options={"verify_signature": False})
    except jwt.PyJWTError as e:
        raise DestinationConnectionError(f"Bluesky access token could not be decoded: {e}")

    did = claims.get("sub")
    if not did or not str(did).startswith("did:"):
        raise DestinationConnectionError("Bluesky access token carries no DID")
    return str(did)


class BlueskyPublisher(SocialPublisherBase):
    PLATFORM = "bluesky"

    def validate(self, text: str, media: List[MediaRef], config: Dict[str, Any]) -> None:
        if any(m.is_video for m in media):
            raise MediaValidationError("Bluesky posts support images only")
        if len(media) > MAX_IMAGES:
            raise MediaValidationError(f"Bluesky allows at most {MAX_IMAGES} images")
        if not media and not (text or "").strip():
            raise MediaValidationError("Bluesky post needs text or images")

    def _fetch_image(self, item: MediaRef):
        r = requests.get(item.url, timeout=Config.HTTP_TIMEOUT_SECONDS)
        if r.status_code >= 400:
            raise ProtocolError(f"Media download failed: HTTP {r.status_code}", status_code=r.status_code)
        mime = item.mime_type or r.headers.get("Content-Type") or "image/jpeg"
        return r.content, mime.split(";")[0]

    def publish(self, text: str, media: List[MediaRef], config: Dict[str, Any]) -> str:
        token = self.destination.access_token
        did = did_from_token(token)
        pds_url = self.destination.meta.get("pds_url")

        blobs = []
        for item in media:
            data, mime = self._fetch_image(item)
            blobs.append(BlueskyAdapter.upload_blob(token, data, mime, pds_url=pds_url, log_tag=self.log_tag))

        resp = BlueskyAdapter.create_post(
            token,
            did,
            (text or "")[:TEXT_LIMIT],
            images=blobs or None,
            pds_url=pds_url,
            log_tag=self.log_tag,
        )
        uri = resp.get("uri")
        if not uri:
            raise ProtocolError("Bluesky returned no record uri", payload=resp)
        return str(uri)
