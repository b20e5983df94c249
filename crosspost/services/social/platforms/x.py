# crosspost/services/social/platforms/x.py

from __future__ import annotations

from typing import Any, Dict, List

from ..adapters.x_adapter import XAdapter
from ..destination import SignedCredentials
from ..errors import DestinationConnectionError, MediaValidationError, ProtocolError
from ..media_resolver import MediaRef
from ..publisher_base import SocialPublisherBase
from ..upload_strategies import buffered_download


MAX_IMAGES = 4
APPEND_SEGMENT_BYTES = 4 * 1024 * 1024
TEXT_LIMIT = 280

# STATUS processing_info.state -> poller states
_STATE_MAP = {"succeeded": "FINISHED", "failed": "ERROR"}


class XPublisher(SocialPublisherBase):
    PLATFORM = "x"

    @property
    def label(self) -> str:
        return "X"

    @property
    def creds(self) -> SignedCredentials:
        creds = self.destination.credentials
        if not isinstance(creds, SignedCredentials):
            raise DestinationConnectionError("X connection is missing its signed credentials")
        return creds

    def validate(self, text: str, media: List[MediaRef], config: Dict[str, Any]) -> None:
        videos = [m for m in media if m.is_video]
        if videos and len(media) > 1:
            raise MediaValidationError("X allows one video or up to 4 images, not both")
        if len(media) > MAX_IMAGES:
            raise MediaValidationError(f"X allows at most {MAX_IMAGES} images")
        if not media and not (text or "").strip():
            raise MediaValidationError("X post needs text or media")

    def _status(self, media_id: str):
        raw = XAdapter.media_status(self.creds, media_id=media_id, log_tag=self.log_tag)
        info = raw.get("processing_info") or {}
        state = _STATE_MAP.get((info.get("state") or "").lower(), "IN_PROGRESS")
        if state == "ERROR":
            info = dict(info, error_message=(info.get("error") or {}).get("message"))
        return state, info

    def _upload(self, item: MediaRef) -> str:
        category = "tweet_video" if item.is_video else "tweet_image"
        mime = item.mime_type or ("video/mp4" if item.is_video else "image/jpeg")

        with buffered_download(item.url, log_tag=self.log_tag) as (path, size):
            init = XAdapter.media_init(
                self.creds,
                total_bytes=size,
                media_type=mime,
                media_category=category,
                log_tag=self.log_tag,
            )
            media_id = init.get("media_id_string") or (str(init["media_id"]) if init.get("media_id") else None)
            if not media_id:
                raise ProtocolError("X media INIT returned no media_id", payload=init)

            with open(path, "rb") as fh:
                segment = 0
                while True:
                    chunk = fh.read(APPEND_SEGMENT_BYTES)
                    if not chunk:
                        break
                    XAdapter.media_append(
                        self.creds,
                        media_id=media_id,
                        segment_index=segment,
                        chunk=chunk,
                        log_tag=self.log_tag,
                    )
                    segment += 1

        final = XAdapter.media_finalize(self.creds, media_id=media_id, log_tag=self.log_tag)
        info = final.get("processing_info") or {}
        if (info.get("state") or "").lower() == "failed":
            raise ProtocolError("X media processing failed", payload=final)
        if info:
            self.await_container(media_id, self._status)
        return media_id

    def publish(self, text: str, media: List[MediaRef], config: Dict[str, Any]) -> str:
        media_ids = [self._upload(item) for item in media]

        resp = XAdapter.create_tweet(
            self.creds,
            text=(text or "")[:TEXT_LIMIT],
            media_ids=media_ids or None,
            log_tag=self.log_tag,
        )
        tweet_id = (resp.get("data") or {}).get("id")
        if not tweet_id:
            raise ProtocolError("X returned no tweet id", payload=resp)
        return str(tweet_id)
