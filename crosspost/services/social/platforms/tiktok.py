# crosspost/services/social/platforms/tiktok.py

from __future__ import annotations

from typing import Any, Callable, Dict, List

from ....config import Config
from ....utils.logger import Log
from ..adapters.tiktok_adapter import TikTokAdapter
from ..errors import MediaValidationError, ProtocolError
from ..media_resolver import MediaRef
from ..publisher_base import SocialPublisherBase
from ..upload_strategies import buffered_download


# single PUT up to this size; larger files go in CHUNK_BYTES pieces
SINGLE_CHUNK_MAX_BYTES = 64 * 1024 * 1024
CHUNK_BYTES = 10 * 1024 * 1024
PHOTO_MAX = 35

PRIVATE_PRIVACY = "SELF_ONLY"

# status/fetch -> poller states
_STATUS_MAP = {
    "PUBLISH_COMPLETE": "FINISHED",
    "SEND_TO_USER_INBOX": "FINISHED",
    "FAILED": "ERROR",
}


def chunk_plan(size: int):
    """(chunk_size, total_chunk_count). The last chunk absorbs the remainder."""
    if size <= SINGLE_CHUNK_MAX_BYTES:
        return size, 1
    return CHUNK_BYTES, size // CHUNK_BYTES


def is_unaudited_error(e: Exception) -> bool:
    payload = getattr(e, "payload", None)
    if isinstance(payload, dict):
        err = payload.get("error")
        if isinstance(err, dict) and err.get("code") == TikTokAdapter.UNAUDITED_ERROR:
            return True
    return TikTokAdapter.UNAUDITED_ERROR in str(e)


class TikTokPublisher(SocialPublisherBase):
    PLATFORM = "tiktok"

    @property
    def label(self) -> str:
        return "TikTok"

    def validate(self, text: str, media: List[MediaRef], config: Dict[str, Any]) -> None:
        videos = [m for m in media if m.is_video]
        images = [m for m in media if m.is_image]
        if not videos and not images:
            raise MediaValidationError("TikTok requires a video or at least one image")
        if not videos and len(images) > PHOTO_MAX:
            raise MediaValidationError(f"TikTok photo posts allow at most {PHOTO_MAX} images")

    def _with_private_fallback(self, init_fn: Callable[[str], Dict[str, Any]], privacy: str) -> Dict[str, Any]:
        """Run init; on the unaudited-app restriction retry exactly once as SELF_ONLY."""
        try:
            return init_fn(privacy)
        except ProtocolError as e:
            if privacy == PRIVATE_PRIVACY or not is_unaudited_error(e):
                raise
            Log.info(f"{self.log_tag} unaudited TikTok app, retrying as {PRIVATE_PRIVACY}")
            return init_fn(PRIVATE_PRIVACY)

    def _status(self, publish_id: str):
        raw = TikTokAdapter.fetch_publish_status(
            access_token=self.destination.access_token,
            publish_id=publish_id,
            log_tag=self.log_tag,
        )
        data = raw.get("data") or {}
        return _STATUS_MAP.get((data.get("status") or "").upper(), "IN_PROGRESS"), data

    def _await_publish(self, publish_id: str) -> str:
        data = self.await_container(
            publish_id,
            self._status,
            max_attempts=Config.TIKTOK_POLL_ATTEMPTS,
            interval_seconds=Config.TIKTOK_POLL_INTERVAL_SECONDS,
        )
        post_ids = data.get("publicaly_available_post_id") or data.get("publicly_available_post_id") or []
        return str(post_ids[0]) if post_ids else publish_id

    def _upload_file(self, path: str, size: int, upload_url: str, chunk_size: int, chunk_count: int, content_type: str) -> None:
        with open(path, "rb") as fh:
            for index in range(chunk_count):
                first = index * chunk_size
                last = size - 1 if index == chunk_count - 1 else first + chunk_size - 1
                chunk = fh.read(last - first + 1)
                TikTokAdapter.upload_chunk(
                    upload_url=upload_url,
                    chunk=chunk,
                    first_byte=first,
                    last_byte=last,
                    total_bytes=size,
                    content_type=content_type,
                    log_tag=self.log_tag,
                )

    def publish(self, text: str, media: List[MediaRef], config: Dict[str, Any]) -> str:
        privacy = (config.get("privacy_level") or config.get("privacy") or "PUBLIC_TO_EVERYONE").upper()
        token = self.destination.access_token
        videos = [m for m in media if m.is_video]

        if not videos:
            images = [m.url for m in media if m.is_image]
            init = self._with_private_fallback(
                lambda p: TikTokAdapter.init_photo_post(
                    access_token=token,
                    post_text=text,
                    image_urls=images,
                    privacy_level=p,
                    options=config,
                    log_tag=self.log_tag,
                ),
                privacy,
            )
            publish_id = (init.get("data") or {}).get("publish_id")
            if not publish_id:
                raise ProtocolError("TikTok photo init returned no publish_id", payload=init)
            return self._await_publish(publish_id)

        video = videos[0]
        with buffered_download(video.url, log_tag=self.log_tag) as (path, size):
            chunk_size, chunk_count = chunk_plan(size)
            init = self._with_private_fallback(
                lambda p: TikTokAdapter.init_video_post(
                    access_token=token,
                    post_text=text,
                    video_size_bytes=size,
                    chunk_size=chunk_size,
                    total_chunk_count=chunk_count,
                    privacy_level=p,
                    options=config,
                    log_tag=self.log_tag,
                ),
                privacy,
            )
            data = init.get("data") or {}
            publish_id = data.get("publish_id")
            upload_url = data.get("upload_url")
            if not publish_id or not upload_url:
                raise ProtocolError("TikTok video init returned no upload_url", payload=init)

            self._upload_file(path, size, upload_url, chunk_size, chunk_count, video.mime_type or "video/mp4")

        return self._await_publish(publish_id)
