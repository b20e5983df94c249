# crosspost/services/social/publisher_base.py

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple

from ...config import Config
from .destination import Destination
from .errors import MediaValidationError, ProcessingFailedError, ProcessingTimeoutError
from .media_resolver import MediaRef
from .poller import FAILED, READY, wait_until_ready


class SocialPublisherBase:
    """
    One subclass per network, registered in `registry.PUBLISHERS`.

    `run()` validates the media, then calls `publish()`, and returns the
    network's own id for the created object. Subclasses raise PublishError
    subclasses; the coordinator records the message on the outcome.
    """

    PLATFORM: str = ""
    SUPPORTS_FIRST_COMMENT = False

    def __init__(self, destination: Destination, log_tag: str = ""):
        self.destination = destination
        self.log_tag = log_tag

    # ----------------------------------------
    # Entry point
    # ----------------------------------------
    def run(self, text: str, media: List[MediaRef], config: Optional[Dict[str, Any]] = None) -> str:
        config = config or {}
        self.validate(text, media, config)
        return self.publish(text, media, config)

    def validate(self, text: str, media: List[MediaRef], config: Dict[str, Any]) -> None:
        return None

    def publish(self, text: str, media: List[MediaRef], config: Dict[str, Any]) -> str:
        raise NotImplementedError

    def post_first_comment(self, external_id: str, message: str) -> Optional[str]:
        raise NotImplementedError(f"{self.PLATFORM} does not support first comments")

    # ----------------------------------------
    # Shared helpers
    # ----------------------------------------
    @property
    def label(self) -> str:
        return self.PLATFORM.capitalize()

    @staticmethod
    def post_type(config: Dict[str, Any], default: str = "feed") -> str:
        return (config.get("post_type") or config.get("placement") or default).lower()

    def require_media(self, media: List[MediaRef]) -> None:
        if not media:
            raise MediaValidationError(f"{self.label} requires at least one image or video")

    def require_video(self, media: List[MediaRef], what: str = "") -> MediaRef:
        videos = [m for m in media if m.is_video]
        if not videos:
            raise MediaValidationError(f"{what or self.label} requires a video attachment")
        return videos[0]

    def require_image(self, media: List[MediaRef], what: str = "") -> MediaRef:
        images = [m for m in media if m.is_image]
        if not images:
            raise MediaValidationError(f"{what or self.label} requires an image attachment")
        return images[0]

    def await_container(
        self,
        container_id: str,
        check_fn: Callable[[str], Tuple[str, Dict[str, Any]]],
        *,
        max_attempts: Optional[int] = None,
        interval_seconds: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Poll a staged container; raise on ERROR or when the budget runs out."""
        attempts = max_attempts or Config.CONTAINER_POLL_ATTEMPTS
        result, raw = wait_until_ready(
            container_id,
            check_fn,
            attempts,
            Config.CONTAINER_POLL_INTERVAL_SECONDS if interval_seconds is None else interval_seconds,
            log_tag=self.log_tag,
        )
        if result == READY:
            return raw
        if result == FAILED:
            detail = (
                raw.get("error_message") or raw.get("status") or raw.get("fail_reason")
                or raw.get("status_code") or "unknown error"
            )
            raise ProcessingFailedError(f"{self.label} media processing failed: {detail}")
        raise ProcessingTimeoutError(
            f"{self.label} media was still processing after {attempts} status checks"
        )
