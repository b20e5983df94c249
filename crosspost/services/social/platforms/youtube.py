# crosspost/services/social/platforms/youtube.py

from typing import Any, Dict, List

from ..adapters.youtube_adapter import YouTubeAdapter
from ..errors import ProtocolError
from ..media_resolver import MediaRef
from ..publisher_base import SocialPublisherBase
from ..upload_strategies import buffered_download


TITLE_LIMIT = 100
DESCRIPTION_LIMIT = 5000


class YouTubePublisher(SocialPublisherBase):
    PLATFORM = "youtube"
    SUPPORTS_FIRST_COMMENT = True

    @property
    def label(self) -> str:
        return "YouTube"

    def validate(self, text: str, media: List[MediaRef], config: Dict[str, Any]) -> None:
        self.require_video(media)

    def publish(self, text: str, media: List[MediaRef], config: Dict[str, Any]) -> str:
        video = self.require_video(media)

        title = (config.get("title") or (text or "").strip().split("\n")[0] or "New video")[:TITLE_LIMIT]
        description = (text or "")[:DESCRIPTION_LIMIT]

        with buffered_download(video.url, log_tag=self.log_tag) as (path, size):
            with open(path, "rb") as fh:
                resp = YouTubeAdapter.upload_video(
                    access_token=self.destination.access_token,
                    file_obj=fh,
                    size_bytes=size,
                    content_type=video.mime_type or "video/mp4",
                    title=title,
                    description=description,
                    privacy_status=(config.get("privacy") or config.get("privacy_status") or "public").lower(),
                    tags=config.get("tags"),
                    made_for_kids=bool(config.get("made_for_kids", False)),
                    log_tag=self.log_tag,
                )

        video_id = resp.get("id")
        if not video_id:
            raise ProtocolError("YouTube upload returned no video id", payload=resp)
        return str(video_id)

    def post_first_comment(self, external_id: str, message: str):
        resp = YouTubeAdapter.comment(external_id, self.destination.access_token, message, log_tag=self.log_tag)
        return resp.get("id")
