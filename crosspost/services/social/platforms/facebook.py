# crosspost/services/social/platforms/facebook.py

from typing import Any, Dict, List

from ..adapters.facebook_adapter import FacebookAdapter
from ..errors import MediaValidationError, ProtocolError
from ..media_resolver import MediaRef
from ..publisher_base import SocialPublisherBase


class FacebookPublisher(SocialPublisherBase):
    PLATFORM = "facebook"
    SUPPORTS_FIRST_COMMENT = True

    def validate(self, text: str, media: List[MediaRef], config: Dict[str, Any]) -> None:
        if self.post_type(config) == "reel":
            self.require_video(media, "Facebook Reels")
        elif not media and not (text or "").strip():
            raise MediaValidationError("Facebook post needs text or media")

    def publish(self, text: str, media: List[MediaRef], config: Dict[str, Any]) -> str:
        page_id = self.destination.account_id
        token = self.destination.access_token

        if self.post_type(config) == "reel":
            video = self.require_video(media, "Facebook Reels")
            start = FacebookAdapter.reel_start(page_id, token, log_tag=self.log_tag)
            video_id = start.get("video_id")
            if not video_id:
                raise ProtocolError("Facebook reel start returned no video_id", payload=start)
            FacebookAdapter.reel_transfer_from_url(video_id, token, video.url, log_tag=self.log_tag)
            FacebookAdapter.reel_finish(page_id, token, video_id, text, log_tag=self.log_tag)
            return str(video_id)

        if media and media[0].is_video:
            resp = FacebookAdapter.post_video(page_id, token, media[0].url, text, log_tag=self.log_tag)
        elif media:
            resp = FacebookAdapter.post_photo(page_id, token, media[0].url, text, log_tag=self.log_tag)
        else:
            resp = FacebookAdapter.post_feed(page_id, token, text, link=config.get("link"), log_tag=self.log_tag)

        external_id = resp.get("post_id") or resp.get("id")
        if not external_id:
            raise ProtocolError("Facebook returned no post id", payload=resp)
        return str(external_id)

    def post_first_comment(self, external_id: str, message: str):
        resp = FacebookAdapter.comment(external_id, self.destination.access_token, message, log_tag=self.log_tag)
        return resp.get("id")
