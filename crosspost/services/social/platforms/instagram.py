# crosspost/services/social/platforms/instagram.py

from typing import Any, Dict, List

from ..adapters.instagram_adapter import InstagramAdapter
from ..errors import MediaValidationError, ProtocolError
from ..media_resolver import MediaRef
from ..publisher_base import SocialPublisherBase


CAROUSEL_MIN = 2
CAROUSEL_MAX = 10


class InstagramPublisher(SocialPublisherBase):
    """
    Container flow: create -> poll status_code -> media_publish.

    post_type: feed (default), reel, story. More than one media item on a
    feed post becomes a carousel.
    """

    PLATFORM = "instagram"
    SUPPORTS_FIRST_COMMENT = True

    def validate(self, text: str, media: List[MediaRef], config: Dict[str, Any]) -> None:
        self.require_media(media)
        post_type = self.post_type(config)
        if post_type == "reel":
            self.require_video(media, "Instagram Reels")
        if post_type == "feed" and len(media) > 1 and not (CAROUSEL_MIN <= len(media) <= CAROUSEL_MAX):
            raise MediaValidationError(
                f"Instagram carousel needs {CAROUSEL_MIN} to {CAROUSEL_MAX} items, got {len(media)}"
            )

    def _status(self, creation_id: str):
        raw = InstagramAdapter.get_container_status(creation_id, self.destination.access_token, log_tag=self.log_tag)
        return (raw.get("status_code") or ""), raw

    def _create(self, **kwargs) -> str:
        resp = InstagramAdapter.create_media_container(
            self.destination.account_id,
            self.destination.access_token,
            log_tag=self.log_tag,
            **kwargs,
        )
        creation_id = resp.get("id")
        if not creation_id:
            raise ProtocolError("Instagram container create returned no id", payload=resp)
        return str(creation_id)

    def _create_single(self, item: MediaRef, caption: str, post_type: str) -> str:
        if post_type == "story":
            if item.is_video:
                return self._create(video_url=item.url, media_type="STORIES")
            return self._create(image_url=item.url, media_type="STORIES")

        if item.is_video:
            # plain feed videos are published as reels shared to the feed
            return self._create(
                caption=caption,
                video_url=item.url,
                media_type="REELS",
                share_to_feed=True if post_type == "feed" else None,
            )
        return self._create(caption=caption, image_url=item.url)

    def _create_carousel(self, media: List[MediaRef], caption: str) -> str:
        child_ids = []
        for item in media:
            if item.is_video:
                child_id = self._create(video_url=item.url, media_type="VIDEO", is_carousel_item=True)
                self.await_container(child_id, self._status)
            else:
                child_id = self._create(image_url=item.url, is_carousel_item=True)
            child_ids.append(child_id)

        return self._create(caption=caption, media_type="CAROUSEL", children=child_ids)

    def publish(self, text: str, media: List[MediaRef], config: Dict[str, Any]) -> str:
        post_type = self.post_type(config)

        if post_type == "feed" and len(media) > 1:
            creation_id = self._create_carousel(media, text)
        else:
            item = media[0]
            if post_type == "reel":
                item = self.require_video(media, "Instagram Reels")
            creation_id = self._create_single(item, text, post_type)

        self.await_container(creation_id, self._status)

        resp = InstagramAdapter.publish_container(
            self.destination.account_id,
            self.destination.access_token,
            creation_id,
            log_tag=self.log_tag,
        )
        media_id = resp.get("id")
        if not media_id:
            raise ProtocolError("Instagram publish returned no media id", payload=resp)
        return str(media_id)

    def post_first_comment(self, external_id: str, message: str):
        resp = InstagramAdapter.comment(external_id, self.destination.access_token, message, log_tag=self.log_tag)
        return resp.get("id")
