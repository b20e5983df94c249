# crosspost/services/social/platforms/threads.py

from typing import Any, Dict, List

from ..adapters.threads_adapter import ThreadsAdapter
from ..errors import MediaValidationError, ProtocolError
from ..media_resolver import MediaRef
from ..publisher_base import SocialPublisherBase


CAROUSEL_MAX = 20
TEXT_LIMIT = 500


class ThreadsPublisher(SocialPublisherBase):
    PLATFORM = "threads"

    def validate(self, text: str, media: List[MediaRef], config: Dict[str, Any]) -> None:
        if not media and not (text or "").strip():
            raise MediaValidationError("Threads post needs text or media")
        if len(media) > CAROUSEL_MAX:
            raise MediaValidationError(f"Threads carousel allows at most {CAROUSEL_MAX} items")

    def _status(self, creation_id: str):
        raw = ThreadsAdapter.get_container_status(creation_id, self.destination.access_token, log_tag=self.log_tag)
        return (raw.get("status") or ""), raw

    def _create(self, **kwargs) -> str:
        resp = ThreadsAdapter.create_container(
            self.destination.account_id,
            self.destination.access_token,
            log_tag=self.log_tag,
            **kwargs,
        )
        creation_id = resp.get("id")
        if not creation_id:
            raise ProtocolError("Threads container create returned no id", payload=resp)
        return str(creation_id)

    def publish(self, text: str, media: List[MediaRef], config: Dict[str, Any]) -> str:
        text = (text or "")[:TEXT_LIMIT]

        if len(media) > 1:
            children = []
            for item in media:
                if item.is_video:
                    child = self._create(media_type="VIDEO", video_url=item.url, is_carousel_item=True)
                    self.await_container(child, self._status)
                else:
                    child = self._create(media_type="IMAGE", image_url=item.url, is_carousel_item=True)
                children.append(child)
            creation_id = self._create(media_type="CAROUSEL", text=text, children=children)
        elif media and media[0].is_video:
            creation_id = self._create(media_type="VIDEO", text=text, video_url=media[0].url)
        elif media:
            creation_id = self._create(media_type="IMAGE", text=text, image_url=media[0].url)
        else:
            creation_id = self._create(media_type="TEXT", text=text)

        self.await_container(creation_id, self._status)

        resp = ThreadsAdapter.publish_container(
            self.destination.account_id,
            self.destination.access_token,
            creation_id,
            log_tag=self.log_tag,
        )
        thread_id = resp.get("id")
        if not thread_id:
            raise ProtocolError("Threads publish returned no id", payload=resp)
        return str(thread_id)
