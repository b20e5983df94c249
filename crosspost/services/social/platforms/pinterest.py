# crosspost/services/social/platforms/pinterest.py

from typing import Any, Dict, List

from ..adapters.pinterest_adapter import PinterestAdapter
from ..errors import DestinationConnectionError, ProtocolError
from ..media_resolver import MediaRef
from ..publisher_base import SocialPublisherBase


class PinterestPublisher(SocialPublisherBase):
    PLATFORM = "pinterest"

    def _board_id(self, config: Dict[str, Any]) -> str:
        return config.get("board_id") or self.destination.meta.get("board_id") or ""

    def validate(self, text: str, media: List[MediaRef], config: Dict[str, Any]) -> None:
        self.require_image(media)
        if not self._board_id(config):
            raise DestinationConnectionError("Pinterest destination has no board_id")

    def publish(self, text: str, media: List[MediaRef], config: Dict[str, Any]) -> str:
        image = self.require_image(media)
        body = (text or "").strip()
        resp = PinterestAdapter.create_pin(
            self.destination.access_token,
            board_id=self._board_id(config),
            image_url=image.url,
            title=config.get("title") or body.split("\n")[0],
            description=body,
            link=config.get("link"),
            log_tag=self.log_tag,
        )
        pin_id = resp.get("id")
        if not pin_id:
            raise ProtocolError("Pinterest returned no pin id", payload=resp)
        return str(pin_id)
