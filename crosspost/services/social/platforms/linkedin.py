# crosspost/services/social/platforms/linkedin.py

from typing import Any, Dict, List

from ..adapters.linkedin_adapter import LinkedInAdapter
from ..errors import MediaValidationError
from ..media_resolver import MediaRef
from ..publisher_base import SocialPublisherBase
from ..upload_strategies import buffered_download


class LinkedInPublisher(SocialPublisherBase):
    PLATFORM = "linkedin"

    @property
    def label(self) -> str:
        return "LinkedIn"

    @property
    def author_urn(self) -> str:
        account_id = self.destination.account_id
        if account_id.startswith("urn:li:"):
            return account_id
        kind = (self.destination.meta.get("author_type") or "person").lower()
        return f"urn:li:{'organization' if kind == 'organization' else 'person'}:{account_id}"

    def validate(self, text: str, media: List[MediaRef], config: Dict[str, Any]) -> None:
        if len(media) > 1:
            raise MediaValidationError("LinkedIn allows at most one image or video per post")
        if not media and not (text or "").strip():
            raise MediaValidationError("LinkedIn post needs text or media")

    def publish(self, text: str, media: List[MediaRef], config: Dict[str, Any]) -> str:
        token = self.destination.access_token
        author = self.author_urn
        visibility = (config.get("visibility") or "PUBLIC").upper()

        if not media:
            return LinkedInAdapter.create_ugc_post(token, author, text, visibility=visibility, log_tag=self.log_tag)

        item = media[0]
        reg = LinkedInAdapter.register_upload(token, author, is_video=item.is_video, log_tag=self.log_tag)

        with buffered_download(item.url, log_tag=self.log_tag) as (path, size):
            with open(path, "rb") as fh:
                LinkedInAdapter.upload_binary(
                    token,
                    reg["upload_url"],
                    fh,
                    size,
                    item.mime_type or ("video/mp4" if item.is_video else "image/jpeg"),
                    log_tag=self.log_tag,
                )

        return LinkedInAdapter.create_ugc_post(
            token,
            author,
            text,
            media_category="VIDEO" if item.is_video else "IMAGE",
            assets=[reg["asset"]],
            visibility=visibility,
            log_tag=self.log_tag,
        )
