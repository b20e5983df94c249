# crosspost/services/social/registry.py
from .errors import UnsupportedPlatformError
from .platforms.bluesky import BlueskyPublisher
from .platforms.facebook import FacebookPublisher
from .platforms.instagram import InstagramPublisher
from .platforms.linkedin import LinkedInPublisher
from .platforms.pinterest import PinterestPublisher
from .platforms.threads import ThreadsPublisher
from .platforms.tiktok import TikTokPublisher
from .platforms.x import XPublisher
from .platforms.youtube import YouTubePublisher

PUBLISHERS = {
    "facebook": FacebookPublisher,
    "instagram": InstagramPublisher,
    "threads": ThreadsPublisher,
    "x": XPublisher,
    "linkedin": LinkedInPublisher,
    "pinterest": PinterestPublisher,
    "youtube": YouTubePublisher,
    "tiktok": TikTokPublisher,
    "bluesky": BlueskyPublisher,
}


def get_publisher(platform: str):
    cls = PUBLISHERS.get((platform or "").lower())
    if not cls:
        raise UnsupportedPlatformError(f"Unsupported platform: {platform}")
    return cls
