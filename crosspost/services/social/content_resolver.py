# crosspost/services/social/content_resolver.py

from typing import Any, Dict


class ContentResolver:
    @staticmethod
    def resolve(post: Dict[str, Any], platform: str) -> str:
        """Platform override when it has non-blank text, else the shared body."""
        overrides = post.get("content_per_platform") or {}
        override = overrides.get(platform) if isinstance(overrides, dict) else None
        if isinstance(override, str) and override.strip():
            return override
        return post.get("content") or ""
