# crosspost/models/social/post.py

from datetime import timedelta
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument

from ..base_model import BaseModel
from ...constants.service_code import POST_STATUS
from ...utils.helpers import utc_now


class Post(BaseModel):
    """
    One logical content item.

      {
        "channel_id", "author_id",
        "content": "shared text",
        "content_per_platform": {"x": "short text"},
        "media": [{"url", "asset_type", "mime_type", "filename", "media_id"}],
        "status": draft|scheduled|publishing|published|failed,
        "scheduled_at", "published_at",
        "is_repeat", "repeat_interval_days", "repeat_count",
      }
    """

    collection_name = "posts"

    STATUS_DRAFT = POST_STATUS["DRAFT"]
    STATUS_SCHEDULED = POST_STATUS["SCHEDULED"]
    STATUS_PUBLISHING = POST_STATUS["PUBLISHING"]
    STATUS_PUBLISHED = POST_STATUS["PUBLISHED"]
    STATUS_FAILED = POST_STATUS["FAILED"]

    REF_FIELDS = ("channel_id", "author_id", "repeat_of")

    @classmethod
    def get_by_id(cls, post_id) -> Optional[Dict[str, Any]]:
        oid = cls.to_object_id(post_id)
        if oid is None:
            return None
        doc = cls.get_collection().find_one({"_id": oid})
        return cls.normalise(doc, *cls.REF_FIELDS)

    @classmethod
    def update_status(cls, post_id, status: str, **fields) -> bool:
        update = {"status": status, "updated_at": utc_now()}
        update.update(fields)
        res = cls.get_collection().update_one(
            {"_id": cls.to_object_id(post_id)},
            {"$set": update},
        )
        return res.modified_count > 0

    @classmethod
    def claim_due(cls, now=None, limit: int = 100) -> List[Dict[str, Any]]:
        """
        Flip due scheduled posts to publishing one at a time. A post another
        poller already claimed is skipped because the filter no longer matches.
        """
        now = now or utc_now()
        col = cls.get_collection()
        candidates = col.find(
            {"status": cls.STATUS_SCHEDULED, "scheduled_at": {"$lte": now}},
            {"_id": 1},
        ).sort("scheduled_at", 1).limit(limit)

        claimed = []
        for c in candidates:
            doc = col.find_one_and_update(
                {"_id": c["_id"], "status": cls.STATUS_SCHEDULED},
                {"$set": {"status": cls.STATUS_PUBLISHING, "updated_at": utc_now()}},
                return_document=ReturnDocument.AFTER,
            )
            if doc:
                claimed.append(cls.normalise(doc, *cls.REF_FIELDS))
        return claimed

    @classmethod
    def clone_for_repeat(cls, post: Dict[str, Any]) -> Optional[str]:
        """
        Insert the next occurrence of a repeat post as scheduled.
        Returns the new post id, or None when the series is exhausted.
        """
        if not post.get("is_repeat"):
            return None

        interval = int(post.get("repeat_interval_days") or 0)
        remaining = post.get("repeat_count")
        if interval <= 0:
            return None
        if remaining is not None and int(remaining) <= 0:
            return None

        base = post.get("scheduled_at") or utc_now()
        now = utc_now()
        doc = {
            "channel_id": cls.to_object_id(post.get("channel_id")),
            "author_id": cls.to_object_id(post.get("author_id")),
            "content": post.get("content") or "",
            "content_per_platform": post.get("content_per_platform") or {},
            "media": post.get("media") or [],
            "status": cls.STATUS_SCHEDULED,
            "scheduled_at": base + timedelta(days=interval),
            "published_at": None,
            "is_repeat": remaining is None or int(remaining) - 1 > 0,
            "repeat_interval_days": interval,
            "repeat_count": (int(remaining) - 1) if remaining is not None else None,
            "repeat_of": cls.to_object_id(post.get("_id")),
            "created_at": now,
            "updated_at": now,
        }
        res = cls.get_collection().insert_one(doc)
        return str(res.inserted_id)
