# crosspost/models/social/post_platform_status.py

from typing import Any, Dict, List, Optional

from ..base_model import BaseModel
from ...constants.service_code import OUTCOME_STATUS
from ...utils.helpers import utc_now


class PostPlatformStatus(BaseModel):
    """
    Outcome of one post on one destination account.

    Transitions pending -> published|failed. Writes filter on `status: pending`
    so a terminal row is never rewritten.
    """

    collection_name = "post_platform_statuses"

    STATUS_PENDING = OUTCOME_STATUS["PENDING"]
    STATUS_PUBLISHED = OUTCOME_STATUS["PUBLISHED"]
    STATUS_FAILED = OUTCOME_STATUS["FAILED"]

    @classmethod
    def list_by_post(cls, post_id) -> List[Dict[str, Any]]:
        cursor = cls.get_collection().find(
            {"post_id": cls.to_object_id(post_id)}
        ).sort("created_at", 1)
        return [cls.normalise(doc, "post_id") for doc in cursor]

    @classmethod
    def create_pending(cls, post_id, platform: str, account_id: str, config: Optional[dict] = None) -> str:
        now = utc_now()
        res = cls.get_collection().insert_one({
            "post_id": cls.to_object_id(post_id),
            "platform": platform,
            "account_id": str(account_id),
            "status": cls.STATUS_PENDING,
            "external_id": None,
            "error_msg": None,
            "published_at": None,
            "config": config or {},
            "created_at": now,
            "updated_at": now,
        })
        return str(res.inserted_id)

    @classmethod
    def mark_published(cls, outcome_id, external_id) -> bool:
        now = utc_now()
        res = cls.get_collection().update_one(
            {"_id": cls.to_object_id(outcome_id), "status": cls.STATUS_PENDING},
            {"$set": {
                "status": cls.STATUS_PUBLISHED,
                "external_id": None if external_id is None else str(external_id),
                "error_msg": None,
                "published_at": now,
                "updated_at": now,
            }},
        )
        return res.modified_count > 0

    @classmethod
    def mark_failed(cls, outcome_id, error_msg: str) -> bool:
        res = cls.get_collection().update_one(
            {"_id": cls.to_object_id(outcome_id), "status": cls.STATUS_PENDING},
            {"$set": {
                "status": cls.STATUS_FAILED,
                "error_msg": error_msg,
                "updated_at": utc_now(),
            }},
        )
        return res.modified_count > 0
