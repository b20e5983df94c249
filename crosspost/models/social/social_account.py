# crosspost/models/social/social_account.py

from typing import Any, Dict, Optional

from ..base_model import BaseModel
from ...utils.crypt import CredentialDecryptError, decrypt_optional, encrypt_data
from ...utils.helpers import utc_now
from ...utils.logger import Log


class SocialAccount(BaseModel):
    """
    One connected destination account per document.

      - Facebook Page:  platform="facebook",  account_id="<PAGE_ID>"
      - Instagram:      platform="instagram", account_id="<IG_USER_ID>"
      - YouTube:        platform="youtube",   account_id="<CHANNEL_ID>"
      - X:              platform="x",         account_id="<USER_ID>", credentials={4 keys}
      - Bluesky:        platform="bluesky",   account_id="<DID>"

    `access_token`, `refresh_token` and `credentials` are encrypted at rest.
    """

    collection_name = "social_accounts"

    @classmethod
    def get_by_account(cls, channel_id, platform: str, account_id: str) -> Optional[Dict[str, Any]]:
        doc = cls.get_collection().find_one({
            "channel_id": cls.to_object_id(channel_id),
            "platform": platform,
            "account_id": str(account_id),
            "is_active": {"$ne": False},
        })
        if not doc:
            return None

        cls.normalise(doc, "channel_id")

        # Decrypt on read for internal use only. An unreadable field counts as
        # missing, so Destination.from_account reports the connection as broken.
        for field in ("access_token", "refresh_token", "credentials"):
            try:
                doc[f"{field}_plain"] = decrypt_optional(doc.get(field))
            except CredentialDecryptError as e:
                Log.warning(f"[social_account.py][get_by_account][{platform}:{account_id}] {field}: {e}")
                doc[f"{field}_plain"] = None
        return doc

    @classmethod
    def update_tokens(cls, record_id, *, access_token: str, refresh_token: Optional[str] = None, expires_at=None) -> bool:
        update = {
            "access_token": encrypt_data(access_token),
            "updated_at": utc_now(),
        }
        if refresh_token:
            update["refresh_token"] = encrypt_data(refresh_token)
        if expires_at is not None:
            update["token_expires_at"] = expires_at

        res = cls.get_collection().update_one(
            {"_id": cls.to_object_id(record_id)},
            {"$set": update},
        )
        return res.modified_count > 0
