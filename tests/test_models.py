"""Tests for the Mongo-backed models used by a publish pass."""

from unittest.mock import MagicMock, patch

from bson import ObjectId

from crosspost.models.social.post_platform_status import PostPlatformStatus
from crosspost.models.social.social_account import SocialAccount
from crosspost.utils.crypt import encrypt_data


CHANNEL_ID = str(ObjectId())


class TestSocialAccount:
    @patch("crosspost.models.social.social_account.SocialAccount.get_collection")
    def test_tokens_and_bundle_are_decrypted(self, get_collection):
        get_collection.return_value.find_one.return_value = {
            "_id": ObjectId(),
            "channel_id": ObjectId(CHANNEL_ID),
            "platform": "x",
            "account_id": "42",
            "access_token": encrypt_data("at"),
            "credentials": encrypt_data({"apiKey": "k", "accessTokenSecret": "s"}),
        }

        doc = SocialAccount.get_by_account(CHANNEL_ID, "x", "42")

        assert doc["access_token_plain"] == "at"
        assert doc["refresh_token_plain"] is None
        assert doc["credentials_plain"] == {"apiKey": "k", "accessTokenSecret": "s"}
        assert doc["channel_id"] == CHANNEL_ID

    @patch("crosspost.models.social.social_account.SocialAccount.get_collection")
    def test_unreadable_token_counts_as_missing(self, get_collection):
        get_collection.return_value.find_one.return_value = {
            "_id": ObjectId(),
            "platform": "youtube",
            "account_id": "UC1",
            "access_token": "bm90LXNlYWxlZC13aXRoLW91ci1rZXk=",
        }

        doc = SocialAccount.get_by_account(CHANNEL_ID, "youtube", "UC1")

        assert doc["access_token_plain"] is None

    @patch("crosspost.models.social.social_account.SocialAccount.get_collection")
    def test_refreshed_tokens_are_stored_encrypted(self, get_collection):
        get_collection.return_value.update_one.return_value = MagicMock(modified_count=1)

        assert SocialAccount.update_tokens(str(ObjectId()), access_token="new", refresh_token="r2") is True

        update = get_collection.return_value.update_one.call_args[0][1]["$set"]
        assert update["access_token"] != "new"
        assert update["refresh_token"] != "r2"
        assert "token_expires_at" not in update


class TestPostPlatformStatus:
    @patch("crosspost.models.social.post_platform_status.PostPlatformStatus.get_collection")
    def test_terminal_rows_are_never_rewritten(self, get_collection):
        get_collection.return_value.update_one.return_value = MagicMock(modified_count=0)
        outcome_id = str(ObjectId())

        assert PostPlatformStatus.mark_failed(outcome_id, "boom") is False

        query, update = get_collection.return_value.update_one.call_args[0]
        assert query == {"_id": ObjectId(outcome_id), "status": "pending"}
        assert update["$set"]["status"] == "failed"

    @patch("crosspost.models.social.post_platform_status.PostPlatformStatus.get_collection")
    def test_published_external_id_is_stored_verbatim_as_text(self, get_collection):
        get_collection.return_value.update_one.return_value = MagicMock(modified_count=1)

        PostPlatformStatus.mark_published(str(ObjectId()), 1789)

        update = get_collection.return_value.update_one.call_args[0][1]["$set"]
        assert update["external_id"] == "1789"
        assert update["published_at"] is not None
