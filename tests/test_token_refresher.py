"""Tests for pre-publish token refresh."""

from unittest.mock import MagicMock, patch

from crosspost.services.social import token_refresher
from crosspost.services.social.destination import BearerCredentials, Destination, SignedCredentials
from crosspost.services.social.token_refresher import TokenRefresher


def destination(platform="youtube", refresh_token="r-1", record_id="acc-1"):
    return Destination(
        platform=platform,
        account_id="chan-1",
        credentials=BearerCredentials("old-token", refresh_token=refresh_token),
        record_id=record_id,
    )


class TestTokenRefresher:
    def test_no_refresh_token_is_unchanged(self):
        refresh = MagicMock()
        with patch.dict(token_refresher.REFRESHERS, {"youtube": refresh}):
            dest = destination(refresh_token=None)
            assert TokenRefresher.ensure(dest) is dest
        refresh.assert_not_called()

    def test_network_without_refresh_is_unchanged(self):
        dest = destination(platform="facebook")
        assert TokenRefresher.ensure(dest) is dest

    def test_signed_credentials_are_never_refreshed(self):
        dest = Destination(platform="x", account_id="1", credentials=SignedCredentials("a", "b", "c", "d"))
        assert TokenRefresher.ensure(dest) is dest

    @patch("crosspost.services.social.token_refresher.SocialAccount.update_tokens")
    def test_refreshed_token_is_persisted_and_used(self, update_tokens):
        refresh = MagicMock(return_value={"access_token": "new-token", "expires_in": 3600})
        with patch.dict(token_refresher.REFRESHERS, {"youtube": refresh}):
            fresh = TokenRefresher.ensure(destination())

        refresh.assert_called_once_with("r-1")
        assert fresh.access_token == "new-token"
        assert fresh.refresh_token == "r-1"
        assert fresh.credentials.expires_at is not None
        args, kwargs = update_tokens.call_args
        assert args == ("acc-1",)
        assert kwargs["access_token"] == "new-token"
        assert kwargs["refresh_token"] == "r-1"

    @patch("crosspost.services.social.token_refresher.SocialAccount.update_tokens")
    def test_rotated_refresh_token_is_kept(self, update_tokens):
        refresh = MagicMock(return_value={"access_token": "new", "refresh_token": "r-2"})
        with patch.dict(token_refresher.REFRESHERS, {"tiktok": refresh}):
            fresh = TokenRefresher.ensure(destination(platform="tiktok"))

        assert fresh.refresh_token == "r-2"
        assert update_tokens.call_args[1]["refresh_token"] == "r-2"

    @patch("crosspost.services.social.token_refresher.SocialAccount.update_tokens")
    def test_refresh_failure_falls_back_to_stored_token(self, update_tokens):
        refresh = MagicMock(side_effect=RuntimeError("invalid_grant"))
        with patch.dict(token_refresher.REFRESHERS, {"youtube": refresh}):
            dest = destination()
            assert TokenRefresher.ensure(dest) is dest
        update_tokens.assert_not_called()

    @patch("crosspost.services.social.token_refresher.SocialAccount.update_tokens")
    def test_persist_failure_still_uses_new_token(self, update_tokens):
        update_tokens.side_effect = RuntimeError("mongo down")
        refresh = MagicMock(return_value={"access_token": "new-token"})
        with patch.dict(token_refresher.REFRESHERS, {"linkedin": refresh}):
            fresh = TokenRefresher.ensure(destination(platform="linkedin"))
        assert fresh.access_token == "new-token"
