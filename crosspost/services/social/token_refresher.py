# crosspost/services/social/token_refresher.py

from __future__ import annotations

from datetime import timedelta
from typing import Any, Callable, Dict

from ...models.social.social_account import SocialAccount
from ...utils.helpers import utc_now
from ...utils.logger import Log
from .adapters.bluesky_adapter import BlueskyAdapter
from .adapters.linkedin_adapter import LinkedInAdapter
from .adapters.pinterest_adapter import PinterestAdapter
from .adapters.tiktok_adapter import TikTokAdapter
from .adapters.youtube_adapter import YouTubeAdapter
from .destination import BearerCredentials, Destination


# platform -> fn(refresh_token) -> {"access_token", "refresh_token"?, "expires_in"?}
REFRESHERS: Dict[str, Callable[[str], Dict[str, Any]]] = {
    "youtube": YouTubeAdapter.refresh_access_token,
    "tiktok": TikTokAdapter.refresh_access_token,
    "linkedin": LinkedInAdapter.refresh_access_token,
    "pinterest": PinterestAdapter.refresh_access_token,
    "bluesky": BlueskyAdapter.refresh_session,
}


class TokenRefresher:
    @staticmethod
    def ensure(destination: Destination, log_tag: str = "") -> Destination:
        """
        Swap in a freshly refreshed access token when the network supports it.
        Any refresh failure keeps the stored token; the publish call will
        report its own auth error if that token is dead.
        """
        creds = destination.credentials
        if not isinstance(creds, BearerCredentials) or not creds.refresh_token:
            return destination

        refresh_fn = REFRESHERS.get(destination.platform)
        if refresh_fn is None:
            return destination

        try:
            tokens = refresh_fn(creds.refresh_token)
        except Exception as e:
            Log.warning(f"{log_tag} token refresh failed, using stored token: {e}")
            return destination

        access_token = tokens.get("access_token")
        if not access_token:
            Log.warning(f"{log_tag} token refresh returned no access_token, using stored token")
            return destination

        expires_at = None
        if tokens.get("expires_in"):
            expires_at = utc_now() + timedelta(seconds=int(tokens["expires_in"]))

        new_refresh = tokens.get("refresh_token") or creds.refresh_token

        if destination.record_id:
            try:
                SocialAccount.update_tokens(
                    destination.record_id,
                    access_token=access_token,
                    refresh_token=new_refresh,
                    expires_at=expires_at,
                )
            except Exception as e:
                Log.warning(f"{log_tag} refreshed token could not be persisted: {e}")

        Log.info(f"{log_tag} access token refreshed")
        return destination.with_access_token(access_token, refresh_token=new_refresh, expires_at=expires_at)
