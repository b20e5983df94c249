# crosspost/services/social/publish_coordinator.py

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Tuple

from ...config import Config
from ...models.social.post import Post
from ...models.social.post_platform_status import PostPlatformStatus
from ...models.social.social_account import SocialAccount
from ...utils.helpers import make_log_tag, utc_now
from ...utils.logger import Log
from .content_resolver import ContentResolver
from .destination import Destination
from .errors import DestinationConnectionError, PostNotFoundError
from .media_resolver import MediaRef, MediaResolver
from .registry import get_publisher
from .side_effects import PostPublishSideEffects, PublishedOutcome
from .token_refresher import TokenRefresher


CONNECTION_NOT_FOUND = "Platform connection not found"


class PublishCoordinator:
    """
    Drives one post through every pending destination.

    Each destination is attempted inside its own try block and its outcome
    row is written as soon as it is known. The post status is derived from
    all outcome rows once every pending one has been attempted.
    """

    def __init__(self, max_workers: Optional[int] = None, side_effects: Optional[PostPublishSideEffects] = None):
        self.max_workers = max(1, int(max_workers or Config.PUBLISH_MAX_WORKERS or 1))
        self.side_effects = side_effects or PostPublishSideEffects()

    def run(self, post_id: str, actor: Optional[str] = None) -> Dict[str, Any]:
        log_tag = make_log_tag("publish_coordinator.py", "run", post=post_id, actor=actor)

        post = Post.get_by_id(post_id)
        if not post:
            raise PostNotFoundError(f"Post {post_id} not found")

        Post.update_status(post_id, Post.STATUS_PUBLISHING)

        outcomes = PostPlatformStatus.list_by_post(post_id)
        pending = [o for o in outcomes if o.get("status") == PostPlatformStatus.STATUS_PENDING]
        media = MediaResolver.resolve(post.get("media"))

        Log.info(f"{log_tag} publishing to {len(pending)} destination(s), {len(media)} media item(s)")

        attempts = self._attempt_all(post, pending, media)

        results = [result for result, _ in attempts]
        published = [p for _, p in attempts if p is not None]

        # terminal state of every row, including ones settled by an earlier pass
        attempted = {r["outcome_id"]: r["success"] for r in results}
        any_published = False
        for o in outcomes:
            if o["_id"] in attempted:
                any_published = any_published or attempted[o["_id"]]
            elif o.get("status") == PostPlatformStatus.STATUS_PUBLISHED:
                any_published = True

        if any_published:
            status = Post.STATUS_PUBLISHED
            Post.update_status(post_id, status, published_at=utc_now())
        else:
            status = Post.STATUS_FAILED
            Post.update_status(post_id, status)

        all_published = bool(results) and all(r["success"] for r in results)
        Log.info(f"{log_tag} finished status={status} ok={len(published)}/{len(results)}")

        try:
            self.side_effects.run(post, published, results, actor)
        except Exception as e:
            Log.warning(f"{log_tag} side effects failed: {e}")

        return {
            "post_id": post_id,
            "status": status,
            "success": any_published,
            "results": [self._public_result(r) for r in results],
            "all_published": all_published,
        }

    # ----------------------------------------
    # Per-destination
    # ----------------------------------------
    def _attempt_all(self, post, pending, media) -> List[Tuple[Dict[str, Any], Optional[PublishedOutcome]]]:
        if self.max_workers == 1 or len(pending) <= 1:
            return [self._attempt(post, outcome, media) for outcome in pending]

        # results keep enqueue order regardless of completion order
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(pending))) as pool:
            futures = [pool.submit(self._attempt, post, outcome, media) for outcome in pending]
            return [f.result() for f in futures]

    def _attempt(self, post: Dict[str, Any], outcome: Dict[str, Any], media: List[MediaRef]):
        platform = (outcome.get("platform") or "").lower()
        account_id = str(outcome.get("account_id") or "")
        outcome_id = outcome["_id"]
        log_tag = make_log_tag(
            "publish_coordinator.py", "_attempt",
            post=post.get("_id"), platform=platform, account=account_id,
        )

        result: Dict[str, Any] = {
            "outcome_id": outcome_id,
            "platform": platform,
            "account_id": account_id,
            "success": False,
            "external_id": None,
            "error": None,
        }
        published = None

        try:
            publisher_cls = get_publisher(platform)

            account = SocialAccount.get_by_account(post.get("channel_id"), platform, account_id)
            if not account:
                raise DestinationConnectionError(CONNECTION_NOT_FOUND)

            destination = Destination.from_account(account, outcome.get("config"))
            destination = TokenRefresher.ensure(destination, log_tag)

            text = ContentResolver.resolve(post, platform)
            publisher = publisher_cls(destination, log_tag=log_tag)
            external_id = publisher.run(text, media, destination.config)

            result["success"] = True
            result["external_id"] = external_id
            published = PublishedOutcome(
                platform=platform,
                account_id=account_id,
                external_id=external_id,
                publisher=publisher,
                config=destination.config,
            )
            Log.info(f"{log_tag} published external_id={external_id}")
        except Exception as e:
            result["error"] = str(e) or e.__class__.__name__
            Log.error(f"{log_tag} failed: {result['error']}")

        self._record(outcome_id, result, log_tag)
        return result, published

    @staticmethod
    def _record(outcome_id: str, result: Dict[str, Any], log_tag: str) -> None:
        try:
            if result["success"]:
                PostPlatformStatus.mark_published(outcome_id, result["external_id"])
            else:
                PostPlatformStatus.mark_failed(outcome_id, result["error"])
        except Exception as e:
            Log.error(f"{log_tag} could not persist outcome {outcome_id}: {e}")

    @staticmethod
    def _public_result(result: Dict[str, Any]) -> Dict[str, Any]:
        out = {
            "platform": result["platform"],
            "account_id": result["account_id"],
            "success": result["success"],
        }
        if result["success"]:
            out["external_id"] = result["external_id"]
        else:
            out["error"] = result["error"]
        return out
