# crosspost/tasks/social/publish_job.py

from __future__ import annotations

from typing import Any, Dict, Optional

from ...extensions.queue import enqueue
from ...models.social.post import Post
from ...models.social.post_platform_status import PostPlatformStatus
from ...services.social.appctx import run_in_app_context
from ...services.social.publish_coordinator import PublishCoordinator
from ...utils.helpers import make_log_tag, utc_now
from ...utils.logger import Log


PUBLISH_JOB = "crosspost.tasks.social.publish_job.publish_post_job"
DUE_BATCH_LIMIT = 100


def schedule_next_repeat(post: Dict[str, Any]) -> Optional[str]:
    """Clone a repeat post as the next scheduled occurrence with fresh pending outcomes."""
    new_id = Post.clone_for_repeat(post)
    if not new_id:
        return None

    for outcome in PostPlatformStatus.list_by_post(post["_id"]):
        PostPlatformStatus.create_pending(
            new_id,
            outcome.get("platform"),
            outcome.get("account_id"),
            outcome.get("config"),
        )
    return new_id


def _publish_post(post_id: str, triggered_by: Optional[str]) -> Dict[str, Any]:
    log_tag = make_log_tag("publish_job.py", "publish_post_job", post=post_id, trigger=triggered_by)

    post = Post.get_by_id(post_id)
    if not post:
        Log.info(f"{log_tag} post not found, nothing to do")
        return {"post_id": post_id, "skipped": "not_found"}

    if post.get("status") != Post.STATUS_PUBLISHING:
        Log.info(f"{log_tag} post is {post.get('status')}, not publishing; skipping")
        return {"post_id": post_id, "skipped": post.get("status")}

    result = PublishCoordinator().run(post_id, actor=triggered_by)

    if post.get("is_repeat"):
        try:
            next_id = schedule_next_repeat(post)
            if next_id:
                Log.info(f"{log_tag} next repeat scheduled as {next_id}")
        except Exception as e:
            Log.error(f"{log_tag} could not schedule next repeat: {e}")

    return result


def publish_post_job(post_id: str, triggered_by: Optional[str] = "scheduler") -> Dict[str, Any]:
    """RQ entry point."""
    return run_in_app_context(_publish_post, post_id, triggered_by)


def enqueue_due_posts(limit: int = DUE_BATCH_LIMIT) -> int:
    """
    Claim due scheduled posts and queue one publish job each.
    A post whose enqueue fails goes back to scheduled for the next poll.
    """
    log_tag = make_log_tag("publish_job.py", "enqueue_due_posts")
    claimed = Post.claim_due(now=utc_now(), limit=limit)

    queued = 0
    for post in claimed:
        post_id = post["_id"]
        try:
            enqueue(PUBLISH_JOB, post_id, "scheduler", job_id=f"auto-post-{post_id}")
            queued += 1
        except Exception as e:
            Log.error(f"{log_tag} enqueue failed for post {post_id}: {e}")
            Post.update_status(post_id, Post.STATUS_SCHEDULED)

    if claimed:
        Log.info(f"{log_tag} queued {queued}/{len(claimed)} due post(s)")
    return queued
