# crosspost/services/social/side_effects.py

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import requests

from ...config import Config
from ...constants.service_code import PLATFORM_LABELS, WEBHOOK_EVENTS
from ...models.social.channel import Channel
from ...utils.helpers import make_log_tag, truncate, utc_now
from ...utils.logger import Log
from .errors import NonRetryableCommentError, ProtocolError
from .publisher_base import SocialPublisherBase


WEBHOOK_TIMEOUT_SECONDS = 10

# Graph: 100 invalid/unknown object, 190 token expired/revoked
NON_RETRYABLE_GRAPH_CODES = {100, 190}
NON_RETRYABLE_HTTP = {401, 403, 404}


@dataclass
class PublishedOutcome:
    """A destination that published in this pass, with the publisher that did it."""
    platform: str
    account_id: str
    external_id: str
    publisher: SocialPublisherBase
    config: Dict[str, Any]


def as_non_retryable(e: Exception) -> Optional[NonRetryableCommentError]:
    if isinstance(e, NonRetryableCommentError):
        return e
    if isinstance(e, ProtocolError):
        if e.status_code in NON_RETRYABLE_HTTP:
            return NonRetryableCommentError(str(e))
        payload = e.payload if isinstance(e.payload, dict) else {}
        err = payload.get("error") if isinstance(payload.get("error"), dict) else {}
        if err.get("code") in NON_RETRYABLE_GRAPH_CODES:
            return NonRetryableCommentError(str(e))
    return None


class PostPublishSideEffects:
    """
    Best-effort actions after a publish pass. Nothing here raises and
    nothing here changes the recorded outcome.
    """

    def __init__(self, sleep: Callable[[float], None] = time.sleep):
        self.sleep = sleep

    def run(
        self,
        post: Dict[str, Any],
        published: List[PublishedOutcome],
        results: List[Dict[str, Any]],
        actor: Optional[str] = None,
    ) -> None:
        if not published:
            return

        log_tag = make_log_tag("side_effects.py", "run", post=post.get("_id"))

        for outcome in published:
            try:
                self.post_first_comment(outcome, log_tag)
            except Exception as e:
                Log.warning(f"{log_tag}[{outcome.platform}] first comment crashed: {e}")

        try:
            self.notify_webhooks(post, results, actor, log_tag)
        except Exception as e:
            Log.warning(f"{log_tag} webhook notification crashed: {e}")

    # ----------------------------------------
    # First comment
    # ----------------------------------------
    def post_first_comment(self, outcome: PublishedOutcome, log_tag: str = "") -> bool:
        message = (outcome.config.get("first_comment") or "").strip()
        if not message or not outcome.publisher.SUPPORTS_FIRST_COMMENT:
            return False

        tag = f"{log_tag}[{outcome.platform}:{outcome.account_id}]"
        max_attempts = max(1, Config.FIRST_COMMENT_MAX_ATTEMPTS)

        # freshly created objects are not always commentable straight away
        self.sleep(Config.FIRST_COMMENT_DELAY_SECONDS)

        for attempt in range(1, max_attempts + 1):
            try:
                outcome.publisher.post_first_comment(outcome.external_id, message)
                Log.info(f"{tag} first comment posted on attempt {attempt}")
                return True
            except Exception as e:
                fatal = as_non_retryable(e)
                if fatal is not None:
                    Log.warning(f"{tag} first comment not retryable: {fatal}")
                    return False
                Log.info(f"{tag} first comment attempt {attempt}/{max_attempts} failed: {e}")
                if attempt < max_attempts:
                    self.sleep(Config.FIRST_COMMENT_BACKOFF_SECONDS)

        Log.warning(f"{tag} first comment gave up after {max_attempts} attempts")
        return False

    # ----------------------------------------
    # Webhooks
    # ----------------------------------------
    @staticmethod
    def build_event(post: Dict[str, Any], results: List[Dict[str, Any]], actor: Optional[str], channel: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "event": WEBHOOK_EVENTS["POST_PUBLISHED"],
            "source": Config.APP_NAME,
            "timestamp": utc_now().isoformat(),
            "post": {
                "id": post.get("_id"),
                "content": post.get("content") or "",
                "media_count": len(post.get("media") or []),
            },
            "channel": {"id": channel.get("_id"), "name": channel.get("name")},
            "published_by": actor,
            "results": [
                {
                    "platform": r.get("platform"),
                    "account_id": r.get("account_id"),
                    "success": bool(r.get("success")),
                    "external_id": r.get("external_id"),
                    "error": r.get("error"),
                }
                for r in results
            ],
        }

    @staticmethod
    def _summary_lines(event: Dict[str, Any]) -> List[str]:
        lines = []
        for r in event["results"]:
            label = PLATFORM_LABELS.get(r["platform"], r["platform"])
            lines.append(f"{label}: published" if r["success"] else f"{label}: failed ({truncate(r['error'], 200)})")
        return lines

    def _targets(self, channel: Dict[str, Any], event: Dict[str, Any]):
        text = truncate(event["post"]["content"], 300)
        lines = self._summary_lines(event)
        title = f"{event['source']}: post published"

        discord = channel.get("webhook_discord") or {}
        if discord.get("url"):
            yield "discord", discord["url"], {
                "username": event["source"],
                "embeds": [{
                    "title": title,
                    "description": text,
                    "color": 0x22C55E,
                    "fields": [{"name": "Results", "value": "\n".join(lines) or "-"}],
                    "timestamp": event["timestamp"],
                }],
            }

        telegram = channel.get("webhook_telegram") or {}
        if telegram.get("bot_token") and telegram.get("chat_id"):
            yield "telegram", f"https://api.telegram.org/bot{telegram['bot_token']}/sendMessage", {
                "chat_id": telegram["chat_id"],
                "text": f"*{title}*\n{text}\n\n" + "\n".join(lines),
                "parse_mode": "Markdown",
            }

        slack = channel.get("webhook_slack") or {}
        if slack.get("url"):
            yield "slack", slack["url"], {
                "text": title,
                "blocks": [
                    {"type": "section", "text": {"type": "mrkdwn", "text": f"*{title}*\n{text}"}},
                    {"type": "section", "text": {"type": "mrkdwn", "text": "\n".join(lines) or "-"}},
                ],
            }

        custom = channel.get("webhook_custom") or {}
        if custom.get("url"):
            yield "custom", custom["url"], event

    def notify_webhooks(self, post: Dict[str, Any], results: List[Dict[str, Any]], actor: Optional[str] = None, log_tag: str = "") -> int:
        """Send the pass summary to every subscribed target. Returns how many were delivered."""
        channel = Channel.get_by_id(post.get("channel_id"))
        if not channel:
            return 0

        subscribed = channel.get("webhook_events") or []
        if subscribed and WEBHOOK_EVENTS["POST_PUBLISHED"] not in subscribed:
            Log.info(f"{log_tag} channel not subscribed to {WEBHOOK_EVENTS['POST_PUBLISHED']}")
            return 0

        event = self.build_event(post, results, actor, channel)

        delivered = 0
        for kind, url, body in self._targets(channel, event):
            try:
                r = requests.post(url, json=body, timeout=WEBHOOK_TIMEOUT_SECONDS)
                if r.status_code >= 400:
                    Log.warning(f"{log_tag} {kind} webhook returned {r.status_code}: {truncate(r.text, 300)}")
                    continue
                delivered += 1
            except Exception as e:
                Log.warning(f"{log_tag} {kind} webhook failed: {e}")
        return delivered
