# crosspost/extensions/queue.py

from __future__ import annotations

import os
from typing import Any, Optional

from redis import Redis
from rq import Queue

from .db import redis_connection


PUBLISH_QUEUE_NAME = (os.getenv("RQ_PUBLISH_QUEUE") or "publish").strip() or "publish"

RQ_DEFAULT_TIMEOUT = int(os.getenv("RQ_DEFAULT_TIMEOUT", "1800"))        # seconds; video uploads are slow
RQ_DEFAULT_RESULT_TTL = int(os.getenv("RQ_DEFAULT_RESULT_TTL", "300"))
RQ_DEFAULT_FAILURE_TTL = int(os.getenv("RQ_DEFAULT_FAILURE_TTL", "86400"))

_queues = {}


def get_redis() -> Redis:
    """The app-wide Redis client; RQ workers outside the app factory open it from Config."""
    if redis_connection.connection is None:
        redis_connection.init_app()
    return redis_connection.connection


def get_queue(name: str = None) -> Queue:
    qn = (name or "").strip() or PUBLISH_QUEUE_NAME
    if qn not in _queues:
        _queues[qn] = Queue(qn, connection=get_redis(), default_timeout=RQ_DEFAULT_TIMEOUT)
    return _queues[qn]


def enqueue(
    func: str,
    *args: Any,
    queue_name: str = None,
    job_id: Optional[str] = None,
    job_timeout: Optional[int] = None,
    **kwargs: Any,
):
    """
    Enqueue with consistent defaults.

      enqueue("crosspost.tasks.social.publish_job.publish_post_job", post_id, "scheduler")
    """
    q = get_queue(queue_name)
    return q.enqueue(
        func,
        *args,
        **kwargs,
        job_id=job_id,
        job_timeout=job_timeout or RQ_DEFAULT_TIMEOUT,
        result_ttl=RQ_DEFAULT_RESULT_TTL,
        failure_ttl=RQ_DEFAULT_FAILURE_TTL,
    )
