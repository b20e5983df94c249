"""Tests for the RQ queue helpers."""

from unittest.mock import patch

import pytest

from crosspost.extensions import queue
from crosspost.extensions.db import redis_connection


@pytest.fixture(autouse=True)
def fresh_connection(monkeypatch):
    monkeypatch.setattr(redis_connection, "connection", None)
    monkeypatch.setattr(queue, "_queues", {})


class TestQueue:
    @patch("crosspost.extensions.db.Redis.from_url")
    def test_queue_shares_the_app_redis_client(self, from_url):
        q = queue.get_queue()

        from_url.assert_called_once()
        assert q.connection is redis_connection.connection
        assert q.name == queue.PUBLISH_QUEUE_NAME

    @patch("crosspost.extensions.db.Redis.from_url")
    def test_existing_connection_is_reused(self, from_url):
        redis_connection.connection = from_url.return_value

        assert queue.get_redis() is from_url.return_value
        from_url.assert_not_called()

    @patch("crosspost.extensions.queue.get_queue")
    def test_enqueue_applies_ttl_defaults(self, get_queue):
        queue.enqueue("pkg.jobs.run", "p1", job_id="publish-p1")

        args, kwargs = get_queue.return_value.enqueue.call_args
        assert args == ("pkg.jobs.run", "p1")
        assert kwargs["job_id"] == "publish-p1"
        assert kwargs["job_timeout"] == queue.RQ_DEFAULT_TIMEOUT
        assert kwargs["result_ttl"] == queue.RQ_DEFAULT_RESULT_TTL
        assert kwargs["failure_ttl"] == queue.RQ_DEFAULT_FAILURE_TTL
