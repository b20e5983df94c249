"""Tests for the publish endpoint: auth, sync run, queued run."""

from unittest.mock import MagicMock, patch

import jwt
import pytest

from crosspost import create_publish_app
from crosspost.config import Config
from crosspost.services.social.errors import PostNotFoundError


URL = "/api/social/posts/65f0c0ffee0000000000abcd/publish"

RESULT = {
    "post_id": "65f0c0ffee0000000000abcd",
    "status": "published",
    "success": True,
    "all_published": False,
    "results": [
        {"platform": "facebook", "account_id": "page-1", "success": True, "external_id": "page-1_1"},
        {"platform": "instagram", "account_id": "ig-1", "success": False, "error": "instagram connection is missing an access token"},
    ],
}


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(Config, "WORKER_SECRET", "worker-shared-secret")
    monkeypatch.setattr(Config, "CRON_SECRET", "cron-shared-secret")
    app = create_publish_app({"TESTING": True}, init_extensions=False)
    return app.test_client()


def user_token(**claims):
    return jwt.encode(claims or {"user_id": "user-42"}, Config.SECRET_KEY, algorithm="HS256")


class TestPublishAuth:
    @patch("crosspost.resources.social.publish_resource.PublishCoordinator")
    def test_missing_credentials_rejected(self, coordinator, client):
        resp = client.post(URL, json={})
        assert resp.status_code == 401
        coordinator.assert_not_called()

    @patch("crosspost.resources.social.publish_resource.PublishCoordinator")
    def test_wrong_worker_secret_rejected(self, coordinator, client):
        resp = client.post(URL, json={}, headers={"X-Worker-Secret": "nope"})
        assert resp.status_code == 401
        coordinator.assert_not_called()

    @patch("crosspost.resources.social.publish_resource.PublishCoordinator")
    def test_worker_secret_runs_as_trigger(self, coordinator, client):
        coordinator.return_value.run.return_value = RESULT

        resp = client.post(URL, json={}, headers={"X-Worker-Secret": "worker-shared-secret", "X-Worker-Trigger": "cron"})

        assert resp.status_code == 200
        coordinator.return_value.run.assert_called_once_with("65f0c0ffee0000000000abcd", actor="cron")

    @patch("crosspost.resources.social.publish_resource.PublishCoordinator")
    def test_cron_token_accepted(self, coordinator, client):
        coordinator.return_value.run.return_value = RESULT
        resp = client.post(URL, json={}, headers={"X-Cron-Token": "cron-shared-secret"})
        assert resp.status_code == 200
        assert coordinator.return_value.run.call_args[1]["actor"] == "scheduler"

    @patch("crosspost.resources.social.publish_resource.PublishCoordinator")
    def test_user_jwt_accepted(self, coordinator, client):
        coordinator.return_value.run.return_value = RESULT

        resp = client.post(URL, json={}, headers={"Authorization": f"Bearer {user_token()}"})

        assert resp.status_code == 200
        assert coordinator.return_value.run.call_args[1]["actor"] == "user-42"

    def test_jwt_with_other_key_rejected(self, client):
        token = jwt.encode({"user_id": "u"}, "another-signing-key-that-is-long-enough", algorithm="HS256")
        resp = client.post(URL, json={}, headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401


class TestPublishRun:
    HEADERS = {"X-Worker-Secret": "worker-shared-secret"}

    @patch("crosspost.resources.social.publish_resource.PublishCoordinator")
    def test_partial_result_is_reported(self, coordinator, client):
        coordinator.return_value.run.return_value = RESULT

        body = client.post(URL, json={}, headers=self.HEADERS).get_json()

        assert body["success"] is True
        assert body["message"] == "Partially published"
        assert body["data"]["status"] == "published"
        assert [r["success"] for r in body["data"]["results"]] == [True, False]

    @patch("crosspost.resources.social.publish_resource.PublishCoordinator")
    def test_all_failed(self, coordinator, client):
        coordinator.return_value.run.return_value = dict(RESULT, status="failed", success=False, results=[])

        body = client.post(URL, json={}, headers=self.HEADERS).get_json()

        assert body["success"] is False
        assert body["message"] == "Publish failed"

    @patch("crosspost.resources.social.publish_resource.PublishCoordinator")
    def test_unknown_post_is_404(self, coordinator, client):
        coordinator.return_value.run.side_effect = PostNotFoundError("Post not found")

        resp = client.post(URL, json={}, headers=self.HEADERS)

        assert resp.status_code == 404
        assert resp.get_json()["message"] == "Post not found"

    @patch("crosspost.resources.social.publish_resource.Post")
    @patch("crosspost.resources.social.publish_resource.PublishCoordinator")
    @patch("crosspost.resources.social.publish_resource.enqueue")
    def test_run_async_queues_a_job(self, enqueue, coordinator, post_model, client):
        post_model.get_by_id.return_value = {"_id": "65f0c0ffee0000000000abcd", "status": "draft"}
        enqueue.return_value = MagicMock(id="publish-65f0c0ffee0000000000abcd")

        resp = client.post(URL, json={"run_async": True}, headers=self.HEADERS)

        assert resp.status_code == 202
        assert resp.get_json()["data"] == {"job_id": "publish-65f0c0ffee0000000000abcd"}
        args, kwargs = enqueue.call_args
        assert args == ("crosspost.tasks.social.publish_job.publish_post_job", "65f0c0ffee0000000000abcd", "scheduler")
        assert kwargs["job_id"] == "publish-65f0c0ffee0000000000abcd"
        coordinator.assert_not_called()
        post_model.update_status.assert_called_once_with(
            "65f0c0ffee0000000000abcd", post_model.STATUS_PUBLISHING
        )

    @patch("crosspost.resources.social.publish_resource.Post")
    @patch("crosspost.resources.social.publish_resource.enqueue")
    def test_run_async_unknown_post_is_404_without_a_job(self, enqueue, post_model, client):
        post_model.get_by_id.return_value = None

        resp = client.post(URL, json={"run_async": True}, headers=self.HEADERS)

        assert resp.status_code == 404
        enqueue.assert_not_called()
        post_model.update_status.assert_not_called()
