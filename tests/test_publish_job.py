"""Tests for the scheduler poll and the background publish job."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

from bson import ObjectId

from crosspost.models.social.post import Post
from crosspost.tasks.social import publish_job


POST_ID = "65f0c0ffee0000000000abcd"


class TestEnqueueDuePosts:
    @patch("crosspost.tasks.social.publish_job.Post.update_status")
    @patch("crosspost.tasks.social.publish_job.enqueue")
    @patch("crosspost.tasks.social.publish_job.Post.claim_due")
    def test_each_claimed_post_gets_one_job(self, claim_due, enqueue, update_status):
        claim_due.return_value = [{"_id": "p1"}, {"_id": "p2"}]

        assert publish_job.enqueue_due_posts(limit=10) == 2

        assert claim_due.call_args[1]["limit"] == 10
        job_ids = [c[1]["job_id"] for c in enqueue.call_args_list]
        assert job_ids == ["auto-post-p1", "auto-post-p2"]
        assert enqueue.call_args_list[0][0] == (publish_job.PUBLISH_JOB, "p1", "scheduler")
        update_status.assert_not_called()

    @patch("crosspost.tasks.social.publish_job.Post.update_status")
    @patch("crosspost.tasks.social.publish_job.enqueue")
    @patch("crosspost.tasks.social.publish_job.Post.claim_due")
    def test_failed_enqueue_returns_post_to_schedule(self, claim_due, enqueue, update_status):
        claim_due.return_value = [{"_id": "p1"}, {"_id": "p2"}]
        enqueue.side_effect = [ConnectionError("redis down"), MagicMock()]

        assert publish_job.enqueue_due_posts() == 1

        update_status.assert_called_once_with("p1", Post.STATUS_SCHEDULED)


class TestPublishPostJob:
    @patch("crosspost.tasks.social.publish_job.PublishCoordinator")
    @patch("crosspost.tasks.social.publish_job.Post.get_by_id")
    def test_finished_post_is_skipped(self, get_by_id, coordinator):
        get_by_id.return_value = {"_id": POST_ID, "status": Post.STATUS_PUBLISHED}

        result = publish_job._publish_post(POST_ID, "scheduler")

        assert result["skipped"] == Post.STATUS_PUBLISHED
        coordinator.assert_not_called()

    @patch("crosspost.tasks.social.publish_job.PublishCoordinator")
    @patch("crosspost.tasks.social.publish_job.Post.get_by_id")
    def test_post_not_marked_publishing_is_skipped(self, get_by_id, coordinator):
        get_by_id.return_value = {"_id": POST_ID, "status": Post.STATUS_DRAFT}

        result = publish_job._publish_post(POST_ID, "scheduler")

        assert result["skipped"] == Post.STATUS_DRAFT
        coordinator.assert_not_called()

    @patch("crosspost.tasks.social.publish_job.schedule_next_repeat")
    @patch("crosspost.tasks.social.publish_job.PublishCoordinator")
    @patch("crosspost.tasks.social.publish_job.Post.get_by_id")
    def test_repeat_post_schedules_next(self, get_by_id, coordinator, schedule_next):
        post = {"_id": POST_ID, "status": Post.STATUS_PUBLISHING, "is_repeat": True}
        get_by_id.return_value = post
        coordinator.return_value.run.return_value = {"status": "published"}
        schedule_next.return_value = "next-1"

        publish_job._publish_post(POST_ID, "scheduler")

        coordinator.return_value.run.assert_called_once_with(POST_ID, actor="scheduler")
        schedule_next.assert_called_once_with(post)

    @patch("crosspost.tasks.social.publish_job.PostPlatformStatus.create_pending")
    @patch("crosspost.tasks.social.publish_job.PostPlatformStatus.list_by_post")
    @patch("crosspost.tasks.social.publish_job.Post.clone_for_repeat")
    def test_next_repeat_copies_destinations(self, clone, list_by_post, create_pending):
        clone.return_value = "new-post"
        list_by_post.return_value = [
            {"platform": "facebook", "account_id": "page-1", "config": {"first_comment": "hi"}, "status": "published"},
            {"platform": "x", "account_id": "42", "config": None, "status": "failed"},
        ]

        assert publish_job.schedule_next_repeat({"_id": POST_ID, "is_repeat": True}) == "new-post"

        assert [c[0] for c in create_pending.call_args_list] == [
            ("new-post", "facebook", "page-1", {"first_comment": "hi"}),
            ("new-post", "x", "42", None),
        ]


class TestCloneForRepeat:
    @patch("crosspost.models.social.post.Post.get_collection")
    def test_next_occurrence_is_one_interval_later(self, get_collection):
        inserted = ObjectId()
        get_collection.return_value.insert_one.return_value = MagicMock(inserted_id=inserted)
        when = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

        new_id = Post.clone_for_repeat({
            "_id": POST_ID,
            "is_repeat": True,
            "repeat_interval_days": 7,
            "repeat_count": 3,
            "scheduled_at": when,
            "content": "Weekly special",
        })

        assert new_id == str(inserted)
        doc = get_collection.return_value.insert_one.call_args[0][0]
        assert doc["scheduled_at"] == when + timedelta(days=7)
        assert doc["repeat_count"] == 2
        assert doc["status"] == Post.STATUS_SCHEDULED
        assert doc["repeat_of"] == ObjectId(POST_ID)

    @patch("crosspost.models.social.post.Post.get_collection")
    def test_count_one_makes_a_final_occurrence(self, get_collection):
        get_collection.return_value.insert_one.return_value = MagicMock(inserted_id=ObjectId())

        new_id = Post.clone_for_repeat({"_id": POST_ID, "is_repeat": True, "repeat_interval_days": 7, "repeat_count": 1})

        assert new_id is not None
        doc = get_collection.return_value.insert_one.call_args[0][0]
        assert doc["repeat_count"] == 0
        assert doc["is_repeat"] is False

    @patch("crosspost.models.social.post.Post.get_collection")
    def test_exhausted_count_stops_series(self, get_collection):
        assert Post.clone_for_repeat({"_id": POST_ID, "is_repeat": True, "repeat_interval_days": 7, "repeat_count": 0}) is None
        get_collection.assert_not_called()

    @patch("crosspost.models.social.post.Post.get_collection")
    def test_open_ended_series_stays_repeating(self, get_collection):
        get_collection.return_value.insert_one.return_value = MagicMock(inserted_id=ObjectId())

        Post.clone_for_repeat({"_id": POST_ID, "is_repeat": True, "repeat_interval_days": 1, "repeat_count": None})

        doc = get_collection.return_value.insert_one.call_args[0][0]
        assert doc["repeat_count"] is None
        assert doc["is_repeat"] is True
