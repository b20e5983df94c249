from __future__ import annotations

from flask import g
from flask.views import MethodView
from flask_smorest import Blueprint
from marshmallow import Schema, fields

from ...constants.service_code import PUBLISH_MESSAGES
from ...decorators.auth import publish_auth_required
from ...extensions.queue import enqueue
from ...models.social.post import Post
from ...services.social.errors import PostNotFoundError
from ...services.social.publish_coordinator import PublishCoordinator
from ...utils.helpers import make_log_tag
from ...utils.json_response import prepared_response
from ...utils.logger import Log


blp_publish = Blueprint(
    "social_publish",
    __name__,
    description="Publish a post to its pending destinations",
)


class PublishRequestSchema(Schema):
    run_async = fields.Boolean(load_default=False)


@blp_publish.route("/social/posts/<string:post_id>/publish", methods=["POST"])
class PublishPostResource(MethodView):

    @publish_auth_required
    @blp_publish.arguments(PublishRequestSchema, location="json", required=False)
    def post(self, payload, post_id):
        user = g.get("current_user") or {}
        actor = user.get("user_id")
        log_tag = make_log_tag("publish_resource.py", "PublishPostResource.post", post=post_id, actor=actor)

        if payload.get("run_async"):
            # the job only picks up posts marked publishing
            if not Post.get_by_id(post_id):
                raise PostNotFoundError(f"Post {post_id} not found")
            Post.update_status(post_id, Post.STATUS_PUBLISHING)
            job = enqueue(
                "crosspost.tasks.social.publish_job.publish_post_job",
                post_id,
                actor,
                job_id=f"publish-{post_id}",
            )
            Log.info(f"{log_tag} enqueued job {job.id}")
            return prepared_response(True, "ACCEPTED", PUBLISH_MESSAGES["QUEUED"], data={"job_id": job.id})

        result = PublishCoordinator().run(post_id, actor=actor)
        if result["all_published"]:
            message = PUBLISH_MESSAGES["ALL_PUBLISHED"]
        elif result["success"]:
            message = PUBLISH_MESSAGES["PARTIAL"]
        else:
            message = PUBLISH_MESSAGES["FAILED"]
        return prepared_response(result["success"], "OK", message, data=result)
