import click


def register_commands(app):
    @app.cli.command("enqueue-due-posts")
    @click.option("--limit", default=100, show_default=True, help="Max posts to claim in one run.")
    def enqueue_due_posts_command(limit):
        """Queue publish jobs for scheduled posts that are due (run from cron)."""
        from .tasks.social.publish_job import enqueue_due_posts
        queued = enqueue_due_posts(limit=limit)
        click.echo(f"queued {queued} post(s)")
