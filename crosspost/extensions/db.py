from pymongo import MongoClient, ASCENDING
from redis import Redis

from ..config import Config


class MongoDB:
    def __init__(self):
        self.client = None
        self.db = None

    def init_app(self, app=None):
        uri = app.config.get("MONGO_URI") if app is not None else Config.MONGO_URI
        db_name = app.config.get("DB_NAME") if app is not None else Config.DB_NAME

        self.client = MongoClient(uri)
        self.db = self.client[db_name]
        if app is not None:
            app.mongo = self.db

        # -------------------------------------------------
        # INDEXES (idempotent)
        # -------------------------------------------------
        self.db.posts.create_index([("status", ASCENDING), ("scheduled_at", ASCENDING)])
        self.db.post_platform_statuses.create_index([("post_id", ASCENDING), ("created_at", ASCENDING)])
        self.db.social_accounts.create_index(
            [("channel_id", ASCENDING), ("platform", ASCENDING), ("account_id", ASCENDING)]
        )

    def get_collection(self, name):
        if self.db is None:
            raise RuntimeError("MongoDB not initialized")
        return self.db[name]


class RedisConnection:
    def __init__(self):
        self.connection = None

    def init_app(self, app=None):
        url = app.config.get("REDIS_URL") if app is not None else Config.REDIS_URL
        self.connection = Redis.from_url(url)
        if app is not None:
            app.redis = self.connection


# Export the instances
db = MongoDB()
redis_connection = RedisConnection()
