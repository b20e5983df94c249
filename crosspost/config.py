from dotenv import load_dotenv
load_dotenv()  # Load environment variables from .env file

import os
import tempfile


def _int_env(name, default):
    raw = os.getenv(name)
    if raw is None or str(raw).strip() == "":
        return default
    return int(raw)


def _float_env(name, default):
    raw = os.getenv(name)
    if raw is None or str(raw).strip() == "":
        return default
    return float(raw)


class Config:
    """Base configuration class."""
    APP_NAME = os.getenv("APP_NAME", "Crosspost")
    APP_URL = (os.getenv("APP_URL") or "http://localhost:5000").rstrip("/")

    SECRET_KEY = os.getenv("SECRET_KEY", "your_default_secret_key")
    DEBUG = os.getenv("FLASK_DEBUG", "False") == "True"
    TESTING = False

    # ========================================
    # STORAGE / QUEUE
    # ========================================
    MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017/crosspost")
    DB_NAME = os.getenv("DB_NAME", "crosspost")
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # ========================================
    # INTERNAL CALLERS (scheduler / cron)
    # ========================================
    WORKER_SECRET = os.getenv("WORKER_SECRET")
    CRON_SECRET = os.getenv("CRON_SECRET")

    # ========================================
    # PUBLISH TUNING
    # ========================================
    UPLOAD_TMP_DIR = os.getenv("UPLOAD_TMP_DIR") or tempfile.gettempdir()
    HTTP_TIMEOUT_SECONDS = _int_env("HTTP_TIMEOUT_SECONDS", 60)
    UPLOAD_TIMEOUT_SECONDS = _int_env("UPLOAD_TIMEOUT_SECONDS", 600)

    CONTAINER_POLL_ATTEMPTS = _int_env("CONTAINER_POLL_ATTEMPTS", 40)
    CONTAINER_POLL_INTERVAL_SECONDS = _float_env("CONTAINER_POLL_INTERVAL_SECONDS", 3)
    TIKTOK_POLL_ATTEMPTS = _int_env("TIKTOK_POLL_ATTEMPTS", 60)
    TIKTOK_POLL_INTERVAL_SECONDS = _float_env("TIKTOK_POLL_INTERVAL_SECONDS", 5)

    FIRST_COMMENT_DELAY_SECONDS = _float_env("FIRST_COMMENT_DELAY_SECONDS", 10)
    FIRST_COMMENT_MAX_ATTEMPTS = _int_env("FIRST_COMMENT_MAX_ATTEMPTS", 3)
    FIRST_COMMENT_BACKOFF_SECONDS = _float_env("FIRST_COMMENT_BACKOFF_SECONDS", 3)

    # 1 keeps destinations strictly sequential
    PUBLISH_MAX_WORKERS = _int_env("PUBLISH_MAX_WORKERS", 1)

    # ========================================
    # NETWORK APPS
    # ========================================
    GRAPH_API_VERSION = os.getenv("GRAPH_API_VERSION", "v20.0")

    YOUTUBE_CLIENT_ID = os.getenv("YOUTUBE_CLIENT_ID") or os.getenv("GOOGLE_CLIENT_ID")
    YOUTUBE_CLIENT_SECRET = os.getenv("YOUTUBE_CLIENT_SECRET") or os.getenv("GOOGLE_CLIENT_SECRET")

    TIKTOK_CLIENT_KEY = os.getenv("TIKTOK_CLIENT_KEY")
    TIKTOK_CLIENT_SECRET = os.getenv("TIKTOK_CLIENT_SECRET")

    LINKEDIN_CLIENT_ID = os.getenv("LINKEDIN_CLIENT_ID")
    LINKEDIN_CLIENT_SECRET = os.getenv("LINKEDIN_CLIENT_SECRET")

    PINTEREST_CLIENT_ID = os.getenv("PINTEREST_CLIENT_ID")
    PINTEREST_CLIENT_SECRET = os.getenv("PINTEREST_CLIENT_SECRET")

    X_CONSUMER_KEY = os.getenv("X_CONSUMER_KEY")
    X_CONSUMER_SECRET = os.getenv("X_CONSUMER_SECRET")


def load_config(app):
    for key in dir(Config):
        if key.isupper():
            app.config.setdefault(key, getattr(Config, key))
    app.config["SECRET_KEY"] = Config.SECRET_KEY
