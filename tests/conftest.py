import os
import tempfile

# crosspost.utils.crypt refuses to import without a key, and the logger
# opens its daily file at import time.
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-crosspost-000")
os.environ.setdefault("APP_LOG_DIR", tempfile.mkdtemp(prefix="crosspost-logs-"))
os.environ.setdefault("APP_URL", "https://app.crosspost.test")

from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402

from crosspost.config import Config  # noqa: E402


def make_response(status_code=200, json_body=None, headers=None, text=None):
    r = MagicMock()
    r.status_code = status_code
    r.headers = headers or {}
    if json_body is None:
        r.json.side_effect = ValueError("no json")
        r.text = text or ""
    else:
        r.json.return_value = json_body
        r.text = text if text is not None else str(json_body)
    return r


@pytest.fixture
def http_response():
    return make_response


@pytest.fixture(autouse=True)
def fast_polling(monkeypatch):
    """No real waiting anywhere in the suite."""
    monkeypatch.setattr(Config, "CONTAINER_POLL_ATTEMPTS", 3)
    monkeypatch.setattr(Config, "CONTAINER_POLL_INTERVAL_SECONDS", 0)
    monkeypatch.setattr(Config, "TIKTOK_POLL_ATTEMPTS", 3)
    monkeypatch.setattr(Config, "TIKTOK_POLL_INTERVAL_SECONDS", 0)
    monkeypatch.setattr(Config, "PUBLISH_MAX_WORKERS", 1)
