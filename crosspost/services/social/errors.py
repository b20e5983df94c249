# crosspost/services/social/errors.py

from __future__ import annotations

from typing import Any, Optional


class PublishError(Exception):
    """Base class for everything a destination attempt can fail with."""


class MediaValidationError(PublishError):
    """Attached media does not satisfy the destination's requirements. Raised before any HTTP call."""


class DestinationConnectionError(PublishError):
    """Connection missing, or its stored credential is absent/malformed."""


class ProtocolError(PublishError):
    """The network rejected a request (non-2xx, or an error envelope inside a 2xx body)."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class ProcessingFailedError(PublishError):
    """An async resource reported an explicit ERROR state."""


class ProcessingTimeoutError(PublishError):
    """An async resource did not reach a terminal state within its attempt budget."""


class UnsupportedPlatformError(PublishError):
    pass


class NonRetryableCommentError(PublishError):
    """First-comment failure that retrying cannot fix (object gone, auth revoked)."""


class PostNotFoundError(PublishError):
    pass
