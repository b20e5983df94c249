HTTP_STATUS_CODES = {
    "OK": 200,
    "ACCEPTED": 202,
    "BAD_REQUEST": 400,
    "UNAUTHORIZED": 401,
    "FORBIDDEN": 403,
    "NOT_FOUND": 404,
}

PUBLISH_MESSAGES = {
    "ALL_PUBLISHED": "Published",
    "PARTIAL": "Partially published",
    "FAILED": "Publish failed",
    "QUEUED": "Publish queued",
}

AUTHENTICATION_MESSAGES = {
    "AUTHENTICATION_REQUIRED": "Authentication Required",
    "INVALID_TOKEN": "Invalid access token",
    "TOKEN_EXPIRED": "Token has expired",
}

# Post lifecycle
POST_STATUS = {
    "DRAFT": "draft",
    "SCHEDULED": "scheduled",
    "PUBLISHING": "publishing",
    "PUBLISHED": "published",
    "FAILED": "failed",
}

# Per-destination outcome
OUTCOME_STATUS = {
    "PENDING": "pending",
    "PUBLISHED": "published",
    "FAILED": "failed",
}

WEBHOOK_EVENTS = {
    "POST_PUBLISHED": "post.published",
}

PLATFORM_LABELS = {
    "facebook": "Facebook",
    "instagram": "Instagram",
    "threads": "Threads",
    "youtube": "YouTube",
    "tiktok": "TikTok",
    "linkedin": "LinkedIn",
    "pinterest": "Pinterest",
    "x": "X",
    "bluesky": "Bluesky",
}
