# crosspost/decorators/auth.py

import hmac
from functools import wraps

import jwt
from flask import g, request
from flask_smorest import abort

from ..config import Config
from ..constants.service_code import AUTHENTICATION_MESSAGES, HTTP_STATUS_CODES
from ..utils.logger import Log


def _matches(given, expected) -> bool:
    if not given or not expected:
        return False
    return hmac.compare_digest(str(given), str(expected))


def publish_auth_required(f):
    """
    Accept either a trusted internal caller (scheduler/cron shared secret)
    or a user session bearer JWT signed with SECRET_KEY.

    Sets g.current_user to {"user_id", "internal"}.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        log_tag = "[auth.py][publish_auth_required]"

        worker_secret = request.headers.get("X-Worker-Secret")
        cron_token = request.headers.get("X-Cron-Token")
        auth_header = request.headers.get("Authorization") or ""
        bearer = auth_header.split(" ", 1)[1].strip() if auth_header.startswith("Bearer ") else None

        if _matches(worker_secret, Config.WORKER_SECRET) or _matches(cron_token, Config.CRON_SECRET) \
                or _matches(bearer, Config.CRON_SECRET):
            trigger = request.headers.get("X-Worker-Trigger") or "scheduler"
            g.current_user = {"user_id": trigger, "internal": True}
            return f(*args, **kwargs)

        if not bearer:
            abort(HTTP_STATUS_CODES["UNAUTHORIZED"], message=AUTHENTICATION_MESSAGES["AUTHENTICATION_REQUIRED"])

        try:
            data = jwt.decode(bearer, Config.SECRET_KEY, algorithms=["HS256"])
        except jwt.ExpiredSignatureError:
            abort(HTTP_STATUS_CODES["UNAUTHORIZED"], message=AUTHENTICATION_MESSAGES["TOKEN_EXPIRED"])
        except jwt.InvalidTokenError as e:
            Log.info(f"{log_tag} invalid token: {e}")
            abort(HTTP_STATUS_CODES["UNAUTHORIZED"], message=AUTHENTICATION_MESSAGES["INVALID_TOKEN"])

        user_id = data.get("user_id") or data.get("sub")
        if not user_id:
            abort(HTTP_STATUS_CODES["UNAUTHORIZED"], message=AUTHENTICATION_MESSAGES["INVALID_TOKEN"])

        g.current_user = {"user_id": str(user_id), "internal": False}
        return f(*args, **kwargs)

    return decorated
