# crosspost/services/social/http_utils.py

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from ...utils.helpers import truncate
from ...utils.logger import Log
from .errors import ProtocolError


def safe_json(r: requests.Response) -> Any:
    try:
        return r.json()
    except Exception:
        return {"raw": r.text}


def extract_error_message(payload: Any, status_code: Optional[int] = None) -> str:
    """
    Pull a readable message out of whichever error envelope the network used.
    Falls back to "HTTP <status>: <body>".
    """
    prefix = f"HTTP {status_code}" if status_code else "Request failed"

    if isinstance(payload, dict):
        err = payload.get("error")

        # Graph / Google / TikTok: {"error": {...}}
        if isinstance(err, dict):
            msg = err.get("error_user_msg") or err.get("message")
            if not msg and isinstance(err.get("errors"), list) and err["errors"]:
                first = err["errors"][0] or {}
                msg = first.get("message") or first.get("reason")
            if msg:
                return str(msg)
            if err.get("code") not in (None, "ok", 0, "0"):
                return f"{prefix}: {err.get('code')}"

        # X v2: {"errors": [{"message"|"detail"}]}
        errors = payload.get("errors")
        if isinstance(errors, list) and errors:
            first = errors[0] or {}
            if isinstance(first, dict):
                msg = first.get("message") or first.get("detail")
                if msg:
                    return str(msg)

        # OAuth token endpoints
        if payload.get("error_description"):
            return str(payload["error_description"])

        # X problem+json / LinkedIn / Pinterest / Bluesky
        for key in ("detail", "message", "title"):
            if payload.get(key):
                return str(payload[key])

        if isinstance(err, str) and err:
            return err

        if "raw" in payload:
            return f"{prefix}: {truncate(payload['raw'], 300)}"

    return f"{prefix}: {truncate(payload, 300)}"


def raise_if_http_error(r: requests.Response, what: str, log_tag: str = "") -> Dict[str, Any]:
    """Return the parsed body, or raise ProtocolError for any non-2xx."""
    data = safe_json(r)
    if r.status_code < 200 or r.status_code >= 300:
        Log.info(f"{log_tag} {what} failed status={r.status_code} body={truncate(r.text)}")
        raise ProtocolError(
            f"{what} failed: {extract_error_message(data, r.status_code)}",
            status_code=r.status_code,
            payload=data,
        )

    # some networks answer 200 with an error object (TikTok uses code "ok" for success)
    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        if data["error"].get("code") not in (None, "ok", 0, "0"):
            Log.info(f"{log_tag} {what} returned error envelope body={truncate(r.text)}")
            raise ProtocolError(
                f"{what} failed: {extract_error_message(data, r.status_code)}",
                status_code=r.status_code,
                payload=data,
            )
    return data if isinstance(data, dict) else {"data": data}
