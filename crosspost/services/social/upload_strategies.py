# crosspost/services/social/upload_strategies.py

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Tuple
from urllib.parse import urlencode

import requests
from oauthlib.oauth1.rfc5849 import utils as oauth_utils
from requests_oauthlib import OAuth1

from ...config import Config
from ...utils.logger import Log
from .errors import MediaValidationError, ProtocolError
from .http_utils import raise_if_http_error


DOWNLOAD_CHUNK_BYTES = 1024 * 1024


# -----------------------------------------
# Resumable upload (session url via Location)
# -----------------------------------------
def resumable_upload(
    init_url: str,
    *,
    access_token: str,
    metadata: Dict[str, Any],
    body,
    content_length: int,
    content_type: str,
    params: Optional[Dict[str, Any]] = None,
    log_tag: str = "",
) -> Dict[str, Any]:
    """
    1) POST init_url with the declared length/type -> Location header
    2) PUT the bytes (or a file object) to that session url
    """
    init_headers = {
        "Authorization": f"Bearer {access_token}",
        "Content-Type": "application/json; charset=UTF-8",
        "X-Upload-Content-Length": str(int(content_length)),
        "X-Upload-Content-Type": content_type,
    }
    r = requests.post(
        init_url,
        params=params,
        headers=init_headers,
        json=metadata,
        timeout=Config.HTTP_TIMEOUT_SECONDS,
    )
    raise_if_http_error(r, "Resumable upload init", log_tag)

    session_url = r.headers.get("Location") or r.headers.get("location")
    if not session_url:
        raise ProtocolError("Resumable upload init returned no upload url", status_code=r.status_code)

    Log.info(f"{log_tag} resumable session opened, uploading {content_length} bytes")

    put = requests.put(
        session_url,
        headers={
            "Authorization": f"Bearer {access_token}",
            "Content-Type": content_type,
            "Content-Length": str(int(content_length)),
        },
        data=body,
        timeout=Config.UPLOAD_TIMEOUT_SECONDS,
    )
    return raise_if_http_error(put, "Resumable upload", log_tag)


# -----------------------------------------
# Disk-buffered download
# -----------------------------------------
@contextmanager
def buffered_download(
    url: str,
    *,
    tmp_dir: Optional[str] = None,
    log_tag: str = "",
) -> Iterator[Tuple[str, int]]:
    """
    Stream `url` into a private temp file and yield (path, size_bytes).

    The file is removed when the block exits, however it exits.
    """
    fd, path = tempfile.mkstemp(prefix="crosspost-", suffix=".upload", dir=tmp_dir or Config.UPLOAD_TMP_DIR)
    try:
        with os.fdopen(fd, "wb") as fh:
            r = requests.get(url, stream=True, timeout=Config.HTTP_TIMEOUT_SECONDS)
            try:
                if r.status_code >= 400:
                    raise ProtocolError(
                        f"Media download failed: HTTP {r.status_code}",
                        status_code=r.status_code,
                    )
                for chunk in r.iter_content(chunk_size=DOWNLOAD_CHUNK_BYTES):
                    if chunk:
                        fh.write(chunk)
            finally:
                r.close()

        size = os.path.getsize(path)
        if size <= 0:
            raise MediaValidationError("Downloaded media is empty")

        Log.info(f"{log_tag} buffered {size} bytes to disk")
        yield path, size
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass


# -----------------------------------------
# OAuth 1.0a HMAC-SHA1 request signing
# -----------------------------------------
def oauth1_authorization(
    method: str,
    url: str,
    *,
    consumer_key: str,
    consumer_secret: str,
    token: str,
    token_secret: str,
    params: Optional[Dict[str, Any]] = None,
    nonce: Optional[str] = None,
    timestamp: Optional[str] = None,
) -> Tuple[str, str]:
    """
    Build an OAuth 1.0a Authorization header.

    `params` are the query/form parameters that take part in the signature
    (JSON and multipart bodies do not). Returns (header_value, signature).
    A new nonce/timestamp is generated unless given.
    """
    method = method.upper()
    auth = OAuth1(
        consumer_key,
        client_secret=consumer_secret,
        resource_owner_key=token,
        resource_owner_secret=token_secret,
        decoding=None,
        nonce=nonce,
        timestamp=timestamp,
    )

    fields = {str(k): str(v) for k, v in (params or {}).items() if v is not None}
    sign_url, body, headers = url, None, {}
    if fields and method in ("GET", "HEAD", "DELETE"):
        sign_url = f"{url}{'&' if '?' in url else '?'}{urlencode(fields)}"
    elif fields:
        body = urlencode(fields)
        headers = {"Content-Type": "application/x-www-form-urlencoded"}

    _, signed_headers, _ = auth.client.sign(sign_url, http_method=method, body=body, headers=headers)
    header = signed_headers["Authorization"]
    sig = dict(oauth_utils.parse_authorization_header(header)).get("oauth_signature", "")
    return header, oauth_utils.unescape(sig)
