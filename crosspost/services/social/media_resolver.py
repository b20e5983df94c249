# crosspost/services/social/media_resolver.py

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qs, unquote, urlparse

from ...config import Config


IMAGE = "image"
VIDEO = "video"

VIDEO_EXTENSIONS = {".mp4", ".mov", ".m4v", ".avi", ".webm", ".mkv", ".mpeg", ".mpg"}
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".heic"}

PROXY_PATH = "/api/media/proxy"

_DRIVE_FILE_RE = re.compile(r"drive\.google\.com/file/d/([A-Za-z0-9_-]+)")
_GUC_FILE_RE = re.compile(r"lh3\.googleusercontent\.com/d/([A-Za-z0-9_-]+)")


@dataclass(frozen=True)
class MediaRef:
    url: str
    kind: str
    filename: Optional[str] = None
    mime_type: Optional[str] = None

    @property
    def is_video(self) -> bool:
        return self.kind == VIDEO

    @property
    def is_image(self) -> bool:
        return self.kind == IMAGE


def _extension(value: Optional[str]) -> str:
    if not value:
        return ""
    path = urlparse(value).path if "://" in value else value
    return os.path.splitext(path)[1].lower()


def classify(item: Dict[str, Any]) -> str:
    """asset_type, then mime type, then filename/url extension. Unknown means image."""
    asset_type = (item.get("asset_type") or item.get("type") or "").lower()
    if asset_type in (IMAGE, VIDEO):
        return asset_type

    mime = (item.get("mime_type") or item.get("mimeType") or "").lower()
    if mime.startswith("video/"):
        return VIDEO
    if mime.startswith("image/"):
        return IMAGE

    for candidate in (item.get("filename"), item.get("url")):
        ext = _extension(candidate)
        if ext in VIDEO_EXTENSIONS:
            return VIDEO
        if ext in IMAGE_EXTENSIONS:
            return IMAGE

    return IMAGE


def drive_download_url(file_id: str) -> str:
    return f"https://drive.google.com/uc?export=download&id={file_id}"


def normalise_url(url: str, kind: str = IMAGE, app_url: Optional[str] = None) -> str:
    """
    Make a media url fetchable by a remote network:
      - relative paths are prefixed with APP_URL
      - our own media proxy is unwrapped to the proxied url
      - Drive viewer links become direct-download links
    """
    u = (url or "").strip()
    if not u:
        return u

    base = (app_url or Config.APP_URL).rstrip("/")

    parsed = urlparse(u)
    if parsed.path.startswith(PROXY_PATH):
        target = parse_qs(parsed.query).get("url")
        if target:
            u = unquote(target[0])
            parsed = urlparse(u)

    if not parsed.scheme:
        u = f"{base}/{u.lstrip('/')}"
        parsed = urlparse(u)

    m = _DRIVE_FILE_RE.search(u)
    if m:
        return drive_download_url(m.group(1))

    if parsed.netloc == "drive.google.com" and parsed.path in ("/open", "/uc"):
        file_id = (parse_qs(parsed.query).get("id") or [None])[0]
        if file_id:
            return drive_download_url(file_id)

    # thumbnail CDN serves stills only
    if kind == VIDEO:
        m = _GUC_FILE_RE.search(u)
        if m:
            return drive_download_url(m.group(1))

    return u


class MediaResolver:
    @classmethod
    def resolve(cls, media: Optional[List[Dict[str, Any]]], app_url: Optional[str] = None) -> List[MediaRef]:
        out: List[MediaRef] = []
        for item in media or []:
            if not isinstance(item, dict) or not item.get("url"):
                continue
            kind = classify(item)
            out.append(MediaRef(
                url=normalise_url(item["url"], kind=kind, app_url=app_url),
                kind=kind,
                filename=item.get("filename") or item.get("original_name"),
                mime_type=item.get("mime_type") or item.get("mimeType"),
            ))
        return out
