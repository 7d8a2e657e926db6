"""Validators and small schemas shared by the directory resources."""
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel


def require_text(value: Optional[str], message: str) -> Optional[str]:
    """Strip a text field and reject it when nothing is left."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError(message)
    return value


def check_image_url(value: Optional[str]) -> Optional[str]:
    """Accept http(s) URLs and site-relative paths (local uploads)."""
    if value is None or value == "":
        return None
    if value.startswith("/") and not value.startswith("//"):
        return value
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Image URL must be an http(s) URL")
    return value


class VisibilityUpdate(BaseModel):
    """Admin visibility toggle."""
    is_hidden: bool
