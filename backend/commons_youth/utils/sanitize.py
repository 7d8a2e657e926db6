"""Input sanitization for uploaded files."""
import re

IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp")

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._\- ]")


def sanitize_file_name(file_name: str) -> str:
    """Make a client-supplied filename safe to use as part of a storage key.

    Strips path traversal and separators, replaces anything outside
    ``[A-Za-z0-9._- ]`` with ``_``, caps the length at 255 and never returns
    a hidden (dot-prefixed) or empty name.
    """
    sanitized = file_name.replace("..", "")
    sanitized = re.sub(r"[/\\]", "", sanitized)
    sanitized = _UNSAFE_FILENAME_CHARS.sub("_", sanitized)
    sanitized = sanitized[:255]
    if sanitized.startswith("."):
        sanitized = "_" + sanitized
    return sanitized or "unnamed_file"


def file_extension(file_name: str) -> str:
    if "." not in file_name:
        return ""
    return file_name.rsplit(".", 1)[-1].lower()


def validate_image_file(file_name: str) -> bool:
    return file_extension(file_name) in IMAGE_EXTENSIONS


def validate_file_size(size: int, max_size_mb: int = 2) -> bool:
    return 0 < size <= max_size_mb * 1024 * 1024
