"""
Input sanitizing and validation helpers used by the request schemas.
"""

import re
from typing import Any, Optional
from urllib.parse import urlparse

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
CONTROL_CHARS = re.compile(r"[\x00-\x1F\x7F]")

MAX_CONTENT_LENGTH = 50000
MAX_SORT_ORDER = 10000


def sanitize_string(value: str) -> str:
    return CONTROL_CHARS.sub("", value.strip())


def sanitize_json_data(data: Any) -> Any:
    """Recursively sanitize every string inside a JSON-like structure."""
    if isinstance(data, str):
        return sanitize_string(data)
    if isinstance(data, list):
        return [sanitize_json_data(item) for item in data]
    if isinstance(data, dict):
        return {key: sanitize_json_data(value) for key, value in data.items()}
    return data


def is_valid_slug(slug: str) -> bool:
    return bool(SLUG_PATTERN.match(slug))


def is_valid_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def password_problem(password: str) -> Optional[str]:
    """Return why a password is too weak, or None when it is acceptable."""
    if len(password) < 8:
        return "Password must be at least 8 characters long"
    if not re.search(r"[A-Z]", password):
        return "Password must contain at least one uppercase letter"
    if not re.search(r"[a-z]", password):
        return "Password must contain at least one lowercase letter"
    if not re.search(r"[0-9]", password):
        return "Password must contain at least one number"
    return None
