from __future__ import annotations

import ipaddress
import os
import re
from urllib.parse import urlsplit, urlunsplit

from aitools.framework.errors import ConfigurationError, ValidationError

_VIEWPORT_RE = re.compile(r"^(\d{2,5})x(\d{2,5})$")
_LEADING_INT_RE = re.compile(r"\s*([-+]?\d+)")
# Host code points a browser URL parser refuses.
_FORBIDDEN_HOST_RE = re.compile(r"[\x00-\x20\x7f#/:<>?@\[\\\]^|]")

MIN_IMAGE_COUNT = 1
MAX_IMAGE_COUNT = 10


def require_env_var(name: str) -> str:
    value = os.environ.get(name, "").strip()
    if not value:
        raise ConfigurationError(f"{name} is not set in the environment or .env file.")
    return value


def _check_host(netloc: str, hostname: str, value: str) -> None:
    if "[" in netloc:
        try:
            ipaddress.IPv6Address(hostname)
        except ValueError as exc:
            raise ValidationError(f"Invalid URL (bad IPv6 host): {value!r}") from exc
        return
    if _FORBIDDEN_HOST_RE.search(hostname):
        raise ValidationError(f"Invalid URL (bad host): {value!r}")


def normalize_url(value: str) -> str:
    """Return a normalized http(s) URL or raise ValidationError."""

    text = str(value or "").strip()
    try:
        parts = urlsplit(text)
        # Raises on a non-numeric or out-of-range port.
        parts.port
    except ValueError as exc:
        raise ValidationError(f"Invalid URL: {value!r}") from exc

    if parts.scheme.lower() not in ("http", "https"):
        raise ValidationError("URL must start with http:// or https://")
    if not parts.netloc or not parts.hostname:
        raise ValidationError(f"Invalid URL (missing host): {value!r}")
    _check_host(parts.netloc, parts.hostname, value)

    path = parts.path or "/"
    return urlunsplit((parts.scheme.lower(), parts.netloc, path, parts.query, parts.fragment))


def parse_viewport(value: str) -> tuple[int, int]:
    match = _VIEWPORT_RE.match(str(value or "").strip())
    if not match:
        raise ValidationError("Viewport must be in WIDTHxHEIGHT format, e.g. 1280x720.")
    return int(match.group(1)), int(match.group(2))


def _leading_int(value: object) -> int | None:
    """Integer prefix of `value` ("2.5" -> 2, "1500ms" -> 1500), or None when there is none."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else None


def clamp_image_count(value: object) -> int:
    """Parse a requested image count; unparsable values mean 1, the result is kept in 1..10."""
    count = _leading_int(value)
    if count is None:
        count = MIN_IMAGE_COUNT
    return max(MIN_IMAGE_COUNT, min(MAX_IMAGE_COUNT, count))


def parse_wait_ms(value: object) -> int:
    wait_ms = _leading_int(value)
    if wait_ms is None:
        return 0
    return max(0, wait_ms)


def resolve_image_prompt(prompt: str | None, *, default_prompt: str, label: str) -> str:
    """
    Keep every prompt on the configured subject.

    An empty prompt falls back to `default_prompt`; a prompt that never
    mentions `label` gets the default prompt prepended.
    """

    base = (prompt or "").strip() or default_prompt
    if label and re.search(re.escape(label), base, flags=re.IGNORECASE):
        return base
    return f"{default_prompt}, {base}"
