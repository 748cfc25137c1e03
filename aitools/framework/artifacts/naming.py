from __future__ import annotations

import os
import re
from datetime import datetime, timezone

DEFAULT_SLUG = "research"
MAX_SLUG_LENGTH = 60
MAX_COLLISION_SUFFIX = 1000

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_TIMESTAMP_UNSAFE_RE = re.compile(r"[:.]")


def utc_now_iso8601() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def timestamp_id(instant: str) -> str:
    """Filesystem-safe form of an ISO-8601 instant; sorts like the instant itself."""
    return _TIMESTAMP_UNSAFE_RE.sub("-", instant)


def slugify(text: str, *, fallback: str = DEFAULT_SLUG, max_length: int = MAX_SLUG_LENGTH) -> str:
    slug = _NON_ALNUM_RE.sub("-", str(text).lower()).strip("-")
    return slug[:max_length] or fallback


def artifact_stem(timestamp: str, label: str) -> str:
    return f"{timestamp}__{label}"


def write_new_artifact(directory: str, stem: str, suffix: str, payload: str | bytes) -> str:
    """
    Write `payload` to `<directory>/<stem><suffix>` without clobbering anything.

    The file is created exclusively; if the name is already taken the stem is
    retried as `<stem>-2`, `<stem>-3`, ... Returns the path written.
    """

    if isinstance(payload, str):
        data = payload.encode("utf-8")
    else:
        data = bytes(payload)

    for attempt in range(1, MAX_COLLISION_SUFFIX + 1):
        candidate_stem = stem if attempt == 1 else f"{stem}-{attempt}"
        path = os.path.join(directory, candidate_stem + suffix)
        try:
            with open(path, "xb") as handle:
                handle.write(data)
        except FileExistsError:
            continue
        return path

    raise FileExistsError(f"No free artifact name for {stem}{suffix} in {directory}")
