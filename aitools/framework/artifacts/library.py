"""Library index: a JSON array catalog of past research runs.

The index is read and rewritten whole (load, append, save). There is no
locking: one writer per library directory is a precondition, and two
processes appending at the same time can drop an entry (last writer wins).
A missing or unreadable index loads as empty so a bad file never blocks new
runs; anything other than "missing" is reported as a warning. Appends keep
earlier items exactly as stored; only the typed `IndexEntry` view drops what
it cannot interpret.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .sources import WebSource

INDEX_FILENAME = "index.json"

_module_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexEntry:
    id: str
    query: str
    file: str
    created_at: str
    model: str
    sources: tuple[WebSource, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "query": self.query,
            "file": self.file,
            "createdAt": self.created_at,
            "model": self.model,
            "sources": [source.to_dict() for source in self.sources],
        }

    @staticmethod
    def from_dict(payload: Mapping[str, Any]) -> "IndexEntry":
        raw_sources = payload.get("sources")
        sources: list[WebSource] = []
        if isinstance(raw_sources, list):
            for raw in raw_sources:
                if not isinstance(raw, Mapping):
                    continue
                source = WebSource.from_dict(raw)
                if source is not None:
                    sources.append(source)

        def text(key: str) -> str:
            value = payload.get(key)
            return value if isinstance(value, str) else ""

        return IndexEntry(
            id=text("id"),
            query=text("query"),
            file=text("file"),
            created_at=text("createdAt"),
            model=text("model"),
            sources=tuple(sources),
        )


def index_path(library_dir: str) -> str:
    return os.path.join(library_dir, INDEX_FILENAME)


def load_index_items(library_dir: str, *, logger: logging.Logger | None = None) -> list[Any]:
    """
    Return the index's JSON array exactly as stored.

    Items are not interpreted, so appending to this list and saving it keeps
    every earlier item (unknown keys and non-object items included) intact.
    """

    log = logger or _module_logger
    path = index_path(library_dir)

    try:
        with open(path, "r", encoding="utf-8") as handle:
            raw = handle.read()
    except FileNotFoundError:
        log.debug("No library index at %s; starting empty", path)
        return []
    except (OSError, UnicodeDecodeError) as exc:
        log.warning("Library index %s is unreadable (%s); treating it as empty", path, exc)
        return []

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        log.warning("Library index %s is not valid JSON (%s); treating it as empty", path, exc)
        return []

    if not isinstance(payload, list):
        log.warning(
            "Library index %s holds a JSON %s, not an array; treating it as empty",
            path,
            type(payload).__name__,
        )
        return []

    return payload


def load_index(library_dir: str, *, logger: logging.Logger | None = None) -> list[IndexEntry]:
    """Typed view of the index; items that are not JSON objects are skipped with a warning."""

    log = logger or _module_logger
    entries: list[IndexEntry] = []
    for position, item in enumerate(load_index_items(library_dir, logger=log)):
        if not isinstance(item, Mapping):
            log.warning(
                "Skipping library index item %d in %s: not a JSON object",
                position,
                index_path(library_dir),
            )
            continue
        entries.append(IndexEntry.from_dict(item))
    return entries


def save_index(library_dir: str, entries: Iterable[IndexEntry | Any]) -> str:
    """
    Replace the index file with `entries` (2-space JSON, trailing newline).

    `IndexEntry` values are serialized with `to_dict`; anything else is
    written as-is, which is how raw items from `load_index_items` survive.
    """

    path = index_path(library_dir)
    os.makedirs(library_dir, exist_ok=True)
    items = [entry.to_dict() if isinstance(entry, IndexEntry) else entry for entry in entries]
    content = json.dumps(items, ensure_ascii=False, indent=2) + "\n"

    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        newline="",
        delete=False,
        dir=library_dir,
        prefix=INDEX_FILENAME + ".",
        suffix=".tmp",
    ) as handle:
        handle.write(content)
        temp_path = handle.name
    os.replace(temp_path, path)
    return path


def append_index_entry(
    library_dir: str,
    entry: IndexEntry,
    *,
    logger: logging.Logger | None = None,
) -> list[Any]:
    """Push `entry` onto the stored array and save it; returns the raw items written."""

    items = load_index_items(library_dir, logger=logger)
    items.append(entry.to_dict())
    save_index(library_dir, items)
    return items


def find_entries(
    entries: Sequence[IndexEntry],
    text: str | None = None,
    *,
    limit: int | None = None,
) -> list[IndexEntry]:
    """Newest-first entries whose query or id contains `text` (case-insensitive)."""

    needle = (text or "").strip().casefold()
    matches = [
        entry
        for entry in reversed(entries)
        if not needle or needle in entry.query.casefold() or needle in entry.id.casefold()
    ]
    if limit is not None and limit >= 0:
        return matches[:limit]
    return matches
