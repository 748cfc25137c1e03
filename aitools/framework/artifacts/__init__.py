"""Artifact helpers (naming, source citations, Markdown rendering, library index).

This package has no dependency on `aitools.backends` or `aitools.app`; the
command flows compose it with the SDK adapters.
"""

from .library import (
    INDEX_FILENAME,
    IndexEntry,
    append_index_entry,
    find_entries,
    index_path,
    load_index,
    load_index_items,
    save_index,
)
from .naming import artifact_stem, slugify, timestamp_id, utc_now_iso8601, write_new_artifact
from .render import render_design_review_markdown, render_research_markdown
from .sources import WebSource, collect_web_search_sources, dedupe_sources

__all__ = [
    "INDEX_FILENAME",
    "IndexEntry",
    "WebSource",
    "append_index_entry",
    "artifact_stem",
    "collect_web_search_sources",
    "dedupe_sources",
    "find_entries",
    "index_path",
    "load_index",
    "load_index_items",
    "render_design_review_markdown",
    "render_research_markdown",
    "save_index",
    "slugify",
    "timestamp_id",
    "utc_now_iso8601",
    "write_new_artifact",
]
