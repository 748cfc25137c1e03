from __future__ import annotations

import json
import logging

import pandas as pd

from aitools.framework.artifacts import find_entries, load_index
from aitools.framework.config import ToolConfig

LIBRARY_EMPTY = "Library is empty."
NO_MATCHES = "No library entries match."

TABLE_COLUMNS = ["createdAt", "id", "model", "sources", "file"]


def format_library(
    cfg: ToolConfig,
    *,
    search: str | None = None,
    limit: int | None = None,
    as_json: bool = False,
    logger: logging.Logger | None = None,
) -> str:
    """Render the research library (newest first) as a text table or JSON."""

    entries = load_index(cfg.library_dir, logger=logger)
    matches = find_entries(entries, search, limit=limit)

    if as_json:
        return json.dumps([entry.to_dict() for entry in matches], ensure_ascii=False, indent=2)

    if not matches:
        return LIBRARY_EMPTY if not entries else NO_MATCHES

    table = pd.DataFrame(
        [
            {
                "createdAt": entry.created_at,
                "id": entry.id,
                "model": entry.model,
                "sources": len(entry.sources),
                "file": entry.file,
            }
            for entry in matches
        ],
        columns=TABLE_COLUMNS,
    )
    return table.to_string(index=False)
