from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass

from aitools.backends.openai_backend import SearchAI
from aitools.framework.artifacts import (
    IndexEntry,
    append_index_entry,
    artifact_stem,
    dedupe_sources,
    render_research_markdown,
    slugify,
    timestamp_id,
    utc_now_iso8601,
    write_new_artifact,
)
from aitools.framework.config import ToolConfig
from aitools.framework.errors import ValidationError
from aitools.framework.runtime import ArtifactReport
from aitools.framework.validation import require_env_var

API_KEY_ENV_VAR = "OPENAI_API_KEY"


@dataclass(frozen=True)
class ResearchRequest:
    query: str
    model: str
    allowed_domains: tuple[str, ...] = ()
    offline: bool = False


def run_research(
    cfg: ToolConfig,
    request: ResearchRequest,
    *,
    client: SearchAI | None = None,
    logger: logging.Logger | None = None,
    now: Callable[[], str] = utc_now_iso8601,
) -> ArtifactReport:
    """
    Run one web-search-augmented query and file the report in the library.

    Steps: credential check, query validation, library dir creation, one
    Responses call, Markdown write, index append. An index failure is logged
    and recorded on the report; it never fails the run.
    """

    log = logger or logging.getLogger("aitools")

    api_key = require_env_var(API_KEY_ENV_VAR)

    query = request.query.strip()
    if not query:
        raise ValidationError("Research query must be a non-empty string")

    os.makedirs(cfg.library_dir, exist_ok=True)

    search_ai = client if client is not None else SearchAI(api_key, logger=log)
    log.info(
        "Research request sent (model=%s offline=%s allowed_domains=%s)",
        request.model,
        request.offline,
        list(request.allowed_domains),
    )
    result = search_ai.search(
        query,
        model=request.model,
        allowed_domains=request.allowed_domains,
        offline=request.offline,
    )

    created_at = now()
    model = result.model or request.model
    sources = dedupe_sources(result.sources)
    log.info("Received %d characters and %d unique sources", len(result.text), len(sources))

    markdown = render_research_markdown(
        query=query,
        created_at=created_at,
        model=model,
        text=result.text,
        sources=sources,
    )
    stem = artifact_stem(timestamp_id(created_at), slugify(query))
    file_path = write_new_artifact(cfg.library_dir, stem, ".md", markdown)
    log.info("Saved research report to %s", file_path)

    entry = IndexEntry(
        id=os.path.splitext(os.path.basename(file_path))[0],
        query=query,
        file=cfg.relative_to_base(file_path),
        created_at=created_at,
        model=model,
        sources=tuple(sources),
    )

    report = ArtifactReport(artifact_paths=[file_path], index_entry=entry)
    try:
        entries = append_index_entry(cfg.library_dir, entry, logger=log)
        log.info("Appended library index entry %s (%d total)", entry.id, len(entries))
    except Exception as exc:  # noqa: BLE001
        log.exception("Library index append failed: %s", exc)
        report.index_error = str(exc)

    return report
