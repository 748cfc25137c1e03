from __future__ import annotations

from dataclasses import dataclass, field

from aitools.framework.artifacts.library import IndexEntry


@dataclass
class ArtifactReport:
    """What one command run produced, in the order the files were written."""

    artifact_paths: list[str] = field(default_factory=list)
    index_entry: IndexEntry | None = None
    message: str | None = None
    feedback: str | None = None
    index_error: str | None = None
