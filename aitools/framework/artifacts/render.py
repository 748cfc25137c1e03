"""Markdown documents written by the research and design-review commands.

Both renderers share one layout (title, metadata list, body section) but carry
different metadata, so they stay separate functions. Output depends only on
the arguments.
"""

from __future__ import annotations

from collections.abc import Sequence

from .sources import WebSource

NO_RESPONSE_TEXT = "(no response text)"
NO_FEEDBACK_TEXT = "(no feedback returned)"
NO_SOURCES_TEXT = "(none)"
RESEARCH_TOOL = "web_search"


def _source_line(source: WebSource) -> str:
    title = (source.title or "").strip() or source.url
    return f"- [{title}]({source.url})"


def render_research_markdown(
    *,
    query: str,
    created_at: str,
    model: str,
    text: str,
    sources: Sequence[WebSource],
) -> str:
    lines: list[str] = [
        f"# Research: {query}",
        "",
        f"- Date: {created_at}",
        f"- Model: {model}",
        f"- Tool: {RESEARCH_TOOL}",
        "",
        "## Summary",
        "",
        (text or "").strip() or NO_RESPONSE_TEXT,
        "",
        "## Sources",
        "",
    ]

    if sources:
        lines.extend(_source_line(source) for source in sources)
    else:
        lines.append(f"- {NO_SOURCES_TEXT}")

    lines.append("")
    return "\n".join(lines)


def render_design_review_markdown(
    *,
    url: str,
    created_at: str,
    model: str,
    screenshot_file: str,
    feedback: str,
) -> str:
    lines: list[str] = [
        f"# Design Review: {url}",
        "",
        f"- Date: {created_at}",
        f"- Model: {model}",
        f"- Screenshot: {screenshot_file}",
        "",
        "## Feedback",
        "",
        (feedback or "").strip() or NO_FEEDBACK_TEXT,
        "",
    ]
    return "\n".join(lines)
