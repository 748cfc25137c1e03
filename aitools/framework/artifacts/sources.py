from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class WebSource:
    url: str
    title: str | None = None

    def to_dict(self) -> dict[str, str]:
        payload = {"url": self.url}
        if self.title is not None:
            payload["title"] = self.title
        return payload

    @staticmethod
    def from_dict(payload: Mapping[str, Any]) -> "WebSource | None":
        url = payload.get("url")
        if not isinstance(url, str) or not url.strip():
            return None
        title = payload.get("title")
        return WebSource(url=url, title=title if isinstance(title, str) else None)


def dedupe_sources(sources: Iterable[WebSource]) -> list[WebSource]:
    """Drop repeated URLs, keeping the first occurrence of each in input order."""
    seen: set[str] = set()
    unique: list[WebSource] = []
    for source in sources:
        if source.url in seen:
            continue
        seen.add(source.url)
        unique.append(source)
    return unique


def _as_mapping(item: Any) -> Mapping[str, Any]:
    if isinstance(item, Mapping):
        return item
    dump = getattr(item, "model_dump", None)
    if callable(dump):
        payload = dump()
        if isinstance(payload, Mapping):
            return payload
    return {}


def collect_web_search_sources(output_items: Any) -> list[WebSource]:
    """
    Gather citations from Responses API output items.

    Only `web_search_call` items contribute, via `action.sources`. Items are
    accepted as plain dicts or SDK models; anything else yields no sources.
    """

    if not isinstance(output_items, (list, tuple)):
        return []

    sources: list[WebSource] = []
    for item in output_items:
        payload = _as_mapping(item)
        if payload.get("type") != "web_search_call":
            continue
        action = _as_mapping(payload.get("action"))
        raw_sources = action.get("sources") or []
        if not isinstance(raw_sources, (list, tuple)):
            continue
        for raw in raw_sources:
            source = WebSource.from_dict(_as_mapping(raw))
            if source is not None:
                sources.append(source)

    return dedupe_sources(sources)
