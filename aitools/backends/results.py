"""Typed results returned by the SDK adapters.

SDK responses are loosely shaped (pydantic models with optional fields, or
plain dicts in tests). Each `from_response` checks the fields a command needs
and raises `ExternalServiceError` when they are unusable, so the command flows
never probe optional attributes themselves.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from aitools.framework.artifacts.sources import WebSource, collect_web_search_sources
from aitools.framework.errors import ExternalServiceError


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _optional_text(value: Any, name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ExternalServiceError(f"Unexpected type for {name}: {type(value).__name__}")
    return value


@dataclass(frozen=True)
class GeneratedImage:
    b64_json: str | None = None
    url: str | None = None


@dataclass(frozen=True)
class ImageResult:
    images: tuple[GeneratedImage, ...] = ()

    @staticmethod
    def from_response(response: Any) -> "ImageResult":
        data = _field(response, "data")
        if data is None:
            return ImageResult()
        if not isinstance(data, (list, tuple)):
            raise ExternalServiceError("Image response `data` is not a list")

        images: list[GeneratedImage] = []
        for idx, item in enumerate(data):
            b64_json = _optional_text(_field(item, "b64_json"), f"data[{idx}].b64_json")
            url = _optional_text(_field(item, "url"), f"data[{idx}].url")
            images.append(GeneratedImage(b64_json=b64_json or None, url=url or None))
        return ImageResult(images=tuple(images))


@dataclass(frozen=True)
class TextResult:
    text: str
    model: str | None = None

    @staticmethod
    def from_response(response: Any, *, model: str | None = None) -> "TextResult":
        text = _optional_text(_field(response, "text"), "text")
        return TextResult(text=text or "", model=model)


@dataclass(frozen=True)
class SearchResult:
    text: str
    model: str | None = None
    sources: tuple[WebSource, ...] = field(default_factory=tuple)

    @staticmethod
    def from_response(response: Any) -> "SearchResult":
        text = _optional_text(_field(response, "output_text"), "output_text")
        model = _optional_text(_field(response, "model"), "model")
        sources = collect_web_search_sources(_field(response, "output"))
        return SearchResult(text=text or "", model=model or None, sources=tuple(sources))
