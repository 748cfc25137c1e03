from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from openai import OpenAI

from .results import ImageResult, SearchResult

WEB_SEARCH_SOURCES_INCLUDE = "web_search_call.action.sources"


def build_web_search_tool(
    *,
    allowed_domains: Sequence[str] = (),
    offline: bool = False,
) -> dict[str, Any]:
    tool: dict[str, Any] = {"type": "web_search"}
    if allowed_domains:
        tool["filters"] = {"allowed_domains": list(allowed_domains)}
    if offline:
        tool["external_web_access"] = False
    return tool


class ImageAI:
    """OpenAI Images API wrapper returning `ImageResult`."""

    def __init__(self, api_key: str, *, logger: logging.Logger | None = None):
        self.client = OpenAI(api_key=api_key)
        self.logger = logger

    def generate(self, prompt: str, *, model: str, size: str, n: int) -> ImageResult:
        if self.logger:
            self.logger.debug("images.generate model=%s size=%s n=%d", model, size, n)
        response = self.client.images.generate(model=model, prompt=prompt, size=size, n=n)
        return ImageResult.from_response(response)


class SearchAI:
    """OpenAI Responses API with the `web_search` tool, returning `SearchResult`."""

    def __init__(self, api_key: str, *, logger: logging.Logger | None = None):
        self.client = OpenAI(api_key=api_key)
        self.logger = logger

    def search(
        self,
        query: str,
        *,
        model: str,
        allowed_domains: Sequence[str] = (),
        offline: bool = False,
    ) -> SearchResult:
        tool = build_web_search_tool(allowed_domains=allowed_domains, offline=offline)
        if self.logger:
            self.logger.debug("responses.create model=%s tool=%s", model, tool)
        response = self.client.responses.create(
            model=model,
            tools=[tool],
            tool_choice="auto",
            include=[WEB_SEARCH_SOURCES_INCLUDE],
            input=query,
        )
        return SearchResult.from_response(response)
