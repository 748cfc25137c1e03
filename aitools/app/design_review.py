from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass

from aitools.backends.browser import ScreenshotBrowser
from aitools.backends.gemini_backend import VisionAI
from aitools.framework.artifacts import (
    artifact_stem,
    render_design_review_markdown,
    timestamp_id,
    utc_now_iso8601,
    write_new_artifact,
)
from aitools.framework.config import ToolConfig
from aitools.framework.runtime import ArtifactReport
from aitools.framework.validation import normalize_url, parse_viewport, parse_wait_ms, require_env_var

API_KEY_ENV_VAR = "GEMINI_API_KEY"


@dataclass(frozen=True)
class DesignReviewRequest:
    url: str
    model: str
    viewport: str
    full_page: bool
    wait_ms: int | str
    prompt: str


def run_design_review(
    cfg: ToolConfig,
    request: DesignReviewRequest,
    *,
    browser: ScreenshotBrowser | None = None,
    client: VisionAI | None = None,
    logger: logging.Logger | None = None,
    now: Callable[[], str] = utc_now_iso8601,
) -> ArtifactReport:
    log = logger or logging.getLogger("aitools")

    api_key = require_env_var(API_KEY_ENV_VAR)

    target_url = normalize_url(request.url)
    width, height = parse_viewport(request.viewport)
    wait_ms = parse_wait_ms(request.wait_ms)

    os.makedirs(cfg.screenshots_dir, exist_ok=True)
    os.makedirs(cfg.reviews_dir, exist_ok=True)

    created_at = now()
    timestamp = timestamp_id(created_at)

    screenshot_browser = browser if browser is not None else ScreenshotBrowser(logger=log)
    log.info(
        "Capturing %s (viewport=%dx%d full_page=%s wait_ms=%d)",
        target_url,
        width,
        height,
        request.full_page,
        wait_ms,
    )
    png = screenshot_browser.capture(
        target_url,
        width=width,
        height=height,
        full_page=request.full_page,
        wait_ms=wait_ms,
    )
    screenshot_path = write_new_artifact(cfg.screenshots_dir, artifact_stem(timestamp, "screenshot"), ".png", png)
    log.info("Saved screenshot to %s", screenshot_path)

    vision_ai = client if client is not None else VisionAI(api_key, logger=log)
    log.info("Design feedback request sent (model=%s)", request.model)
    result = vision_ai.review_image(request.prompt, png, model=request.model)

    markdown = render_design_review_markdown(
        url=target_url,
        created_at=created_at,
        model=request.model,
        screenshot_file=screenshot_path,
        feedback=result.text,
    )
    review_path = write_new_artifact(cfg.reviews_dir, artifact_stem(timestamp, "design-review"), ".md", markdown)
    log.info("Saved design review to %s", review_path)

    return ArtifactReport(
        artifact_paths=[screenshot_path, review_path],
        feedback=result.text.strip(),
    )
