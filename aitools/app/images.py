from __future__ import annotations

import base64
import binascii
import io
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass

import requests
from PIL import Image

from aitools.backends.openai_backend import ImageAI
from aitools.backends.results import GeneratedImage
from aitools.framework.artifacts import artifact_stem, timestamp_id, utc_now_iso8601, write_new_artifact
from aitools.framework.config import ToolConfig
from aitools.framework.runtime import ArtifactReport
from aitools.framework.validation import clamp_image_count, require_env_var, resolve_image_prompt

API_KEY_ENV_VAR = "OPENAI_API_KEY"

NO_IMAGES_RETURNED = "No images returned."
NO_IMAGE_DATA = "No image data to save."


@dataclass(frozen=True)
class ImagesRequest:
    prompt: str | None
    model: str
    size: str
    count: int | str
    label: str
    default_prompt: str


def fetch_image_bytes(url: str, *, logger: logging.Logger) -> bytes | None:
    try:
        response = requests.get(url)
    except requests.exceptions.RequestException as exc:
        logger.warning("Image download failed for %s: %s", url, exc)
        return None
    if not response.ok:
        logger.warning("Image download failed for %s: HTTP %s", url, response.status_code)
        return None
    return response.content


def is_image_payload(payload: bytes) -> bool:
    try:
        with Image.open(io.BytesIO(payload)) as image:
            image.verify()
    except Exception:  # noqa: BLE001
        return False
    return True


def _image_bytes(item: GeneratedImage, *, logger: logging.Logger) -> bytes | None:
    if item.b64_json:
        try:
            return base64.b64decode(item.b64_json, validate=True)
        except (binascii.Error, ValueError) as exc:
            logger.warning("Skipping image with invalid base64 payload: %s", exc)
            return None
    if item.url:
        return fetch_image_bytes(item.url, logger=logger)
    logger.warning("Skipping image item with neither inline data nor URL")
    return None


def run_images(
    cfg: ToolConfig,
    request: ImagesRequest,
    *,
    client: ImageAI | None = None,
    logger: logging.Logger | None = None,
    now: Callable[[], str] = utc_now_iso8601,
) -> ArtifactReport:
    """
    Generate images and save each one as `<timestamp>__<label>_<n>.png`.

    Items that cannot be decoded or downloaded are logged and skipped; the
    run still succeeds with whatever was saved.
    """

    log = logger or logging.getLogger("aitools")

    api_key = require_env_var(API_KEY_ENV_VAR)

    count = clamp_image_count(request.count)
    prompt = resolve_image_prompt(request.prompt, default_prompt=request.default_prompt, label=request.label)

    os.makedirs(cfg.images_dir, exist_ok=True)

    image_ai = client if client is not None else ImageAI(api_key, logger=log)
    log.info("Image generation request sent (model=%s, size=%s, n=%d)", request.model, request.size, count)
    result = image_ai.generate(prompt, model=request.model, size=request.size, n=count)

    if not result.images:
        log.info(NO_IMAGES_RETURNED)
        return ArtifactReport(message=NO_IMAGES_RETURNED)

    timestamp = timestamp_id(now())
    saved: list[str] = []
    for n, item in enumerate(result.images, start=1):
        payload = _image_bytes(item, logger=log)
        if payload is None:
            continue
        if not is_image_payload(payload):
            log.warning("Skipping image %d: payload is not a readable image", n)
            continue
        path = write_new_artifact(cfg.images_dir, artifact_stem(timestamp, f"{request.label}_{n}"), ".png", payload)
        log.info("Saved image to %s", path)
        saved.append(path)

    if not saved:
        log.warning(NO_IMAGE_DATA)
        return ArtifactReport(message=NO_IMAGE_DATA)

    return ArtifactReport(artifact_paths=saved)
