from __future__ import annotations

import logging

from google import genai
from google.genai import types as genai_types

from .results import TextResult


class VisionAI:
    """Gemini vision call: a text prompt plus one inline image, answered with free text."""

    def __init__(self, api_key: str, *, logger: logging.Logger | None = None):
        self.client = genai.Client(api_key=api_key)
        self.logger = logger

    def review_image(
        self,
        prompt: str,
        image_bytes: bytes,
        *,
        model: str,
        mime_type: str = "image/png",
    ) -> TextResult:
        if self.logger:
            self.logger.debug(
                "generate_content model=%s image_bytes=%d mime=%s", model, len(image_bytes), mime_type
            )
        response = self.client.models.generate_content(
            model=model,
            contents=[
                prompt,
                genai_types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
            ],
        )
        return TextResult.from_response(response, model=model)
