from __future__ import annotations

import asyncio
import logging
from typing import Any

from google.genai import types

from arch_genius.agents.deps import Deps
from arch_genius.core.errors import ArchGeniusError, ErrorClassifier, NoImageProducedError, SKETCH_MESSAGES
from arch_genius.utilities.utilities import Utilities


logger = logging.getLogger(__name__)


class SketchAgent:
    """Renders a blueprint-style sketch for one layout description. Never caches."""

    def __init__(self, deps: Deps) -> None:
        self.deps = deps

    def build_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            image_config=types.ImageConfig(aspect_ratio=self.deps.settings.image_aspect_ratio),
        )

    @staticmethod
    def build_prompt(layout_description: str, style: str) -> str:
        return (f"""
                Create a high-quality architectural floor plan sketch (top-down 2D blueprint).

                Project Parameters:
                - Architectural Style: {style}
                - Layout Concept: {layout_description}

                Visual Style Requirements:
                - Black ink on white background (blueprint aesthetic).
                - Clean, continuous lines for walls.
                - Standard architectural symbols for doors and windows.
                - 2D orthogonal projection only (no 3D, isometric, or perspective views).
                - Schematic, legible, and professional.
                """).strip()

    @staticmethod
    def extract_image_data_uri(response: Any) -> str:
        """Return the first inline image part of the first candidate as a data URI."""
        candidates = getattr(response, "candidates", None) or []
        content = getattr(candidates[0], "content", None) if candidates else None
        parts = getattr(content, "parts", None) or []

        for part in parts:
            inline_data = getattr(part, "inline_data", None)
            if inline_data is not None and inline_data.data:
                mime_type: str = inline_data.mime_type or "image/png"
                return Utilities.encode_data_uri(mime_type, inline_data.data)

        raise NoImageProducedError("No image was generated by the model.")

    async def run(self, layout_description: str, style: str) -> str:
        settings = self.deps.settings
        settings.require_api_key()

        prompt: str = self.build_prompt(layout_description, style)
        try:
            response = await asyncio.wait_for(
                self.deps.client.aio.models.generate_content(
                    model=settings.image_model,
                    contents=types.Content(role="user", parts=[types.Part(text=prompt)]),
                    config=self.build_config(),
                ),
                timeout=settings.request_timeout_seconds,
            )
            return self.extract_image_data_uri(response)

        except ArchGeniusError as exception:
            logger.error("Sketch response rejected: %s", exception)
            raise
        except Exception as exception:
            logger.error("Gemini API error during sketch generation: %r", exception)
            raise ErrorClassifier.classify(exception, SKETCH_MESSAGES) from exception
