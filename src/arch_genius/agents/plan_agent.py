from __future__ import annotations

import asyncio
import json
import logging

from google.genai import types
from pydantic import ValidationError

from arch_genius.agents.deps import Deps
from arch_genius.core.constants import ARCH_GENIUS_SYSTEM_INSTRUCTION
from arch_genius.core.errors import (
    ArchGeniusError,
    EmptyResponseError,
    ErrorClassifier,
    MalformedResponseError,
    PLAN_MESSAGES,
)
from arch_genius.schemas.plan import GenerationResponse
from arch_genius.schemas.requirements import Requirements


logger = logging.getLogger(__name__)

_STRING = types.Schema(type=types.Type.STRING)

RESPONSE_SCHEMA: types.Schema = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "options": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "id": types.Schema(type=types.Type.INTEGER),
                    "name": _STRING,
                    "concept": _STRING,
                    "roomSizes": types.Schema(
                        type=types.Type.ARRAY,
                        items=types.Schema(
                            type=types.Type.OBJECT,
                            properties={"room": _STRING, "area": _STRING},
                            required=["room", "area"],
                        ),
                    ),
                    "totalAreaUsed": _STRING,
                    "layoutDescription": _STRING,
                    "uniqueAspects": _STRING,
                    "pros": types.Schema(type=types.Type.ARRAY, items=_STRING),
                    "cons": types.Schema(type=types.Type.ARRAY, items=_STRING),
                },
                required=[
                    "id",
                    "name",
                    "concept",
                    "roomSizes",
                    "totalAreaUsed",
                    "layoutDescription",
                    "uniqueAspects",
                    "pros",
                    "cons",
                ],
            ),
        ),
    },
    required=["options"],
)


class PlanAgent:
    """Turns one Requirements submission into a validated batch of plan options."""

    def __init__(self, deps: Deps) -> None:
        self.deps = deps

    def build_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            system_instruction=ARCH_GENIUS_SYSTEM_INSTRUCTION,
            response_mime_type="application/json",
            response_schema=RESPONSE_SCHEMA,
            temperature=self.deps.settings.temperature,
        )

    @staticmethod
    def build_prompt(requirements: Requirements) -> str:
        return (f"""
                Generate 4 distinct residential floor plan options based on these requirements:
                - Plot Size/Area: {requirements.plot_size}
                - Number of Floors: {requirements.floors}
                - Bedrooms: {requirements.bedrooms}
                - Bathrooms: {requirements.bathrooms}
                - Style Preference: {requirements.style}
                - Specific Requirements: {requirements.requirements or "None"}

                Ensure the response follows the JSON schema strictly.
                """).strip()

    @staticmethod
    def parse_response_text(text: str | None) -> GenerationResponse:
        if text is None or text.strip() == "":
            raise EmptyResponseError("The AI model returned an empty response.")

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exception:
            raise MalformedResponseError(
                "The AI generated a response that could not be parsed as valid JSON."
            ) from exception

        try:
            return GenerationResponse.model_validate(payload)
        except ValidationError as exception:
            raise MalformedResponseError(
                f"The AI response did not match the floor plan format ({exception.error_count()} problem(s) found)."
            ) from exception

    async def run(self, requirements: Requirements) -> GenerationResponse:
        settings = self.deps.settings
        settings.require_api_key()

        prompt: str = self.build_prompt(requirements)
        try:
            response = await asyncio.wait_for(
                self.deps.client.aio.models.generate_content(
                    model=settings.text_model,
                    contents=prompt,
                    config=self.build_config(),
                ),
                timeout=settings.request_timeout_seconds,
            )
            return self.parse_response_text(getattr(response, "text", None))

        except ArchGeniusError as exception:
            logger.error("Floor plan response rejected: %s", exception)
            raise
        except Exception as exception:
            logger.error("Gemini API error during plan generation: %r", exception)
            raise ErrorClassifier.classify(exception, PLAN_MESSAGES) from exception
