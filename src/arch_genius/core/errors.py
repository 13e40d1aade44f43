from __future__ import annotations

import asyncio
from dataclasses import dataclass


class ArchGeniusError(Exception):
    """Base class for every failure surfaced to the user. `str(error)` is the user-facing message."""


class MissingCredentialError(ArchGeniusError):
    pass


class MalformedResponseError(ArchGeniusError):
    pass


class EmptyResponseError(ArchGeniusError):
    pass


class AuthenticationError(ArchGeniusError):
    pass


class QuotaExceededError(ArchGeniusError):
    pass


class ServiceUnavailableError(ArchGeniusError):
    pass


class NoImageProducedError(ArchGeniusError):
    pass


class GenerationFailedError(ArchGeniusError):
    pass


class GenerationInProgressError(ArchGeniusError):
    pass


@dataclass(frozen=True)
class ErrorMessages:
    authentication: str
    quota: str
    server: str
    timeout: str
    generic_prefix: str
    fallback: str


PLAN_MESSAGES = ErrorMessages(
    authentication="Authentication failed. Please check if your API Key is valid and active.",
    quota="Usage limit exceeded. Please try again later.",
    server="The AI service is currently experiencing issues. Please try again shortly.",
    timeout="The AI service did not respond in time. Please try again.",
    generic_prefix="Generation failed",
    fallback="An unexpected error occurred while generating floor plans.",
)

SKETCH_MESSAGES = ErrorMessages(
    authentication="Invalid API Key for image generation.",
    quota="Image generation quota exceeded.",
    server="The image service is currently experiencing issues. Please try again shortly.",
    timeout="Image generation timed out. Please try again.",
    generic_prefix="Failed to generate visualization",
    fallback="Failed to generate visualization.",
)


class ErrorClassifier:
    """Map raw SDK / transport exceptions onto the ArchGenius error taxonomy."""

    def __init__(self) -> None:
        raise RuntimeError("ErrorClassifier is a static class; do not instantiate it.")

    @staticmethod
    def status_code(exception: BaseException) -> int | None:
        # google.genai.errors.APIError exposes `code`; httpx-style errors expose `status_code`
        for attribute in ("code", "status_code", "status"):
            value = getattr(exception, attribute, None)
            if isinstance(value, int):
                return value
        return None

    @staticmethod
    def classify(exception: BaseException, messages: ErrorMessages) -> ArchGeniusError:
        if isinstance(exception, ArchGeniusError):
            return exception

        if isinstance(exception, (asyncio.TimeoutError, TimeoutError)):
            return GenerationFailedError(messages.timeout)

        status: int | None = ErrorClassifier.status_code(exception)
        message: str = str(exception).strip()
        lowered: str = message.lower()

        if status in (401, 403) or "api key" in lowered:
            return AuthenticationError(messages.authentication)
        if status == 429 or "quota" in lowered:
            return QuotaExceededError(messages.quota)
        if status is not None and status >= 500:
            return ServiceUnavailableError(messages.server)
        if message:
            return GenerationFailedError(f"{messages.generic_prefix}: {message}")
        return GenerationFailedError(messages.fallback)
