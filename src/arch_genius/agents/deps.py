from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from arch_genius.core.settings import Settings


@dataclass
class Deps:
    settings: Settings
    # google.genai.Client, or anything exposing `aio.models.generate_content`
    client: Any
