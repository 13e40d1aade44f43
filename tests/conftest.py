from __future__ import annotations

import base64
import copy
import json
from io import BytesIO
from types import SimpleNamespace
from typing import Any

import pytest
from PIL import Image

from arch_genius.agents.deps import Deps
from arch_genius.core.settings import Settings
from arch_genius.schemas.plan import GenerationResponse
from arch_genius.schemas.requirements import Requirements


PLAN_PAYLOAD: dict[str, Any] = {
    "options": [
        {
            "id": plan_id,
            "name": name,
            "concept": f"{name} concept built around {focus}.",
            "roomSizes": [
                {"room": "Living Room", "area": "18x20 ft"},
                {"room": "Kitchen", "area": "12x14 ft"},
                {"room": "Master Bedroom", "area": "14x16 ft"},
                {"room": "Home Office", "area": "10x10 ft"},
            ],
            "totalAreaUsed": "2350 sqft",
            "layoutDescription": f"Entry opens onto the {focus} core; bedrooms upstairs, office off the foyer.",
            "uniqueAspects": f"A {focus} spine through the house.",
            "pros": ["Good flow", "Flexible office"],
            "cons": ["Higher build cost"],
        }
        for plan_id, name, focus in (
            (1, "Open Horizon", "open-plan"),
            (2, "Quiet Zones", "privacy"),
            (3, "Light Court", "daylight"),
            (4, "Compact Core", "storage"),
        )
    ]
}


def make_png(width: int = 400, height: int = 300) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (width, height), "white").save(buffer, format="PNG")
    return buffer.getvalue()


def image_response(png: bytes, mime_type: str = "image/png") -> SimpleNamespace:
    parts = [
        SimpleNamespace(text="Here is your sketch.", inline_data=None),
        SimpleNamespace(text=None, inline_data=SimpleNamespace(mime_type=mime_type, data=png)),
    ]
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])


class FakeModels:
    """Stands in for `client.aio.models`; replays queued results in order."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.results: list[Any] = []

    def queue(self, *results: Any) -> None:
        self.results.extend(results)

    async def generate_content(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        result = self.results.pop(0)
        if callable(result):
            result = await result()
        if isinstance(result, BaseException):
            raise result
        return result


class FakeClient:
    def __init__(self) -> None:
        self.models = FakeModels()
        self.aio = SimpleNamespace(models=self.models)


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    # Settings creates .env from .env.example in the working directory
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(_env_file=None, api_key="test-key", output_dir_path=tmp_path / "output", request_timeout_seconds=5)


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def deps(settings, fake_client) -> Deps:
    return Deps(settings=settings, client=fake_client)


@pytest.fixture
def plan_payload() -> dict[str, Any]:
    return copy.deepcopy(PLAN_PAYLOAD)


@pytest.fixture
def plan_text(plan_payload) -> str:
    return json.dumps(plan_payload)


@pytest.fixture
def plans(plan_payload):
    return GenerationResponse.model_validate(plan_payload).options


@pytest.fixture
def requirements() -> Requirements:
    return Requirements(
        plotSize="2400 sqft",
        floors="2",
        bedrooms="4",
        bathrooms="3",
        style="Modern & Minimalist",
        requirements="home office",
    )


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def png_data_uri(png_bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")
