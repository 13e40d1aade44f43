import asyncio
import json
from types import SimpleNamespace

import pytest
from google.genai import errors as genai_errors

from arch_genius.agents.deps import Deps
from arch_genius.agents.plan_agent import PlanAgent, RESPONSE_SCHEMA
from arch_genius.core.errors import (
    AuthenticationError,
    EmptyResponseError,
    GenerationFailedError,
    MalformedResponseError,
    MissingCredentialError,
    QuotaExceededError,
    ServiceUnavailableError,
)
from arch_genius.core.settings import Settings


def run(coroutine):
    return asyncio.run(coroutine)


def test_prompt_interpolates_every_requirement(requirements):
    prompt = PlanAgent.build_prompt(requirements)

    for expected in ("2400 sqft", "Number of Floors: 2", "Bedrooms: 4", "Bathrooms: 3", "Modern & Minimalist", "home office"):
        assert expected in prompt


def test_run_returns_four_validated_options(deps, fake_client, requirements, plan_text):
    fake_client.models.queue(SimpleNamespace(text=plan_text))

    response = run(PlanAgent(deps).run(requirements))

    assert len(response.options) == 4
    assert len({option.id for option in response.options}) == 4
    for option in response.options:
        assert option.name and option.concept and option.layout_description and option.unique_aspects
        assert option.room_sizes and option.pros and option.cons


def test_run_requests_schema_constrained_json(deps, fake_client, requirements, plan_text):
    fake_client.models.queue(SimpleNamespace(text=plan_text))

    run(PlanAgent(deps).run(requirements))

    [call] = fake_client.models.calls
    config = call["config"]
    assert call["model"] == "gemini-2.5-flash"
    assert "2400 sqft" in call["contents"]
    assert config.response_mime_type == "application/json"
    assert config.response_schema == RESPONSE_SCHEMA
    assert config.temperature == pytest.approx(0.7)
    system_instruction = str(config.system_instruction)
    assert "EXACTLY 4" in system_instruction
    for emphasis in ("open-plan", "privacy", "natural light", "storage"):
        assert emphasis in system_instruction


def test_response_schema_requires_every_plan_field():
    item = RESPONSE_SCHEMA.properties["options"].items

    assert RESPONSE_SCHEMA.required == ["options"]
    assert set(item.required) == set(item.properties) == {
        "id", "name", "concept", "roomSizes", "totalAreaUsed", "layoutDescription", "uniqueAspects", "pros", "cons",
    }


@pytest.mark.parametrize("text", ["not json at all", "{\"options\": [", "[1, 2, 3]"])
def test_unparseable_text_is_malformed(text):
    with pytest.raises(MalformedResponseError):
        PlanAgent.parse_response_text(text)


@pytest.mark.parametrize("text", [None, "", "   \n"])
def test_blank_text_is_empty_response(text):
    with pytest.raises(EmptyResponseError):
        PlanAgent.parse_response_text(text)


def test_wrong_batch_size_is_malformed(plan_payload):
    plan_payload["options"] = plan_payload["options"][:3]

    with pytest.raises(MalformedResponseError, match="floor plan format"):
        PlanAgent.parse_response_text(json.dumps(plan_payload))


@pytest.mark.parametrize("bad_id", [True, "2", 2.0])
def test_non_integer_ids_are_malformed(plan_payload, bad_id):
    plan_payload["options"][1]["id"] = bad_id

    with pytest.raises(MalformedResponseError):
        PlanAgent.parse_response_text(json.dumps(plan_payload))


@pytest.mark.parametrize("field", ["name", "concept", "layoutDescription"])
def test_whitespace_only_text_is_malformed(plan_payload, field):
    plan_payload["options"][0][field] = "   "

    with pytest.raises(MalformedResponseError):
        PlanAgent.parse_response_text(json.dumps(plan_payload))


def test_run_surfaces_malformed_and_empty(deps, fake_client, requirements):
    fake_client.models.queue(SimpleNamespace(text="Sorry, I cannot do that."), SimpleNamespace(text=None))
    agent = PlanAgent(deps)

    with pytest.raises(MalformedResponseError):
        run(agent.run(requirements))
    with pytest.raises(EmptyResponseError):
        run(agent.run(requirements))


def test_missing_credential_fails_before_network(fake_client, requirements, tmp_path):
    settings = Settings(_env_file=None, api_key="", output_dir_path=tmp_path)
    agent = PlanAgent(Deps(settings=settings, client=fake_client))

    with pytest.raises(MissingCredentialError):
        run(agent.run(requirements))
    assert fake_client.models.calls == []


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (genai_errors.ClientError(401, {"error": {"code": 401, "message": "Unauthenticated", "status": "UNAUTHENTICATED"}}), AuthenticationError),
        (genai_errors.ClientError(429, {"error": {"code": 429, "message": "Resource exhausted", "status": "RESOURCE_EXHAUSTED"}}), QuotaExceededError),
        (genai_errors.ServerError(500, {"error": {"code": 500, "message": "Internal", "status": "INTERNAL"}}), ServiceUnavailableError),
        (RuntimeError("socket closed"), GenerationFailedError),
    ],
)
def test_service_errors_are_classified(deps, fake_client, requirements, error, expected):
    fake_client.models.queue(error)

    with pytest.raises(expected) as raised:
        run(PlanAgent(deps).run(requirements))
    assert raised.value.__cause__ is error
    assert len(fake_client.models.calls) == 1


def test_slow_service_times_out_as_generic_failure(deps, fake_client, requirements):
    deps.settings.request_timeout_seconds = 0.01

    async def never_answers():
        await asyncio.sleep(5)

    fake_client.models.queue(never_answers)

    with pytest.raises(GenerationFailedError, match="did not respond in time"):
        run(PlanAgent(deps).run(requirements))
