import asyncio
import logging
from io import StringIO

import typer
from rich.console import Console
from typer.testing import CliRunner

from arch_genius import main as cli_module
from arch_genius.agents.sketch_agent import SketchAgent
from arch_genius.core.plan_session import PlanSession
from arch_genius.main import _sketch_in_background, app, capture_requirements


def scripted_prompts(monkeypatch, answers):
    asked = []

    def fake_prompt(text, default=None, **kwargs):
        asked.append(text)
        answer = answers.pop(0)
        return default if answer is None else answer

    monkeypatch.setattr(typer, "prompt", fake_prompt)
    return asked


def test_capture_prompts_only_for_missing_fields(monkeypatch):
    asked = scripted_prompts(monkeypatch, ["3", None])

    requirements = capture_requirements(
        Console(file=None, quiet=True),
        {"plot_size": "2400 sqft", "floors": "2", "bedrooms": "4", "bathrooms": "3", "style": None, "requirements": None},
        None,
    )

    assert len(asked) == 2
    assert requirements.style == "Traditional"
    assert requirements.requirements == ""


def test_capture_reprompts_invalid_values(monkeypatch):
    asked = scripted_prompts(monkeypatch, ["4"])

    requirements = capture_requirements(
        Console(quiet=True),
        {"plot_size": "40x60", "floors": "1", "bedrooms": "12", "bathrooms": "2", "style": "Industrial", "requirements": "garage"},
        None,
    )

    assert asked == [cli_module.REQUIREMENT_PROMPTS["bedrooms"]]
    assert requirements.bedrooms == "4"


def test_cli_exits_without_credential():
    result = CliRunner().invoke(app, ["--plot-size", "2400 sqft"])

    assert result.exit_code == 2
    assert "API key is missing" in result.output


def test_background_sketch_reports_unexpected_errors(deps, plans, caplog):
    session = PlanSession(plans=plans, style="Farmhouse", sketch_agent=SketchAgent(deps))
    output = StringIO()

    with caplog.at_level(logging.ERROR):
        asyncio.run(_sketch_in_background(Console(file=output, width=200), session, 99, False))

    assert "Failed to generate visualization for plan 99" in output.getvalue()
    assert "Unexpected error while sketching plan 99" in caplog.text
    assert "KeyError" in caplog.text
