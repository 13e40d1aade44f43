from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule

from arch_genius.agents.deps import Deps
from arch_genius.core.application import Application
from arch_genius.core.constants import PRODUCT_NAME, STYLE_OPTIONS
from arch_genius.core.errors import ArchGeniusError, MissingCredentialError
from arch_genius.core.plan_session import PlanSession, VisualizationStatus
from arch_genius.core.settings import Settings
from arch_genius.export.report_exporter import ExportArtifact, ReportExporter
from arch_genius.llm.client_factory import ClientFactory
from arch_genius.schemas.requirements import Requirements
from arch_genius.ui.plan_view import render_plan, render_step_indicator


logger = logging.getLogger(__name__)

app: typer.Typer = typer.Typer(add_completion=False)

REQUIREMENT_PROMPTS: dict[str, str] = {
    "plot_size": "Plot size (sqft or dimensions, e.g. 2400 sqft or 40x60)",
    "floors": "Number of floors",
    "bedrooms": "Bedrooms (1-10)",
    "bathrooms": "Bathrooms (1-10)",
    "style": "Style preference",
    "requirements": "Specific requirements (home office, garage, garden...)",
}

RESULTS_COMMANDS = "plan number to switch, v visualize, g regenerate sketch, i image, p PDF, n new project, q quit"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _prompt_style(console: Console, default: str) -> str:
    for index, style in enumerate(STYLE_OPTIONS, start=1):
        console.print(f"  {index}. {style}")
    answer: str = typer.prompt(REQUIREMENT_PROMPTS["style"], default=default).strip()
    if answer.isdigit() and 1 <= int(answer) <= len(STYLE_OPTIONS):
        return STYLE_OPTIONS[int(answer) - 1]
    return answer


def capture_requirements(console: Console, provided: dict[str, str | None], defaults: Requirements | None) -> Requirements:
    """Fill every missing field from the terminal, re-asking for the ones that fail validation."""
    fallback: Requirements | None = defaults
    values: dict[str, str | None] = dict(provided)

    while True:
        for name, label in REQUIREMENT_PROMPTS.items():
            if values.get(name) is not None:
                continue
            default: Any = getattr(fallback, name) if fallback is not None else Requirements.model_fields[name].default
            if name == "style":
                values[name] = _prompt_style(console, default)
            elif name == "plot_size" and fallback is None:
                values[name] = typer.prompt(label)
            else:
                values[name] = typer.prompt(label, default=default, show_default=default != "")

        try:
            return Requirements(**values)
        except ValidationError as exception:
            names_by_alias: dict[str, str] = {
                field.alias or name: name for name, field in Requirements.model_fields.items()
            }
            for error in exception.errors():
                location: str = str(error["loc"][0]) if error["loc"] else ""
                field_name: str = names_by_alias.get(location, location)
                console.print(f"[red]{REQUIREMENT_PROMPTS.get(field_name, field_name)}: {error['msg']}[/red]")
                values[field_name] = None


async def _sketch_in_background(console: Console, session: PlanSession, plan_id: int, force: bool) -> None:
    try:
        image_uri: str | None = await session.visualize(plan_id, force=force)
    except ArchGeniusError as error:
        console.print(f"[red]Failed to generate visualization for plan {plan_id}: {error}[/red]")
        return
    except Exception:
        logger.exception("Unexpected error while sketching plan %s.", plan_id)
        console.print(f"[red]Failed to generate visualization for plan {plan_id}. Please try again.[/red]")
        return
    if image_uri is not None and session.is_live:
        console.print(f"[green]Sketch for plan {plan_id} is ready.[/green]")


def _save(console: Console, artifact: ExportArtifact, output_dir: Path) -> None:
    path: Path = artifact.save(output_dir)
    console.print(f"[green]Saved {path}[/green]")


async def present_results(
    console: Console,
    application: Application,
    session: PlanSession,
    exporter: ReportExporter,
    sketch_tasks: set[asyncio.Task],
) -> bool:
    """Run the results view. Returns True for a new project, False to quit."""
    output_dir: Path = application.settings.output_dir_path

    while True:
        console.print(Rule(render_step_indicator(presenting=True)))
        console.print(render_plan(session))

        # Prompt off the event loop so background sketches keep progressing
        command: str = await asyncio.to_thread(typer.prompt, f"Command ({RESULTS_COMMANDS})", default="", show_default=False)
        command = command.strip().lower()
        plan = session.active_plan

        match command:
            case "":
                continue
            case "q":
                application.reset()
                return False
            case "n":
                application.reset()
                return True
            case "v" | "g":
                force: bool = command == "g"
                status: VisualizationStatus = session.status(plan.id)
                if status is VisualizationStatus.LOADING:
                    console.print("[yellow]A sketch for this plan is already being drafted.[/yellow]")
                elif status is VisualizationStatus.READY and not force:
                    console.print("[yellow]This plan already has a sketch. Use 'g' to regenerate it.[/yellow]")
                else:
                    task: asyncio.Task = asyncio.create_task(_sketch_in_background(console, session, plan.id, force))
                    sketch_tasks.add(task)
                    task.add_done_callback(sketch_tasks.discard)
            case "i":
                artifact: ExportArtifact | None = exporter.image_artifact(plan, session.visualizations)
                if artifact is None:
                    console.print("[yellow]Visualize the layout before downloading an image.[/yellow]")
                else:
                    _save(console, artifact, output_dir)
            case "p":
                _save(console, exporter.pdf_artifact(plan, session.visualizations), output_dir)
            case _ if command.isdigit():
                try:
                    session.select(int(command))
                except KeyError:
                    console.print(f"[yellow]There is no plan {command}.[/yellow]")
            case _:
                console.print(f"[yellow]Unknown command '{command}'.[/yellow]")


async def run_interactive(console: Console, application: Application, provided: dict[str, str | None]) -> None:
    exporter = ReportExporter()
    sketch_tasks: set[asyncio.Task] = set()
    previous: Requirements | None = None

    try:
        while True:
            console.print(Rule(render_step_indicator(presenting=False)))
            requirements: Requirements = await asyncio.to_thread(capture_requirements, console, provided, previous)
            provided = {}
            previous = requirements

            try:
                with console.status("Designing Layouts..."):
                    session: PlanSession = await application.submit(requirements)
            except ArchGeniusError as error:
                console.print(f"[red]{error}[/red]")
                continue

            if not await present_results(console, application, session, exporter, sketch_tasks):
                return
            previous = None
    finally:
        for task in sketch_tasks:
            task.cancel()


@app.callback(invoke_without_command=True)
def cli(
    plot_size: str | None = typer.Option(None, "--plot-size", help="Plot size, e.g. '2400 sqft' or '40x60'."),
    floors: str | None = typer.Option(None, "--floors", help="Number of floors."),
    bedrooms: str | None = typer.Option(None, "--bedrooms", help="Bedrooms (1-10)."),
    bathrooms: str | None = typer.Option(None, "--bathrooms", help="Bathrooms (1-10)."),
    style: str | None = typer.Option(None, "--style", help=f"One of: {', '.join(STYLE_OPTIONS)}."),
    requirements: str | None = typer.Option(None, "--requirements", help="Specific requirements as free text."),
    output_dir: Path | None = typer.Option(None, "--output-dir", help="Where exported images and PDFs are saved."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level (DEBUG, INFO, WARNING...)."),
) -> None:
    typer.echo(f"{PRODUCT_NAME}: design your dream home in seconds")

    try:
        overrides: dict[str, Any] = {}
        if output_dir is not None:
            overrides["output_dir_path"] = output_dir
        if log_level is not None:
            overrides["log_level"] = log_level

        settings: Settings = Settings(**overrides)
        configure_logging(settings.log_level)

        client = ClientFactory.create_client(settings)
        application: Application = Application(settings=settings, deps=Deps(settings=settings, client=client))

        provided: dict[str, str | None] = {
            "plot_size": plot_size,
            "floors": floors,
            "bedrooms": bedrooms,
            "bathrooms": bathrooms,
            "style": style,
            "requirements": requirements,
        }
        asyncio.run(run_interactive(Console(), application, provided))
        typer.secho("Conceptual designs for inspiration purposes.", fg=typer.colors.GREEN)

    except MissingCredentialError as exception:
        typer.secho(str(exception), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)
    except (typer.Abort, KeyboardInterrupt):
        typer.echo("Aborted.", err=True)
        raise typer.Exit(code=130)
    except Exception as exception:
        typer.secho("Something went wrong.", fg=typer.colors.RED, err=True)
        typer.echo(str(exception), err=True)
        raise typer.Exit(code=1)


def main() -> None:
    app()
