from __future__ import annotations

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from arch_genius.core.plan_session import PlanSession, VisualizationStatus
from arch_genius.schemas.plan import PlanOption


STATUS_LABELS: dict[VisualizationStatus, str] = {
    VisualizationStatus.ABSENT: "[dim]No sketch yet. Press 'v' to visualize this layout.[/dim]",
    VisualizationStatus.LOADING: "[bold magenta]Drafting blueprint... this may take a moment.[/bold magenta]",
    VisualizationStatus.READY: "[green]Sketch ready.[/green] 'i' image, 'p' PDF report, 'g' regenerate sketch.",
}


def render_step_indicator(presenting: bool) -> Text:
    text = Text()
    text.append("1. Specify", style="" if presenting else "bold blue")
    text.append(" / ", style="dim")
    text.append("2. Design", style="bold blue" if presenting else "")
    return text


def render_tabs(session: PlanSession) -> Text:
    text = Text()
    for plan in session.plans:
        label: str = f" {plan.id}. {plan.name} "
        if plan.id == session.active_plan_id:
            text.append(label, style="bold white on grey15")
        else:
            text.append(label, style="grey50")
        text.append("  ")
    return text


def render_room_table(plan: PlanOption) -> Table:
    table = Table(title="Room Dimensions", title_justify="left", expand=True)
    table.add_column("Room", style="bold")
    table.add_column("Area")
    for room in plan.room_sizes:
        table.add_row(room.room, room.area)
    return table


def render_bullets(title: str, items: list[str], style: str) -> Text:
    text = Text(f"{title}\n", style=f"bold {style}")
    for item in items:
        text.append(f"  • {item}\n")
    return text


def render_plan(session: PlanSession) -> Group:
    plan: PlanOption = session.active_plan
    status: VisualizationStatus = session.status(plan.id)

    details = Group(
        Text(f"TOTAL USAGE: {plan.total_area_used}", style="bold blue"),
        Text(plan.name, style="bold"),
        Text(plan.concept),
        Panel(plan.layout_description, title="Layout Flow", title_align="left"),
        render_room_table(plan),
        Panel(plan.unique_aspects, title="Unique Feature", title_align="left", border_style="magenta"),
        render_bullets("Pros", plan.pros, "green"),
        render_bullets("Cons", plan.cons, "red"),
        Panel(STATUS_LABELS[status], title="AI Visualization", title_align="left"),
    )
    return Group(render_tabs(session), details)
