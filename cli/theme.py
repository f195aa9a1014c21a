"""Rich themes (dark / light) and reusable UI helper functions for the CLI."""

from datetime import datetime
from typing import Iterable, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.theme import Theme

from models.enums import PageStatus, ThemePreference
from models.page import GeneratedPage
from models.project import SavedProject

DARK_THEME = Theme({
    "app.title": "bold",
    "success": "green",
    "warning": "yellow",
    "error": "red",
    "info": "blue",
    "muted": "dim",
    "accent": "cyan",
    "stat.label": "dim",
    "stat.value": "bold",
    "page.num": "blue",
    "page.pending": "dim",
    "page.generating": "cyan",
    "page.completed": "green",
    "page.failed": "red",
})

LIGHT_THEME = Theme({
    "app.title": "bold black",
    "success": "dark_green",
    "warning": "dark_orange3",
    "error": "red3",
    "info": "navy_blue",
    "muted": "grey50",
    "accent": "dark_cyan",
    "stat.label": "grey42",
    "stat.value": "bold black",
    "page.num": "navy_blue",
    "page.pending": "grey50",
    "page.generating": "dark_cyan",
    "page.completed": "dark_green",
    "page.failed": "red3",
})


def theme_for(preference: ThemePreference) -> Theme:
    return LIGHT_THEME if preference == ThemePreference.LIGHT else DARK_THEME


def get_console(preference: ThemePreference = ThemePreference.DARK) -> Console:
    """Return a Console instance with the dark or light theme applied."""
    return Console(theme=theme_for(preference))


def app_header(title: str = "dreamlines") -> Rule:
    """Return a Rule element for the application header banner."""
    return Rule(title=f"[bold]{title}[/]", style="dim")


def command_panel(title: str, fields: dict[str, str]) -> Panel:
    """Return a Panel displaying command parameters.

    Args:
        title: Panel title (e.g. "New coloring book").
        fields: Ordered dict of label -> value pairs.
    """
    lines = []
    for label, value in fields.items():
        lines.append(f"  [stat.label]{label}:[/] [stat.value]{value}[/]")
    body = "\n".join(lines)
    return Panel(body, title=f"[bold]{title}[/]", box=box.ROUNDED, border_style="dim", padding=(0, 2))


def success_panel(title: str, body: str) -> Panel:
    """Return a green-bordered Panel for success results."""
    return Panel(body, title=f"[success]{title}[/]", box=box.ROUNDED, border_style="green", padding=(0, 2))


def error_panel(title: str, body: str) -> Panel:
    return Panel(body, title=f"[error]{title}[/]", box=box.ROUNDED, border_style="red", padding=(0, 2))


def format_timestamp(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M")


def project_summary_panel(project: SavedProject) -> Panel:
    """Return a Panel with the book's config and page counts."""
    config = project.config
    body = (
        f"  [stat.label]For:[/] [stat.value]{config.child_name}[/]  "
        f"[muted]|[/]  [stat.label]Style:[/] [stat.value]{config.art_style.value}[/]  "
        f"[muted]|[/]  [stat.label]Level:[/] [stat.value]{config.age_group.value}[/]\n"
        f"  [stat.label]Pages:[/] [stat.value]{len(project.completed_pages)}/{len(project.pages)}[/] rendered  "
        f"[muted]|[/]  [stat.label]Format:[/] {config.aspect_ratio.value} @ {config.image_size.value}"
    )
    return Panel(
        body,
        title=f"[bold]{config.theme}[/] [muted](ID: {project.id})[/]",
        subtitle=f"[muted]{format_timestamp(project.timestamp)}[/]",
        box=box.ROUNDED,
        border_style="dim",
        padding=(0, 2),
    )


def _status_cell(status: PageStatus) -> str:
    return f"[page.{status.value}]{status.value}[/]"


def page_table(pages: Iterable[GeneratedPage], max_scene: Optional[int] = 70) -> Table:
    """Build a Rich Table of pages with status and (shortened) scene."""
    table = Table(box=box.ROUNDED, border_style="dim", show_header=True, padding=(0, 1))
    table.add_column("#", style="page.num", justify="right")
    table.add_column("Status")
    table.add_column("Scene")

    for i, page in enumerate(pages):
        scene = page.scene_description
        if max_scene and len(scene) > max_scene:
            scene = scene[:max_scene] + "..."
        table.add_row(str(i + 1), _status_cell(page.status), scene)
    return table


def history_table(projects: list[SavedProject]) -> Table:
    table = Table(box=box.ROUNDED, border_style="dim", show_header=True, padding=(0, 1))
    table.add_column("ID", style="muted")
    table.add_column("Created")
    table.add_column("Theme", style="accent")
    table.add_column("For")
    table.add_column("Pages", justify="right")

    for project in projects:
        table.add_row(
            project.id,
            format_timestamp(project.timestamp),
            project.config.theme,
            project.config.child_name,
            f"{len(project.completed_pages)}/{len(project.pages)}",
        )
    return table
