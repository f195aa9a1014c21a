"""CLI entry point — DreamLines coloring book generator.

Usage:
  dreamlines                     open the brainstorming chat (default)
  dreamlines generate -n Mia     generate a book
  dreamlines history             list saved books
  dreamlines export <id>         write zip / pdf / share cover
  dreamlines --help              list all commands
"""

import asyncio
import logging
import sys
from pathlib import Path

import click

from cli.theme import (
    get_console,
    app_header,
    command_panel,
    success_panel,
    error_panel,
    project_summary_panel,
    page_table,
    history_table,
)
from config.exceptions import CredentialError, DreamLinesError
from config.logging_config import setup_logging
from config.settings import Settings
from models.book import DEFAULT_PAGE_COUNT, BookConfig
from models.enums import AgeGroup, ArtStyle, AspectRatio, ImageSize, ThemePreference
from workflow.callbacks import RichProgressCallback
from workflow.session import AppSession

logger = logging.getLogger(__name__)

console = get_console()


def _init_logging(verbose: bool, settings: Settings):
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    setup_logging(level=level, log_dir=settings.log_dir, console_enabled=verbose)


def _session(ctx) -> AppSession:
    return ctx.obj["session"]


def _fail(title: str, message: str, code: int = 1):
    console.print(error_panel(title, message))
    sys.exit(code)


def _choices(enum_cls) -> click.Choice:
    return click.Choice([member.value for member in enum_cls], case_sensitive=False)


@click.group(invoke_without_command=True)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, verbose):
    """DreamLines — personalized coloring books drawn by Gemini.

    \b
    Run dreamlines with no command to brainstorm with the assistant:
      dreamlines

    \b
    Or drive the generator directly:
      dreamlines generate -n Mia -t "Space Dinosaurs" -p 5
      dreamlines history
      dreamlines export 1718000000000 --format pdf
    """
    global console
    settings = Settings()
    _init_logging(verbose, settings)
    session = AppSession(settings)
    console = get_console(session.preferences.get_theme())
    ctx.obj = {"session": session}

    if ctx.invoked_subcommand is None:
        ctx.invoke(chat, plain=False)


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------

@cli.command()
@click.option("--name", "-n", "child_name", required=True, help="Child's name for the book")
@click.option("--theme", "-t", default="", help="Book theme (blank: let the model invent one)")
@click.option("--pages", "-p", default=DEFAULT_PAGE_COUNT, type=int, show_default=True, help="Number of pages")
@click.option("--aspect", default=AspectRatio.PORTRAIT.value, type=_choices(AspectRatio), show_default=True)
@click.option("--size", default=ImageSize.LOW.value, type=_choices(ImageSize), show_default=True,
              help="Resolution tier: 1K low, 2K medium, 4K high")
@click.option("--style", default=ArtStyle.WHIMSICAL.value, type=_choices(ArtStyle), show_default=True)
@click.option("--level", default=AgeGroup.KIDS.value, type=_choices(AgeGroup), show_default=True,
              help="Line art complexity")
@click.option("--enhance", is_flag=True, help="Polish the theme (or invent one if blank) before generating")
@click.pass_context
def generate(ctx, child_name, theme, pages, aspect, size, style, level, enhance):
    """Generate a coloring book and save it to history.

    Examples:
      dreamlines generate -n Mia -t "Space Dinosaurs" -p 5
      dreamlines generate -n Leo --style Lego --level toddler
    """
    session = _session(ctx)
    config = BookConfig(
        child_name=child_name,
        theme=theme,
        page_count=pages,
        aspect_ratio=AspectRatio(aspect),
        image_size=ImageSize(size),
        art_style=ArtStyle(style),
        age_group=AgeGroup(level),
    )

    try:
        result = asyncio.run(_generate(session, config, enhance))
    except KeyboardInterrupt:
        console.print("\n[warning]Interrupted[/]")
        sys.exit(130)
    except CredentialError as e:
        _fail("Missing API key", f"{e.message}\nSet GEMINI_API_KEY in the environment or .env.")
    except DreamLinesError as e:
        logger.exception("Generation failed")
        _fail("Generation failed", str(e))

    console.print()
    if result.rejected:
        _fail("Invalid settings", f"{result.error_field}: {result.error_message}")
    if result.aborted:
        _fail("Generation stopped", result.error_message)

    project = result.project
    console.print(project_summary_panel(project))
    console.print(page_table(project.pages))
    console.print()

    failed = len(project.failed_pages)
    body = f"  Rendered: [stat.value]{len(project.completed_pages)}[/] of {len(project.pages)} pages"
    if failed:
        body += f"\n  [warning]{failed} page(s) failed[/]"
    if session.projects.degraded:
        body += "\n  [warning]Local storage full. Project not saved to history.[/]"
    console.print(success_panel("Book ready", body))
    console.print(f"\nNext: [info]dreamlines export {project.id} --format pdf[/]")
    _print_usage_summary(session)


async def _generate(session: AppSession, config: BookConfig, enhance: bool):
    """Optional theme polish plus the run, on one event loop.

    The Gemini aio client binds its connection pool to the loop of its first
    call, so both steps must share a single ``asyncio.run``.
    """
    if enhance and config.child_name.strip():
        theme = await session.oracle().prompt_button(config.theme)
        config = config.with_theme(theme)

    console.print(app_header())
    console.print()
    console.print(command_panel("New coloring book", {
        "For": config.child_name,
        "Theme": config.theme or "(surprise me)",
        "Pages": str(config.page_count),
        "Style": config.art_style.value,
        "Level": config.age_group.value,
        "Format": f"{config.aspect_ratio.value} @ {config.image_size.value}",
    }))
    console.print()

    cb = RichProgressCallback(console=console, page_count=config.page_count)
    cb.start()
    try:
        return await session.generate(config, callback=cb)
    finally:
        cb.stop()


def _print_usage_summary(session: AppSession):
    try:
        usage = session.client.get_usage_summary()
    except DreamLinesError:
        return
    console.print(f"[muted]Gemini calls: {usage.get('total_calls', 0)}[/]")


# ---------------------------------------------------------------------------
# history / show
# ---------------------------------------------------------------------------

@cli.command()
@click.pass_context
def history(ctx):
    """List saved books, most recent first."""
    projects = _session(ctx).projects.list()
    if not projects:
        console.print("[muted]No saved books yet. Try: dreamlines generate -n <name>[/]")
        return
    console.print(history_table(projects))


@cli.command()
@click.argument("project_id")
@click.option("--full", is_flag=True, help="Show full scene descriptions")
@click.pass_context
def show(ctx, project_id, full):
    """Show one saved book and its pages."""
    project = _session(ctx).projects.get(project_id)
    if project is None:
        _fail("Not found", f"No saved book with ID {project_id}")
    console.print(project_summary_panel(project))
    console.print(page_table(project.pages, max_scene=None if full else 70))


# ---------------------------------------------------------------------------
# export
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("project_id")
@click.option("--format", "-f", "fmt", default="zip", type=click.Choice(["zip", "pdf", "share"]), show_default=True)
@click.option("--output", "-o", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Output directory (default: settings.output_dir)")
@click.pass_context
def export(ctx, project_id, fmt, output):
    """Export a saved book as a zip archive, a print PDF, or a share payload."""
    from export.archive import write_zip
    from export.print_book import write_pdf
    from export.share import build_share_payload

    session = _session(ctx)
    project = session.projects.get(project_id)
    if project is None:
        _fail("Not found", f"No saved book with ID {project_id}")
    output_dir = output or session.settings.output_dir

    try:
        if fmt == "zip":
            path = write_zip(project, output_dir)
            console.print(success_panel("Exported", f"  Archive: [stat.value]{path}[/]"))
        elif fmt == "pdf":
            path = write_pdf(project, output_dir)
            console.print(success_panel("Exported", f"  Print book: [stat.value]{path}[/]"))
        else:
            payload = build_share_payload(project)
            lines = [f"  [stat.label]Title:[/] {payload.title}", f"  [stat.label]Text:[/] {payload.text}"]
            if payload.cover is not None:
                Path(output_dir).mkdir(parents=True, exist_ok=True)
                cover_path = Path(output_dir) / payload.cover_filename
                cover_path.write_bytes(payload.cover.data)
                lines.append(f"  [stat.label]Cover:[/] {cover_path}")
            console.print(success_panel("Share", "\n".join(lines)))
    except DreamLinesError as e:
        logger.exception("Export failed")
        _fail("Export failed", str(e))


# ---------------------------------------------------------------------------
# theme helpers
# ---------------------------------------------------------------------------

@cli.group()
def theme():
    """Theme ideas: random, enhance, suggest."""


def _oracle(ctx):
    try:
        return _session(ctx).oracle()
    except CredentialError as e:
        _fail("Missing API key", e.message)


@theme.command("random")
@click.pass_context
def theme_random(ctx):
    """Invent a short random theme."""
    console.print(f"[accent]{asyncio.run(_oracle(ctx).random_theme())}[/]")


@theme.command("enhance")
@click.argument("text")
@click.pass_context
def theme_enhance(ctx, text):
    """Make TEXT more exciting for kids."""
    console.print(f"[accent]{asyncio.run(_oracle(ctx).enhance_theme(text))}[/]")


@theme.command("suggest")
@click.option("--count", "-c", default=5, show_default=True, type=int)
@click.pass_context
def theme_suggest(ctx, count):
    """List theme suggestions."""
    for item in asyncio.run(_oracle(ctx).suggestions(count)):
        console.print(f"  [muted]•[/] {item}")


# ---------------------------------------------------------------------------
# chat / prefs
# ---------------------------------------------------------------------------

@cli.command()
@click.option("--plain", is_flag=True, help="Use a plain terminal prompt instead of the TUI")
@click.pass_context
def chat(ctx, plain):
    """Brainstorm ideas with the creative assistant."""
    from cli.chat import ChatSession

    session = _session(ctx)
    try:
        assistant = session.assistant()
    except CredentialError as e:
        _fail("Missing API key", f"{e.message}\nSet GEMINI_API_KEY in the environment or .env.")

    if plain:
        asyncio.run(ChatSession(assistant, console=console).run())
        return

    from cli.tui import DreamLinesTUI
    app = DreamLinesTUI(ChatSession(assistant, console=console), model=session.settings.fast_text_model)
    app.run()


@cli.command()
@click.option("--theme", "ui_theme", type=_choices(ThemePreference), default=None, help="dark or light")
@click.pass_context
def prefs(ctx, ui_theme):
    """Show or change stored preferences."""
    session = _session(ctx)
    store = session.preferences
    if ui_theme:
        store.set_theme(ThemePreference(ui_theme))
    try:
        used = f"{session.kv.used_bytes() / 1024:.1f} KB"
    except DreamLinesError as e:
        logger.warning("Storage usage unavailable: %s", e)
        used = "unknown"
    console.print(command_panel("Preferences", {
        "Theme": store.get_theme().value,
        "Storage": f"{used} of {session.kv.quota_bytes // 1024} KB",
        "History": f"{len(session.projects)}/{session.projects.limit} books",
    }))


if __name__ == "__main__":
    cli()
