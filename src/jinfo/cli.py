"""
Command-line front-end for the day-file memo store.

Usage:
    jinfo "memo text #tag"
    jinfo list --recent 3
    jinfo search meeting --tag work --from 2024-01-01
    jinfo project add work ~/notes/work
    jinfo export ~/backups
    jinfo import ~/backups/jinfo-export-2024-01-15.json
"""

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from typing_extensions import Annotated

from jinfo.config import Config, add_project, load_config, set_default_project
from jinfo.errors import JinfoError, ValidationError
from jinfo.memo.formatter import extract_tags
from jinfo.memo.kv import JSONFileStorage
from jinfo.memo.models import FileSearchOptions
from jinfo.memo.service import MemoService
from jinfo.memo.store import DailyMemoStore
from jinfo.memo.transfer import read_import, write_export

logger = logging.getLogger(__name__)

COMMANDS = {
    "add", "list", "search", "project", "interactive", "i", "types", "export", "import",
}

# Colors click understands; anything else in the config prints uncolored
_CLICK_COLORS = {
    "black", "red", "green", "yellow", "blue", "magenta", "cyan", "white",
    "bright_black", "bright_red", "bright_green", "bright_yellow",
    "bright_blue", "bright_magenta", "bright_cyan", "bright_white",
}
_SYMBOLS = {"success": "✓", "error": "✗", "info": "ℹ", "warning": "⚠"}

app = typer.Typer(
    name="jinfo",
    help="Simple CLI memo tool.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
project_app = typer.Typer(help="Manage projects.")
app.add_typer(project_app, name="project")


ProjectOption = Annotated[
    Optional[str],
    typer.Option("--project", "-p", help="Project name (defaults to the default project)"),
]


def _say(config: Config, kind: str, message: str) -> None:
    color = getattr(config.preferences.color_scheme, kind, None)
    typer.secho(
        f"{_SYMBOLS[kind]} {message}",
        fg=color if color in _CLICK_COLORS else None,
        err=kind == "error",
    )


@contextmanager
def _handle_errors(config: Config) -> Iterator[None]:
    try:
        yield
    except (JinfoError, OSError, json.JSONDecodeError) as e:
        logger.debug("Command failed", exc_info=True)
        _say(config, "error", f"Error: {e}")
        raise typer.Exit(1)


def _config(ctx: typer.Context) -> Config:
    return ctx.obj


def _store(config: Config, project: str | None) -> DailyMemoStore:
    return DailyMemoStore(config.get_project(project).base_path, config.memo_types)


def _with_default_tags(content: str, default_tags: list[str]) -> str:
    """Append configured default tags the content does not already carry."""
    present = set(extract_tags(content))
    missing = []
    for tag in default_tags:
        token = tag if tag.startswith("#") else f"#{tag}"
        if token not in present:
            missing.append(token)
            present.add(token)
    return " ".join([content, *missing]) if missing else content


def _write_memo(
    config: Config, project: str | None, content: str, type_key: str | None
) -> None:
    if not content.strip():
        raise ValidationError("Memo content is required")
    memo_type = None
    if type_key:
        memo_type = config.get_memo_type(type_key)
        if memo_type is None:
            raise ValidationError(f"Unknown memo type '{type_key}'")
    store = _store(config, project)
    text = _with_default_tags(content.strip(), config.preferences.default_tags)
    store.add_memo(text, memo_type=memo_type)


@app.callback()
def main_callback(ctx: typer.Context) -> None:
    """Load the config once per invocation (created on first run)."""
    try:
        ctx.obj = load_config()
    except (OSError, json.JSONDecodeError) as e:
        logger.debug("Config load failed", exc_info=True)
        typer.secho(f"✗ Error: cannot load config: {e}", fg="red", err=True)
        raise typer.Exit(1)


@app.command()
def add(
    ctx: typer.Context,
    content: Annotated[Optional[str], typer.Argument(help="Memo text; prompted for when omitted")] = None,
    project: ProjectOption = None,
    memo_type: Annotated[Optional[str], typer.Option(
        "--type", "-t", help="Memo type key (note, task, idea, ...)",
    )] = None,
):
    """Add a memo to today's file (the default command)."""
    config = _config(ctx)
    with _handle_errors(config):
        if not content:
            content = typer.prompt("Please add memo")
        _write_memo(config, project, content, memo_type)
        _say(config, "success", "Memo added.")


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    date: Annotated[Optional[str], typer.Option(
        "--date", "-d", help="Show a single day (YYYY-MM-DD)",
    )] = None,
    recent: Annotated[int, typer.Option(
        "--recent", "-r", min=1, help="Show the last N days",
    )] = 7,
    project: ProjectOption = None,
):
    """List memos for one day or the recent days."""
    config = _config(ctx)
    with _handle_errors(config):
        store = _store(config, project)
        memos = store.read_memos(date) if date else store.read_recent_memos(recent)
        if not memos:
            _say(config, "info", "No memos found.")
            return
        for entry in memos:
            typer.echo(entry.render())


@app.command()
def search(
    ctx: typer.Context,
    query: Annotated[str, typer.Argument(help="Text to look for (case-insensitive)")],
    tag: Annotated[Optional[str], typer.Option("--tag", "-t", help="Only memos with this tag")] = None,
    from_date: Annotated[Optional[str], typer.Option("--from", "-f", help="Start date (YYYY-MM-DD)")] = None,
    to_date: Annotated[Optional[str], typer.Option("--to", help="End date (YYYY-MM-DD)")] = None,
    project: ProjectOption = None,
):
    """Search memos across all days."""
    config = _config(ctx)
    with _handle_errors(config):
        store = _store(config, project)
        options = FileSearchOptions(
            tag=tag.lstrip("#") if tag else None,
            from_date=from_date,
            to_date=to_date,
        )
        memos = store.search_memos(query, options)
        if not memos:
            _say(config, "info", "No matching memos.")
            return
        for entry in memos:
            typer.echo(entry.render())


def interactive(ctx: typer.Context):
    """Pick a project and memo type, then enter the memo."""
    config = _config(ctx)
    with _handle_errors(config):
        for name, p in config.projects.items():
            typer.echo(f"  {name} - {p.description}")
        project = typer.prompt("Project", default=config.default_project)
        config.get_project(project)

        for t in config.memo_types:
            typer.echo(f"  {t.emoji} {t.key}: {t.label} - {t.description}")
        type_key = typer.prompt("Type (blank for none)", default="", show_default=False)

        content = typer.prompt("Memo")
        _write_memo(config, project, content, type_key or None)
        _say(config, "success", f"Memo added (project: {project})")


app.command("interactive")(interactive)
app.command("i", hidden=True)(interactive)


@app.command()
def types(ctx: typer.Context):
    """List the configured memo types."""
    for t in _config(ctx).memo_types:
        typer.echo(f"{t.emoji} {t.key:<12} {t.label:<12} {t.description}")


@app.command("export")
def export_cmd(
    ctx: typer.Context,
    directory: Annotated[Path, typer.Argument(help="Where to write the export file")] = Path("."),
):
    """Export the memo collection to a dated JSON file."""
    config = _config(ctx)
    with _handle_errors(config):
        path = write_export(MemoService(JSONFileStorage()), directory)
        _say(config, "success", f"Exported memos to {path}")


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    file: Annotated[Path, typer.Argument(help="Export file to read")],
):
    """Import memos from an export file, skipping ids already present."""
    config = _config(ctx)
    with _handle_errors(config):
        added = read_import(MemoService(JSONFileStorage()), file)
        _say(config, "success", f"Imported {added} memo(s).")


@project_app.command("list")
def project_list(ctx: typer.Context):
    """List projects."""
    config = _config(ctx)
    typer.echo("Projects:")
    for name, p in config.projects.items():
        marker = " (default)" if name == config.default_project else ""
        typer.echo(f"  {name}{marker}: {p.description}")
        typer.echo(f"    path: {p.path}")


@project_app.command("add")
def project_add(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Project name")],
    path: Annotated[str, typer.Argument(help="Directory for the project's day-files")],
    description: Annotated[Optional[str], typer.Option("--description", "-d")] = None,
):
    """Add a project."""
    config = _config(ctx)
    with _handle_errors(config):
        add_project(config, name, path, description)
        _say(config, "success", f"Added project '{name}'")


@project_app.command("default")
def project_default(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Project name")],
):
    """Set the default project."""
    config = _config(ctx)
    with _handle_errors(config):
        set_default_project(config, name)
        _say(config, "success", f"Default project set to '{name}'")


def normalize_args(args: list[str]) -> list[str]:
    """Route bare memo text (or no arguments) to the ``add`` command."""
    if args and (args[0] in COMMANDS or args[0] in ("--help", "-h")):
        return args
    return ["add", *args]
