from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

from .commands import add_source, remove_source, update_sources
from .core.models import SourceType
from .errors import NixSourceError
from .workflows.doctor import build_doctor_report, format_doctor_report
from .workflows.oracles import missing_oracles
from .workflows.source_config import ENV_LOG_LEVEL
from .workflows.source_utils import resolve_sources_path, validate_url

load_dotenv(override=True)

app = typer.Typer(no_args_is_help=True, help="Manipulate the sources.json file.")


def _sources_path(ctx: typer.Context) -> Path:
    return (ctx.obj or {}).get("sources") or resolve_sources_path()


def _require_oracles() -> None:
    missing = missing_oracles()
    if missing:
        typer.echo(f"error: {', '.join(missing)} not found", err=True)
        raise typer.Exit(code=1)


def _fail(exc: Exception) -> typer.Exit:
    typer.echo(f"error: {exc}", err=True)
    return typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    sources: Optional[Path] = typer.Option(None, "--sources", "-s", help="The sources.json file."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (default: INFO)."),
) -> None:
    level = (log_level or os.getenv(ENV_LOG_LEVEL) or "INFO").upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format="%(message)s")
    ctx.obj = {"sources": resolve_sources_path(sources)}


@app.command("add")
def add_cmd(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the source."),
    url: str = typer.Argument(..., help="URL of the source."),
    source_type: Optional[SourceType] = typer.Option(
        None, "--type", "-t", help="Type of the source, either tarball or file."
    ),
) -> None:
    """Add a source to the sources file."""
    try:
        url = validate_url(url)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="URL")
    _require_oracles()
    try:
        add_source(_sources_path(ctx), name, url, source_type=source_type)
    except NixSourceError as exc:
        raise _fail(exc)


@app.command("update")
def update_cmd(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Name of the source (default: all)."),
) -> None:
    """Update sources in the sources file."""
    _require_oracles()
    try:
        update_sources(_sources_path(ctx), name)
    except NixSourceError as exc:
        raise _fail(exc)


@app.command("rm")
def rm_cmd(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the source."),
) -> None:
    """Delete a source from the sources file."""
    try:
        remove_source(_sources_path(ctx), name)
    except NixSourceError as exc:
        raise _fail(exc)


@app.command("doctor")
def doctor_cmd(ctx: typer.Context) -> None:
    """Print environment and dependency diagnostics."""
    report = build_doctor_report(sources_path=_sources_path(ctx))
    typer.echo(format_doctor_report(report))
    raise typer.Exit(code=0 if report.get("ok", True) else 2)


if __name__ == "__main__":
    app()
