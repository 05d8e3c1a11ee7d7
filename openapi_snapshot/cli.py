# openapi_snapshot/cli.py
from __future__ import annotations

from pathlib import Path
from typing import List, NoReturn, Optional

import typer

from openapi_snapshot.config import (
    DEFAULT_INTERVAL_MS,
    DEFAULT_TIMEOUT_MS,
    VERSION,
    Config,
    SNAPSHOT,
    Mode,
    OutputProfile,
    validate_config,
)
from openapi_snapshot.errors import SnapshotError
from openapi_snapshot.log import err, warn
from openapi_snapshot.observability import setup_logging
from openapi_snapshot.output import build_outputs, write_outputs
from openapi_snapshot.watch import run_watch

EXAMPLES = """Examples:

  openapi-snapshot

  openapi-snapshot watch

  openapi-snapshot --out openapi/backend_openapi.json --outline-out openapi/backend_openapi.outline.json

  openapi-snapshot --profile outline --out openapi/backend_openapi.outline.json

  openapi-snapshot --url http://localhost:3000/api-docs/openapi.json --out openapi/backend_openapi.json

  openapi-snapshot --minify --out openapi/backend_openapi.min.json
"""

app = typer.Typer(
    help="Fetch and save an OpenAPI JSON snapshot.",
    add_completion=False,
)


def _fail(e: SnapshotError) -> NoReturn:
    err(str(e))
    raise typer.Exit(code=e.exit_code)


def _version(value: bool) -> None:
    if value:
        typer.echo(f"openapi-snapshot {VERSION}")
        raise typer.Exit()


def _config_for(ctx: typer.Context, mode: Mode, no_outline: bool = False) -> Config:
    opts = ctx.obj or {}
    config = Config.from_options(mode=mode, no_outline=no_outline, **opts)
    if config.stdout and opts.get("out") is not None:
        warn("--out is ignored because --stdout is set.")
    validate_config(config)
    return config


# -----------------------
# Snapshot (default command)
# -----------------------
@app.callback(invoke_without_command=True, epilog=EXAMPLES)
def main(
    ctx: typer.Context,
    url: Optional[str] = typer.Option(None, "--url", envvar="OPENAPI_SNAPSHOT_URL", help="OpenAPI JSON endpoint"),
    out: Optional[Path] = typer.Option(None, "--out", help="Destination file"),
    outline_out: Optional[Path] = typer.Option(None, "--outline-out", help="Also write the outline here"),
    reduce: Optional[str] = typer.Option(None, "--reduce", help="Keep only these top-level keys, e.g. paths,components"),
    profile: OutputProfile = typer.Option(OutputProfile.FULL, "--profile", help="full or outline"),
    minify: bool = typer.Option(False, "--minify/--no-minify", help="Compact single-line JSON"),
    timeout_ms: int = typer.Option(DEFAULT_TIMEOUT_MS, "--timeout-ms", help="Per-request timeout"),
    header: Optional[List[str]] = typer.Option(None, "--header", help='Extra request header, "Name: value" (repeatable)'),
    stdout: bool = typer.Option(False, "--stdout", help="Print to stdout instead of writing a file"),
    version: bool = typer.Option(False, "--version", callback=_version, is_eager=True, help="Show version and exit"),
) -> None:
    """
    Fetch the OpenAPI document once and write it (or its outline) to --out.
    """
    setup_logging()
    ctx.obj = {
        "url": url,
        "out": out,
        "outline_out": outline_out,
        "reduce": reduce,
        "profile": profile,
        "minify": minify,
        "timeout_ms": timeout_ms,
        "headers": header or [],
        "stdout": stdout,
    }
    if ctx.invoked_subcommand is not None:
        return

    try:
        config = _config_for(ctx, SNAPSHOT)
        write_outputs(config, build_outputs(config))
    except SnapshotError as e:
        _fail(e)


# -----------------------
# Watch
# -----------------------
@app.command()
def watch(
    ctx: typer.Context,
    interval_ms: int = typer.Option(DEFAULT_INTERVAL_MS, "--interval-ms", help="Poll interval (min 250)"),
    no_outline: bool = typer.Option(False, "--no-outline", help="Skip the default outline file"),
) -> None:
    """
    Re-fetch on an interval and keep the snapshot current. Ctrl+C to stop.
    """
    mode = Mode(watch=True, interval_ms=interval_ms)
    try:
        config = _config_for(ctx, mode, no_outline=no_outline)
    except SnapshotError as e:
        _fail(e)
    run_watch(config, mode.interval_ms)


# -----------------------
# Entrypoint
# -----------------------
if __name__ == "__main__":
    app()
