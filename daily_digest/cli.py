"""
Command-line interface for the Daily Digest.

Uses Typer to provide a CLI with options for the main configuration
settings. Diagnostics go to stderr; the article JSON goes to stdout or to
the file given with --output.
"""

from __future__ import annotations

import logging
from pathlib import Path
import sys

import typer

from .config import load_config
from .core.errors import DigestError
from .input.sources import load_sources
from .logging_utils import log_event, setup_logging
from .output.writer import write_json
from .runner import run_digest

app = typer.Typer(add_completion=False)


@app.command()
def run(
    sources: Path | None = typer.Option(
        None, "--sources", "-s", help="JSON or YAML list of {name, xmlUrl, htmlUrl} records."
    ),
    hours: float | None = typer.Option(None, "--hours", help="Lookback window in hours."),
    concurrency: int | None = typer.Option(
        None, "--concurrency", min=1, help="Maximum number of feeds fetched at once."
    ),
    timeout_ms: int | None = typer.Option(
        None, "--timeout-ms", min=1, help="Per-request timeout in milliseconds."
    ),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, dir_okay=False),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write JSON here instead of stdout."
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    progress: bool = typer.Option(False, "--progress/--no-progress"),
):
    """Fetch feeds concurrently and print recent articles as JSON.

    Args:
        sources: Path to the source list (overrides config)
        hours: Lookback window in hours (default 24)
        concurrency: Concurrency bound (default 15)
        timeout_ms: Per-request timeout (default 15000)
        config: Optional path to YAML config file
        output: Optional output file; stdout if omitted
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        progress: Whether to show a progress bar on stderr
    """
    try:
        cfg = load_config(str(config) if config else None)
    except DigestError as exc:
        typer.echo(f"Fatal: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    # Override with CLI options
    if sources is not None:
        cfg.sources.path = str(sources)
    if hours is not None:
        cfg.window.hours = hours
    if concurrency is not None:
        cfg.fetch.concurrency = concurrency
    if timeout_ms is not None:
        cfg.fetch.timeout_ms = timeout_ms
    if log_level:
        cfg.logging.level = log_level

    logger = setup_logging(cfg.logging)

    try:
        source_list = load_sources(cfg.sources.path)
    except DigestError as exc:
        log_event(logger, f"Fatal: {exc}", level=logging.ERROR, event="fatal", error=str(exc))
        raise typer.Exit(code=1) from exc

    result = run_digest(source_list, cfg, show_progress=progress)

    write_json(result.articles, output if output is not None else sys.stdout, cfg.output.indent)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
