"""Command-line entry point: ``gha-otel-export``."""

import asyncio
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Annotated, Optional

import typer
from dotenv import load_dotenv

from gha_otel.client import ExporterClient
from gha_otel.config import ConfigurationError, ExportConfig
from gha_otel.constants import SDK_VERSION, STEP_GROUP_MARKER
from gha_otel.export import export_run
from gha_otel.log_parser import parse_job_logs
from gha_otel.models import WorkflowStep

logger = logging.getLogger(__name__)

app = typer.Typer(
    help=f"Export GitHub Actions workflow runs as OpenTelemetry traces ({SDK_VERSION}).",
    no_args_is_help=True,
    add_completion=False,
)


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def export(
    run_id: Annotated[Optional[int], typer.Option(help="Workflow run to export")] = None,
    repository: Annotated[Optional[str], typer.Option(help="Repository as owner/name")] = None,
    artifact_name: Annotated[
        Optional[str], typer.Option(help="Artifact holding params.json")
    ] = None,
    parse_logs: Annotated[
        Optional[bool],
        typer.Option("--parse-logs/--no-parse-logs", help="Scan job logs for parameter tags"),
    ] = None,
    otlp_endpoint: Annotated[
        Optional[str], typer.Option(help="OTLP/HTTP traces endpoint (stdout when unset)")
    ] = None,
    debug: Annotated[bool, typer.Option("--debug", help="Verbose logging")] = False,
) -> None:
    """Export a workflow run, its jobs and steps as one trace."""
    load_dotenv()

    try:
        config = ExportConfig.from_env(
            repository=repository,
            run_id=run_id,
            otlp_endpoint=otlp_endpoint,
            artifact_name=artifact_name,
            parse_logs=parse_logs,
            debug=debug or None,
        )
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=1) from e

    configure_logging(config.debug)

    exporter = ExporterClient(
        otlp_endpoint=config.otlp_endpoint,
        otlp_headers=config.otlp_headers,
        service_name=config.service_name,
    )
    try:
        span_context = asyncio.run(export_run(config, exporter))
    finally:
        exporter.shutdown()

    if span_context is None:
        raise typer.Exit(code=1)
    typer.echo(format(span_context.trace_id, "032x"))


@app.command("parse-logs")
def parse_logs_command(
    log_file: Annotated[Path, typer.Argument(exists=True, dir_okay=False, help="Job log file")],
) -> None:
    """Print the span parameters found in a downloaded job log, per step section."""
    job_log = log_file.read_text(encoding="utf-8", errors="replace")
    # One placeholder step per section so the parser has a non-empty step list
    steps = [
        WorkflowStep(name=f"step {number}", number=number)
        for number, _ in enumerate(
            (line for line in job_log.split("\n") if STEP_GROUP_MARKER in line), start=1
        )
    ]
    step_logs = parse_job_logs(job_log, steps)
    typer.echo(
        json.dumps({str(index): asdict(parsed) for index, parsed in step_logs.items()}, indent=2)
    )
