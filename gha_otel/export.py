"""End-to-end export of one workflow run."""

import asyncio
import logging

from opentelemetry import trace

from gha_otel.artifact_loader import load_span_parameters
from gha_otel.client import ExporterClient
from gha_otel.config import ExportConfig
from gha_otel.github_client import GitHubClient
from gha_otel.log_parser import collect_log_parameters, parse_job_logs
from gha_otel.models import SpanParameters, WorkflowJob
from gha_otel.parameters import merge_span_parameters
from gha_otel.tracing import export_workflow_trace

logger = logging.getLogger(__name__)


async def fetch_log_parameters(
    client: GitHubClient,
    owner: str,
    repo_name: str,
    job: WorkflowJob,
) -> SpanParameters | None:
    """Download a job's log and collect the span parameters printed in it.

    Returns None when the log cannot be downloaded or parsed.
    """
    try:
        job_log, error = await client.get_job_logs(owner, repo_name, job.id)
        if error:
            logger.warning(f"Failed to download logs for job {job.name} ({job.id}): {error}")
            return None

        step_logs = parse_job_logs(job_log, job.steps)
        params = collect_log_parameters(step_logs, job.steps)
        logger.debug(f"Log parameters for job {job.name}: {params.model_dump_json()}")
        return params
    except Exception as e:
        logger.warning(f"Failed to read log parameters for job {job.name} ({job.id}): {e}")
        return None


async def export_run(
    config: ExportConfig,
    exporter: ExporterClient,
    client: GitHubClient | None = None,
) -> trace.SpanContext | None:
    """Export a workflow run as a trace enriched with span parameters.

    Args:
        config: Export settings.
        exporter: Client owning the tracer provider.
        client: GitHub client; created from ``config`` when omitted.

    Returns:
        The root span context, or None when the run or its jobs cannot be read.
    """
    owns_client = client is None
    if client is None:
        client = GitHubClient(config.github_token, api_url=config.api_url, timeout=config.timeout)

    try:
        run, error = await client.get_workflow_run(config.owner, config.repo_name, config.run_id)
        if error:
            logger.error(f"Failed to get workflow run {config.run_id}: {error}")
            return None

        jobs, error = await client.list_jobs(config.owner, config.repo_name, config.run_id)
        if error:
            logger.error(f"Failed to list jobs of workflow run {config.run_id}: {error}")
            return None

        artifact_params = await load_span_parameters(
            config.artifact_name,
            client=client,
            owner=config.owner,
            repo_name=config.repo_name,
            run_id=config.run_id,
        )

        log_params: list[SpanParameters | None] = [None] * len(jobs)
        if config.parse_logs:
            log_params = list(
                await asyncio.gather(
                    *(
                        fetch_log_parameters(client, config.owner, config.repo_name, job)
                        for job in jobs
                    )
                )
            )

        parameters_by_job = {
            job.id: merge_span_parameters(artifact_params, job_log_params)
            for job, job_log_params in zip(jobs, log_params)
        }

        span_context = export_workflow_trace(
            exporter.tracer,
            run,
            jobs,
            parameters_by_job,
            repository=config.repository,
        )
        if not exporter.flush():
            logger.warning(f"Timed out flushing spans of workflow run {run.id}")
        logger.info(
            f"Exported workflow run {run.id} as trace {format(span_context.trace_id, '032x')}"
        )
        return span_context

    finally:
        if owns_client:
            await client.close()
