"""Construction of the workflow -> job -> step span tree.

Spans are created after the fact from the timestamps GitHub reports, so every
span is started and ended explicitly instead of with ``start_as_current_span``.
"""

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from gha_otel.models import SpanParameters, WorkflowJob, WorkflowRun, WorkflowStep
from gha_otel.span_attributes import SpanAttributes
from gha_otel.utils import set_span_attribute, set_span_parameters, to_unix_nanos

logger = logging.getLogger(__name__)

FAILED_CONCLUSIONS = ("failure", "timed_out", "startup_failure")


def _set_status(span: trace.Span, conclusion: str | None) -> None:
    if conclusion in FAILED_CONCLUSIONS:
        span.set_status(Status(StatusCode.ERROR, conclusion))
    elif conclusion == "success":
        span.set_status(Status(StatusCode.OK))


def _latest(*timestamps: datetime | None) -> datetime | None:
    present = [t for t in timestamps if t is not None]
    return max(present) if present else None


def workflow_parameters(
    parameters_by_job: Mapping[int, SpanParameters],
    jobs: Sequence[WorkflowJob],
) -> dict[str, str]:
    """Combine the workflow parameters of all jobs; later jobs win a collision."""
    combined: dict[str, str] = {}
    for job in jobs:
        params = parameters_by_job.get(job.id)
        if params is not None:
            combined.update(params.workflow)
    return combined


def _export_step(
    tracer: trace.Tracer,
    step: WorkflowStep,
    parent: trace.Span,
    parameters: Mapping[str, str],
) -> None:
    span = tracer.start_span(
        step.name,
        context=trace.set_span_in_context(parent),
        start_time=to_unix_nanos(step.started_at),
    )
    set_span_attribute(span, SpanAttributes.STEP_NAME, step.name)
    set_span_attribute(span, SpanAttributes.STEP_NUMBER, step.number)
    set_span_attribute(span, SpanAttributes.STEP_CONCLUSION, step.conclusion)
    set_span_parameters(span, parameters)
    _set_status(span, step.conclusion)
    span.end(end_time=to_unix_nanos(step.completed_at or step.started_at))


def _export_job(
    tracer: trace.Tracer,
    job: WorkflowJob,
    parent: trace.Span,
    parameters: SpanParameters,
) -> None:
    span = tracer.start_span(
        job.name,
        context=trace.set_span_in_context(parent),
        start_time=to_unix_nanos(job.started_at),
    )
    set_span_attribute(span, SpanAttributes.JOB_ID, job.id)
    set_span_attribute(span, SpanAttributes.JOB_NAME, job.name)
    set_span_attribute(span, SpanAttributes.JOB_CONCLUSION, job.conclusion)
    set_span_attribute(span, SpanAttributes.JOB_RUNNER_NAME, job.runner_name)
    set_span_attribute(span, SpanAttributes.JOB_URL, job.html_url)
    set_span_parameters(span, parameters.job)

    for step in job.steps:
        _export_step(tracer, step, span, parameters.steps.get(step.name, {}))

    _set_status(span, job.conclusion)
    end_time = job.completed_at or _latest(*(step.completed_at for step in job.steps))
    span.end(end_time=to_unix_nanos(end_time))


def export_workflow_trace(
    tracer: trace.Tracer,
    run: WorkflowRun,
    jobs: Sequence[WorkflowJob],
    parameters_by_job: Mapping[int, SpanParameters] | None = None,
    repository: str | None = None,
) -> trace.SpanContext:
    """Create the spans of a workflow run and attach span parameters.

    Args:
        tracer: Tracer to create spans with.
        run: The workflow run (root span).
        jobs: Jobs of the run, each becoming a child span with step children.
        parameters_by_job: Merged span parameters per job id. Workflow
            parameters of all jobs go on the root span, job parameters on the
            job span, step parameters on the step span with the same name.
        repository: ``owner/name``, recorded on the root span.

    Returns:
        The root span's context (carries the trace id).
    """
    parameters_by_job = parameters_by_job or {}

    root = tracer.start_span(
        run.name or f"workflow run {run.id}",
        start_time=to_unix_nanos(run.run_started_at or run.created_at),
    )
    set_span_attribute(root, SpanAttributes.WORKFLOW_NAME, run.name)
    set_span_attribute(root, SpanAttributes.WORKFLOW_RUN_ID, run.id)
    set_span_attribute(root, SpanAttributes.WORKFLOW_RUN_NUMBER, run.run_number)
    set_span_attribute(root, SpanAttributes.WORKFLOW_RUN_ATTEMPT, run.run_attempt)
    set_span_attribute(root, SpanAttributes.WORKFLOW_EVENT, run.event)
    set_span_attribute(root, SpanAttributes.WORKFLOW_CONCLUSION, run.conclusion)
    set_span_attribute(root, SpanAttributes.WORKFLOW_URL, run.html_url)
    set_span_attribute(root, SpanAttributes.REPOSITORY, repository)
    set_span_attribute(root, SpanAttributes.HEAD_BRANCH, run.head_branch)
    set_span_attribute(root, SpanAttributes.HEAD_SHA, run.head_sha)
    set_span_parameters(root, workflow_parameters(parameters_by_job, jobs))

    for job in jobs:
        _export_job(tracer, job, root, parameters_by_job.get(job.id, SpanParameters()))

    _set_status(root, run.conclusion)
    root.end(end_time=to_unix_nanos(_latest(*(job.completed_at for job in jobs)) or run.updated_at))
    logger.debug(f"Exported workflow run {run.id} with {len(jobs)} jobs")

    return root.get_span_context()
