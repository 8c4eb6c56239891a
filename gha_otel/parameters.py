"""Reconciliation of span parameters from the artifact and from job logs."""

from gha_otel.models import SpanParameters


def merge_span_parameters(
    artifact_params: SpanParameters | None = None,
    log_params: SpanParameters | None = None,
) -> SpanParameters:
    """Merge artifact parameters with log-parsed parameters.

    Artifact parameters take precedence over log-parsed parameters, key by key.
    Steps are merged independently of each other. Neither input is modified.

    Args:
        artifact_params: Bundle loaded from ``params.json``, if any.
        log_params: Bundle parsed from the job logs, if any.

    Returns:
        A new bundle; empty when both inputs are ``None``.
    """
    merged = SpanParameters()

    # Log params first (lower priority), artifact params override them
    for source in (log_params, artifact_params):
        if source is None:
            continue
        merged.workflow.update(source.workflow)
        merged.job.update(source.job)
        for step_name, step_params in source.steps.items():
            merged.steps.setdefault(step_name, {}).update(step_params)

    return merged
