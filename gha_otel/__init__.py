"""GitHub Actions trace exporter with span parameters.

Steps attach attributes to their spans by printing tags to their output:

    echo '<step-parameter key="test.count" value="100"/>'
    echo '<job-parameter key="job.coverage" value="87%"/>'
    echo '<workflow-parameter key="deployment.version" value="1.2.3"/>'

or by uploading an ``otel-span-parameters`` artifact containing ``params.json``.

Basic Usage:
    from gha_otel import parse_job_logs, collect_log_parameters, merge_span_parameters

    step_logs = parse_job_logs(job_log, job.steps)
    log_params = collect_log_parameters(step_logs, job.steps)
    params = merge_span_parameters(artifact_params, log_params)
"""

from gha_otel.artifact_loader import load_span_parameters
from gha_otel.client import ExporterClient
from gha_otel.config import ConfigurationError, ExportConfig
from gha_otel.export import export_run
from gha_otel.github_client import GitHubClient
from gha_otel.log_parser import collect_log_parameters, parse_job_logs, parse_step_logs
from gha_otel.models import ParsedStepLogs, SpanParameters, WorkflowJob, WorkflowRun, WorkflowStep
from gha_otel.parameters import merge_span_parameters
from gha_otel.tracing import export_workflow_trace

__version__ = "0.1.0"

__all__ = [
    # Log parsing
    "parse_step_logs",
    "parse_job_logs",
    "collect_log_parameters",
    # Parameter sources
    "load_span_parameters",
    "merge_span_parameters",
    # Export
    "export_run",
    "export_workflow_trace",
    "ExporterClient",
    "GitHubClient",
    "ExportConfig",
    "ConfigurationError",
    # Models
    "ParsedStepLogs",
    "SpanParameters",
    "WorkflowJob",
    "WorkflowRun",
    "WorkflowStep",
]
