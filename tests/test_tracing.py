"""Span tree tests using InMemorySpanExporter.

Verifies span names, nesting, timestamps, statuses and that span parameters
land on the workflow, job and step spans.
"""

import pytest
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from gha_otel.client import ExporterClient
from gha_otel.models import SpanParameters, WorkflowStep
from gha_otel.span_attributes import SpanAttributes
from gha_otel.tracing import export_workflow_trace
from gha_otel.utils import to_unix_nanos
from tests.utils import at, make_job, make_run


@pytest.fixture
def memory_exporter():
    exporter = InMemorySpanExporter()
    client = ExporterClient(span_processor=SimpleSpanProcessor(exporter))
    yield exporter, client
    client.shutdown()


def get_spans_by_name(exporter):
    """Return dict of spans keyed by name."""
    return {span.name: span for span in exporter.get_finished_spans()}


def test_span_hierarchy(memory_exporter):
    exporter, client = memory_exporter
    run = make_run()
    jobs = [make_job(1, "build"), make_job(2, "lint", step_names=("Ruff",))]

    root_context = export_workflow_trace(client.tracer, run, jobs)

    spans = get_spans_by_name(exporter)
    assert set(spans) == {"CI", "build", "lint", "Checkout", "Test", "Ruff"}
    assert spans["CI"].parent is None
    assert spans["CI"].context.trace_id == root_context.trace_id
    assert spans["build"].parent.span_id == spans["CI"].context.span_id
    assert spans["lint"].parent.span_id == spans["CI"].context.span_id
    assert spans["Checkout"].parent.span_id == spans["build"].context.span_id
    assert spans["Ruff"].parent.span_id == spans["lint"].context.span_id
    assert {s.context.trace_id for s in spans.values()} == {root_context.trace_id}


def test_timestamps_come_from_github(memory_exporter):
    exporter, client = memory_exporter

    export_workflow_trace(client.tracer, make_run(), [make_job()])

    spans = get_spans_by_name(exporter)
    assert spans["CI"].start_time == to_unix_nanos(at(0))
    assert spans["CI"].end_time == to_unix_nanos(at(90))
    assert spans["build"].start_time == to_unix_nanos(at(1))
    assert spans["Test"].start_time == to_unix_nanos(at(20))
    assert spans["Test"].end_time == to_unix_nanos(at(25))


def test_parameters_attached_per_scope(memory_exporter):
    exporter, client = memory_exporter
    params = SpanParameters(
        workflow={"deployment.version": "1.2.3"},
        job={"job.coverage": "87%"},
        steps={"Test": {"test.total": "150"}, "Missing": {"ignored": "x"}},
    )

    export_workflow_trace(client.tracer, make_run(), [make_job()], {1: params}, repository="octo/repo")

    spans = get_spans_by_name(exporter)
    assert spans["CI"].attributes["deployment.version"] == "1.2.3"
    assert spans["CI"].attributes[SpanAttributes.REPOSITORY] == "octo/repo"
    assert spans["build"].attributes["job.coverage"] == "87%"
    assert spans["Test"].attributes["test.total"] == "150"
    assert "test.total" not in spans["Checkout"].attributes
    assert "job.coverage" not in spans["CI"].attributes
    assert all("ignored" not in span.attributes for span in spans.values())


def test_workflow_parameters_from_all_jobs(memory_exporter):
    exporter, client = memory_exporter
    jobs = [make_job(1, "build"), make_job(2, "deploy")]
    params = {
        1: SpanParameters(workflow={"a": "from-build", "shared": "build"}),
        2: SpanParameters(workflow={"b": "from-deploy", "shared": "deploy"}),
    }

    export_workflow_trace(client.tracer, make_run(), jobs, params)

    root = get_spans_by_name(exporter)["CI"]
    assert root.attributes["a"] == "from-build"
    assert root.attributes["b"] == "from-deploy"
    assert root.attributes["shared"] == "deploy"


def test_failed_step_sets_error_status(memory_exporter):
    exporter, client = memory_exporter
    job = make_job()
    job.conclusion = "failure"
    job.steps[1] = WorkflowStep(
        name="Test", number=2, conclusion="failure", started_at=at(20), completed_at=at(25)
    )

    export_workflow_trace(client.tracer, make_run(conclusion="failure"), [job])

    spans = get_spans_by_name(exporter)
    assert spans["Test"].status.status_code == StatusCode.ERROR
    assert spans["build"].status.status_code == StatusCode.ERROR
    assert spans["CI"].status.status_code == StatusCode.ERROR
    assert spans["Checkout"].status.status_code == StatusCode.OK


def test_run_attributes(memory_exporter):
    exporter, client = memory_exporter

    export_workflow_trace(client.tracer, make_run(), [])

    root = get_spans_by_name(exporter)["CI"]
    assert root.attributes[SpanAttributes.WORKFLOW_RUN_ID] == 42
    assert root.attributes[SpanAttributes.WORKFLOW_RUN_NUMBER] == 7
    assert root.attributes[SpanAttributes.HEAD_BRANCH] == "main"
    assert root.end_time == to_unix_nanos(at(100))
