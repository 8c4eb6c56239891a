"""CLI tests."""

import json
from unittest.mock import AsyncMock, patch

from opentelemetry.trace import SpanContext
from typer.testing import CliRunner

from gha_otel.cli import app

runner = CliRunner()

LOG = """2024-01-01T00:00:00Z preamble
2024-01-01T00:00:01Z ##[group]Run build
2024-01-01T00:00:02Z <span-parameter key="build.size" value="12MB"/>
2024-01-01T00:00:03Z ##[group]Run test
2024-01-01T00:00:04Z <job-parameter key="job.tests" value="150"/>
"""


def test_parse_logs_prints_sections(tmp_path):
    log_file = tmp_path / "job.log"
    log_file.write_text(LOG, encoding="utf-8")

    result = runner.invoke(app, ["parse-logs", str(log_file)])

    assert result.exit_code == 0
    parsed = json.loads(result.output)
    assert parsed == {
        "0": {
            "step_parameters": {"build.size": "12MB"},
            "job_parameters": {},
            "workflow_parameters": {},
        },
        "1": {
            "step_parameters": {},
            "job_parameters": {"job.tests": "150"},
            "workflow_parameters": {},
        },
    }


def test_parse_logs_without_markers(tmp_path):
    log_file = tmp_path / "job.log"
    log_file.write_text('<span-parameter key="a" value="1"/>', encoding="utf-8")

    result = runner.invoke(app, ["parse-logs", str(log_file)])

    assert result.exit_code == 0
    assert json.loads(result.output) == {}


def test_parse_logs_tolerates_invalid_utf8(tmp_path):
    log_file = tmp_path / "job.log"
    log_file.write_bytes(b'##[group]Run build\n\xff\xfe <span-parameter key="a" value="1"/>\n')

    result = runner.invoke(app, ["parse-logs", str(log_file)])

    assert result.exit_code == 0
    assert json.loads(result.output)["0"]["step_parameters"] == {"a": "1"}


def test_export_configuration_error(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)

    result = runner.invoke(app, ["export", "--repository", "octo/repo", "--run-id", "1"])

    assert result.exit_code == 1
    assert "GITHUB_TOKEN" in result.output


def test_export_prints_trace_id(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "t")
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_ENDPOINT", raising=False)
    span_context = SpanContext(trace_id=0xABC, span_id=0x1, is_remote=False)

    with patch("gha_otel.cli.export_run", new=AsyncMock(return_value=span_context)) as export:
        result = runner.invoke(
            app, ["export", "--repository", "octo/repo", "--run-id", "42", "--no-parse-logs"]
        )

    assert result.exit_code == 0
    assert result.output.strip().endswith(format(0xABC, "032x"))
    config = export.await_args.args[0]
    assert config.run_id == 42
    assert config.parse_logs is False


def test_export_failure_exits_nonzero(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "t")

    with patch("gha_otel.cli.export_run", new=AsyncMock(return_value=None)):
        result = runner.invoke(app, ["export", "--repository", "octo/repo", "--run-id", "42"])

    assert result.exit_code == 1
