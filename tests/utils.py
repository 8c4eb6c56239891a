"""Test utilities for the GitHub Actions trace exporter tests."""

import io
import json
import zipfile
from datetime import datetime, timedelta, timezone

import httpx

from gha_otel.github_client import GitHubClient
from gha_otel.models import WorkflowJob, WorkflowRun, WorkflowStep

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def at(seconds: int) -> datetime:
    """Timestamp ``seconds`` after T0."""
    return T0 + timedelta(seconds=seconds)


def make_run(**overrides) -> WorkflowRun:
    fields = {
        "id": 42,
        "name": "CI",
        "run_number": 7,
        "run_attempt": 1,
        "event": "push",
        "status": "completed",
        "conclusion": "success",
        "head_branch": "main",
        "head_sha": "abc123",
        "run_started_at": at(0),
        "updated_at": at(100),
    }
    fields.update(overrides)
    return WorkflowRun(**fields)


def make_job(job_id: int = 1, name: str = "build", step_names=("Checkout", "Test")) -> WorkflowJob:
    steps = [
        WorkflowStep(
            name=step_name,
            number=number,
            status="completed",
            conclusion="success",
            started_at=at(number * 10),
            completed_at=at(number * 10 + 5),
        )
        for number, step_name in enumerate(step_names, start=1)
    ]
    return WorkflowJob(
        id=job_id,
        name=name,
        status="completed",
        conclusion="success",
        started_at=at(1),
        completed_at=at(90),
        steps=steps,
    )


def params_zip(payload: dict | None, filename: str = "params.json") -> bytes:
    """Build an artifact zip holding ``payload`` as JSON."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        if payload is not None:
            zf.writestr(filename, json.dumps(payload))
    return buffer.getvalue()


def mock_github_client(handler) -> GitHubClient:
    """GitHubClient whose requests are answered by ``handler(request)``."""
    client = GitHubClient("test-token", transport=httpx.MockTransport(handler))
    client.initial_backoff = 0.0
    return client
