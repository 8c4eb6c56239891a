"""Data models for workflow runs and span parameters.

``ParsedStepLogs`` is the result of scanning one step's log output.
``SpanParameters`` is the bundle shape shared by the artifact file, the
log-derived parameters and the merged result. The ``Workflow*`` models mirror
the subset of the GitHub Actions REST payloads used to build traces.
"""

from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


@dataclass
class ParsedStepLogs:
    """Parameters found in one step's log text, separated by scope."""

    step_parameters: dict[str, str] = field(default_factory=dict)
    job_parameters: dict[str, str] = field(default_factory=dict)
    workflow_parameters: dict[str, str] = field(default_factory=dict)


class SpanParameters(BaseModel):
    """Span parameters for a workflow, a job and its steps (keyed by step name).

    Matches the ``params.json`` document:
    ``{"workflow": {...}, "job": {...}, "steps": {"<stepName>": {...}}}``.
    """

    workflow: dict[str, str] = Field(default_factory=dict)
    job: dict[str, str] = Field(default_factory=dict)
    steps: dict[str, dict[str, str]] = Field(default_factory=dict)

    @field_validator("workflow", "job", "steps", mode="before")
    @classmethod
    def _null_scope_as_empty(cls, value):
        return {} if value is None else value


class WorkflowStep(BaseModel):
    """A step of a workflow job."""

    model_config = ConfigDict(extra="ignore")

    name: str
    number: int
    status: str | None = None
    conclusion: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None


class WorkflowJob(BaseModel):
    """A job of a workflow run."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    status: str | None = None
    conclusion: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    runner_name: str | None = None
    html_url: str | None = None
    steps: list[WorkflowStep] = Field(default_factory=list)


class WorkflowRun(BaseModel):
    """A workflow run."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str | None = None
    run_number: int | None = None
    run_attempt: int | None = None
    event: str | None = None
    status: str | None = None
    conclusion: str | None = None
    head_branch: str | None = None
    head_sha: str | None = None
    html_url: str | None = None
    run_started_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
