"""Span attribute keys used for GitHub Actions traces.

Span parameters are written with their own keys, verbatim. The keys below
describe the workflow run, its jobs and steps.
"""


class SpanAttributes:
    """OTel span attribute keys for workflow, job and step spans."""

    # =========================================================================
    # Workflow Attributes
    # =========================================================================
    WORKFLOW_NAME = "github.workflow"
    WORKFLOW_RUN_ID = "github.run_id"
    WORKFLOW_RUN_NUMBER = "github.run_number"
    WORKFLOW_RUN_ATTEMPT = "github.run_attempt"
    WORKFLOW_EVENT = "github.event_name"
    WORKFLOW_CONCLUSION = "github.conclusion"
    WORKFLOW_URL = "github.html_url"
    REPOSITORY = "github.repository"
    HEAD_BRANCH = "github.head_branch"
    HEAD_SHA = "github.head_sha"

    # =========================================================================
    # Job Attributes
    # =========================================================================
    JOB_ID = "github.job.id"
    JOB_NAME = "github.job.name"
    JOB_CONCLUSION = "github.job.conclusion"
    JOB_RUNNER_NAME = "github.job.runner_name"
    JOB_URL = "github.job.html_url"

    # =========================================================================
    # Step Attributes
    # =========================================================================
    STEP_NAME = "github.step.name"
    STEP_NUMBER = "github.step.number"
    STEP_CONCLUSION = "github.step.conclusion"
