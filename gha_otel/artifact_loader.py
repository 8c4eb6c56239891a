"""Loading of the span parameters bundle written by a workflow step.

The bundle is looked up, in order:

1. in ``otel-span-params/params.json`` under the working directory, when the
   exporter runs in the same workflow run as the step that wrote it;
2. in the artifact of the current workflow run;
3. in the artifact of an explicitly given run, e.g. the run that triggered a
   ``workflow_run`` event.

A missing file or artifact means "no parameters". Any other failure is logged
and also treated as "no parameters": span parameters never fail an export.
"""

import io
import logging
import os
import zipfile
from pathlib import Path

from gha_otel.constants import DEFAULT_ARTIFACT_NAME, LOCAL_PARAMS_DIR, PARAMS_FILE_NAME
from gha_otel.env import GITHUB_RUN_ID
from gha_otel.github_client import GitHubClient
from gha_otel.models import SpanParameters

logger = logging.getLogger(__name__)


def load_local_span_parameters(workdir: str | Path | None = None) -> SpanParameters | None:
    """Read ``otel-span-params/params.json`` from the working directory, if present."""
    local_params_path = Path(workdir or os.getcwd()) / LOCAL_PARAMS_DIR / PARAMS_FILE_NAME
    if not local_params_path.is_file():
        return None

    logger.info("Found local span parameters file (same workflow run)")
    params = SpanParameters.model_validate_json(local_params_path.read_text(encoding="utf-8"))
    logger.info("Loaded span parameters from local file")
    logger.debug(f"Span parameters: {params.model_dump_json()}")
    return params


def read_span_parameters_zip(archive: bytes) -> SpanParameters | None:
    """Extract and parse ``params.json`` from an artifact zip archive."""
    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        if PARAMS_FILE_NAME not in zf.namelist():
            logger.warning(f"Artifact downloaded but {PARAMS_FILE_NAME} not found")
            return None
        content = zf.read(PARAMS_FILE_NAME).decode("utf-8")
    return SpanParameters.model_validate_json(content)


async def _load_from_run(
    client: GitHubClient,
    owner: str,
    repo_name: str,
    run_id: int,
    artifact_name: str,
) -> SpanParameters | None:
    logger.info(f"Looking for artifact {artifact_name} in run {run_id}")
    artifact, error = await client.find_artifact(owner, repo_name, run_id, artifact_name)
    if error:
        raise RuntimeError(error)
    if artifact is None:
        logger.info(f"No span parameters artifact found ({artifact_name}) in run {run_id}")
        return None

    logger.info(f"Found artifact: {artifact['name']} (ID: {artifact['id']})")
    archive, error = await client.download_artifact(owner, repo_name, artifact["id"])
    if error:
        raise RuntimeError(error)

    params = read_span_parameters_zip(archive)
    if params is not None:
        logger.info("Loaded span parameters from artifact")
        logger.debug(f"Span parameters: {params.model_dump_json()}")
    return params


async def load_span_parameters(
    artifact_name: str = DEFAULT_ARTIFACT_NAME,
    *,
    client: GitHubClient | None = None,
    owner: str | None = None,
    repo_name: str | None = None,
    run_id: int | None = None,
    current_run_id: int | None = None,
    workdir: str | Path | None = None,
) -> SpanParameters | None:
    """Load the span parameters bundle.

    Args:
        artifact_name: Name of the artifact holding ``params.json``.
        client: GitHub client; without it only the local file is considered.
        owner: Repository owner.
        repo_name: Repository name.
        run_id: Run whose artifact is tried last (e.g. the triggering run).
        current_run_id: Run whose artifact is tried first. Defaults to
            the GITHUB_RUN_ID env var.
        workdir: Directory holding ``otel-span-params/``. Defaults to the cwd.

    Returns:
        The bundle, or None when it does not exist or cannot be loaded.
    """
    try:
        params = load_local_span_parameters(workdir)
        if params is not None:
            return params

        if client is None or not owner or not repo_name:
            logger.info(f"No span parameters artifact found ({artifact_name})")
            return None

        if current_run_id is None:
            env_run_id = os.environ.get(GITHUB_RUN_ID)
            current_run_id = int(env_run_id) if env_run_id else None

        candidate_runs: list[int] = []
        for candidate in (current_run_id, run_id):
            if candidate is not None and candidate not in candidate_runs:
                candidate_runs.append(candidate)

        for candidate in candidate_runs:
            params = await _load_from_run(client, owner, repo_name, candidate, artifact_name)
            if params is not None:
                return params

        return None

    except Exception as e:
        logger.warning(f"Failed to load span parameters artifact: {e}")
        return None
