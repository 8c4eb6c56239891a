"""Exporter configuration resolved from arguments and environment variables."""

import os

from pydantic import BaseModel, Field

from gha_otel.constants import (
    DEFAULT_API_URL,
    DEFAULT_ARTIFACT_NAME,
    DEFAULT_SERVICE_NAME,
    DEFAULT_TIMEOUT,
)
from gha_otel.env import (
    GHA_OTEL_ARTIFACT_NAME,
    GHA_OTEL_DEBUG,
    GHA_OTEL_PARSE_LOGS,
    GHA_OTEL_RUN_ID,
    GHA_OTEL_TIMEOUT,
    GITHUB_API_URL,
    GITHUB_REPOSITORY,
    GITHUB_RUN_ID,
    GITHUB_TOKEN,
    OTEL_EXPORTER_OTLP_ENDPOINT,
    OTEL_EXPORTER_OTLP_HEADERS,
    OTEL_SERVICE_NAME,
)

FALSE_VALUES = ("false", "0", "no", "off")


class ConfigurationError(ValueError):
    """Raised when required settings are missing or invalid."""


def env_flag(name: str, default: bool) -> bool:
    """Read a boolean env var; unset or empty means ``default``."""
    value = os.environ.get(name, "").strip().lower()
    if not value:
        return default
    return value not in FALSE_VALUES


def parse_headers(raw: str | None) -> dict[str, str]:
    """Parse ``key=value,key2=value2`` into a dict, skipping malformed pairs."""
    headers: dict[str, str] = {}
    if not raw:
        return headers
    for pair in raw.split(","):
        key, sep, value = pair.partition("=")
        if sep and key.strip():
            headers[key.strip()] = value.strip()
    return headers


class ExportConfig(BaseModel):
    """Settings for one export run."""

    github_token: str
    owner: str
    repo_name: str
    run_id: int
    api_url: str = DEFAULT_API_URL
    otlp_endpoint: str | None = None
    otlp_headers: dict[str, str] = Field(default_factory=dict)
    service_name: str = DEFAULT_SERVICE_NAME
    artifact_name: str = DEFAULT_ARTIFACT_NAME
    parse_logs: bool = True
    timeout: float = DEFAULT_TIMEOUT
    debug: bool = False

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.repo_name}"

    @classmethod
    def from_env(
        cls,
        *,
        github_token: str | None = None,
        repository: str | None = None,
        run_id: int | None = None,
        otlp_endpoint: str | None = None,
        artifact_name: str | None = None,
        parse_logs: bool | None = None,
        debug: bool | None = None,
    ) -> "ExportConfig":
        """Build the config, falling back to env vars, then defaults.

        Raises:
            ConfigurationError: token, repository or run id is missing or invalid.
        """
        github_token = github_token or os.environ.get(GITHUB_TOKEN, "")
        if not github_token:
            raise ConfigurationError(f"{GITHUB_TOKEN} is required")

        repository = repository or os.environ.get(GITHUB_REPOSITORY, "")
        owner, _, repo_name = repository.partition("/")
        if not owner or not repo_name:
            raise ConfigurationError(
                f"Repository must be given as owner/name, got '{repository}'"
            )

        if run_id is None:
            env_run_id = os.environ.get(GHA_OTEL_RUN_ID) or os.environ.get(GITHUB_RUN_ID)
            if not env_run_id:
                raise ConfigurationError(f"{GHA_OTEL_RUN_ID} or {GITHUB_RUN_ID} is required")
            try:
                run_id = int(env_run_id)
            except ValueError:
                raise ConfigurationError(f"Invalid run id '{env_run_id}'") from None

        env_timeout = os.environ.get(GHA_OTEL_TIMEOUT)
        try:
            timeout = float(env_timeout) if env_timeout else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigurationError(f"Invalid {GHA_OTEL_TIMEOUT} '{env_timeout}'") from None

        return cls(
            github_token=github_token,
            owner=owner,
            repo_name=repo_name,
            run_id=run_id,
            api_url=os.environ.get(GITHUB_API_URL) or DEFAULT_API_URL,
            otlp_endpoint=otlp_endpoint or os.environ.get(OTEL_EXPORTER_OTLP_ENDPOINT) or None,
            otlp_headers=parse_headers(os.environ.get(OTEL_EXPORTER_OTLP_HEADERS)),
            service_name=os.environ.get(OTEL_SERVICE_NAME) or DEFAULT_SERVICE_NAME,
            artifact_name=artifact_name
            or os.environ.get(GHA_OTEL_ARTIFACT_NAME)
            or DEFAULT_ARTIFACT_NAME,
            parse_logs=env_flag(GHA_OTEL_PARSE_LOGS, True) if parse_logs is None else parse_logs,
            timeout=timeout,
            debug=env_flag(GHA_OTEL_DEBUG, False) if debug is None else debug,
        )
