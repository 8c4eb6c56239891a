"""Constants used by the GitHub Actions trace exporter.

This module defines default values, file and artifact names, and tracer
identification.
"""

# =============================================================================
# Exporter Identification
# =============================================================================

TRACER_NAME = "gha-otel-export"
"""OpenTelemetry tracer/instrumentation scope name for exported spans."""

SDK_VERSION = "0.1.0"
"""Package version. Should match pyproject.toml version."""

# =============================================================================
# Default Values
# =============================================================================

DEFAULT_API_URL = "https://api.github.com"
"""Default GitHub REST API endpoint."""

DEFAULT_TIMEOUT = 30.0
"""Default HTTP request timeout in seconds."""

DEFAULT_SERVICE_NAME = "github-actions"
"""Default ``service.name`` resource attribute."""

DEFAULT_FLUSH_AT = 512
"""Default maximum batch size for the span processor."""

DEFAULT_FLUSH_INTERVAL = 5.0
"""Default interval in seconds between automatic flushes."""

# =============================================================================
# Span Parameters
# =============================================================================

DEFAULT_ARTIFACT_NAME = "otel-span-parameters"
"""Name of the artifact carrying the span parameters bundle."""

PARAMS_FILE_NAME = "params.json"
"""File holding the span parameters bundle, locally and inside the artifact."""

LOCAL_PARAMS_DIR = "otel-span-params"
"""Directory (relative to the working directory) written by the emit step."""

STEP_GROUP_MARKER = "##[group]"
"""Log token opening a step's output in GitHub Actions job logs."""
