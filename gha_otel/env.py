"""Environment variable definitions for the GitHub Actions trace exporter.

This module defines all environment variables read by the exporter. Most of
them are provided by the GitHub Actions runner or follow the OpenTelemetry
SDK conventions.

Usage:
    import os
    from gha_otel.env import GITHUB_TOKEN

    token = os.environ.get(GITHUB_TOKEN)
"""

# =============================================================================
# GitHub
# =============================================================================

GITHUB_TOKEN = "GITHUB_TOKEN"
"""
.. envvar:: GITHUB_TOKEN

Token used to call the GitHub REST API. Needs ``actions: read``.
"""

GITHUB_REPOSITORY = "GITHUB_REPOSITORY"
"""
.. envvar:: GITHUB_REPOSITORY

Repository in ``owner/name`` form. Set by the runner.

**Example:** ``octo-org/octo-repo``
"""

GITHUB_RUN_ID = "GITHUB_RUN_ID"
"""
.. envvar:: GITHUB_RUN_ID

Identifier of the current workflow run. Set by the runner.
"""

GITHUB_API_URL = "GITHUB_API_URL"
"""
.. envvar:: GITHUB_API_URL

Base URL of the GitHub REST API. Set by the runner (differs on GHES).

**Default:** ``https://api.github.com``
"""

# =============================================================================
# Exporter
# =============================================================================

GHA_OTEL_RUN_ID = "GHA_OTEL_RUN_ID"
"""
.. envvar:: GHA_OTEL_RUN_ID

Workflow run to export. Overrides ``GITHUB_RUN_ID``, typically set to
``github.event.workflow_run.id`` in a ``workflow_run`` triggered workflow.
"""

GHA_OTEL_ARTIFACT_NAME = "GHA_OTEL_ARTIFACT_NAME"
"""
.. envvar:: GHA_OTEL_ARTIFACT_NAME

Name of the artifact holding ``params.json``.

**Default:** ``otel-span-parameters``
"""

GHA_OTEL_PARSE_LOGS = "GHA_OTEL_PARSE_LOGS"
"""
.. envvar:: GHA_OTEL_PARSE_LOGS

Whether job logs are downloaded and scanned for parameter tags.
Accepts: "true", "false", "1", "0", "yes", "no", "on", "off" (case-insensitive)

**Default:** ``true``
"""

GHA_OTEL_TIMEOUT = "GHA_OTEL_TIMEOUT"
"""
.. envvar:: GHA_OTEL_TIMEOUT

HTTP request timeout in seconds for GitHub API calls.

**Default:** ``30``
"""

GHA_OTEL_DEBUG = "GHA_OTEL_DEBUG"
"""
.. envvar:: GHA_OTEL_DEBUG

Enable debug logging.

**Default:** ``false``
"""

# =============================================================================
# OpenTelemetry
# =============================================================================

OTEL_EXPORTER_OTLP_ENDPOINT = "OTEL_EXPORTER_OTLP_ENDPOINT"
"""
.. envvar:: OTEL_EXPORTER_OTLP_ENDPOINT

OTLP/HTTP traces endpoint. When unset, spans are printed to stdout.
"""

OTEL_EXPORTER_OTLP_HEADERS = "OTEL_EXPORTER_OTLP_HEADERS"
"""
.. envvar:: OTEL_EXPORTER_OTLP_HEADERS

Extra headers for the OTLP exporter, as ``key=value`` pairs separated by commas.

**Example:** ``authorization=Bearer abc,x-team=ci``
"""

OTEL_SERVICE_NAME = "OTEL_SERVICE_NAME"
"""
.. envvar:: OTEL_SERVICE_NAME

Value of the ``service.name`` resource attribute.

**Default:** ``github-actions``
"""
