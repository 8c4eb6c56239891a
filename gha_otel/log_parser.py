"""Extraction of span parameter tags from GitHub Actions job logs.

Steps attach parameters to spans by printing self-closing tags to their
output::

    <span-parameter key="build.duration" value="42s"/>
    <step-parameter key="test.count" value="100"/>
    <job-parameter key="job.total_tests" value="150"/>
    <workflow-parameter key="version" value="1.2.3"/>

``span-parameter`` is the legacy spelling of ``step-parameter``. Anything that
does not match one of these shapes exactly is ignored.
"""

import logging
import re
from collections.abc import Sequence

from gha_otel.constants import STEP_GROUP_MARKER
from gha_otel.models import ParsedStepLogs, SpanParameters, WorkflowStep

logger = logging.getLogger(__name__)

SPAN_PARAM_PATTERN = re.compile(r'<span-parameter\s+key="([^"]+)"\s+value="([^"]*)"\s*/>')
STEP_PARAM_PATTERN = re.compile(r'<step-parameter\s+key="([^"]+)"\s+value="([^"]*)"\s*/>')
JOB_PARAM_PATTERN = re.compile(r'<job-parameter\s+key="([^"]+)"\s+value="([^"]*)"\s*/>')
WORKFLOW_PARAM_PATTERN = re.compile(
    r'<workflow-parameter\s+key="([^"]+)"\s+value="([^"]*)"\s*/>'
)


def _scan(pattern: re.Pattern[str], text: str, into: dict[str, str]) -> None:
    for match in pattern.finditer(text):
        into[match.group(1)] = match.group(2)


def parse_step_logs(logs: str) -> ParsedStepLogs:
    """Parse parameter tags out of a block of log text.

    Args:
        logs: Log text, possibly spanning many lines of unrelated output.

    Returns:
        The step, job and workflow parameters found. Within a scope the last
        occurrence of a key wins; ``step-parameter`` tags are applied after
        ``span-parameter`` tags, so they win a collision on the same key.
    """
    result = ParsedStepLogs()

    # Legacy form first so the explicit form overrides it
    _scan(SPAN_PARAM_PATTERN, logs, result.step_parameters)
    _scan(STEP_PARAM_PATTERN, logs, result.step_parameters)

    _scan(JOB_PARAM_PATTERN, logs, result.job_parameters)
    _scan(WORKFLOW_PARAM_PATTERN, logs, result.workflow_parameters)

    return result


def parse_job_logs(job_log: str, steps: Sequence[WorkflowStep]) -> dict[int, ParsedStepLogs]:
    """Split a job log into step sections and parse each one.

    Every line containing ``##[group]`` opens a new section, numbered from 0 in
    the order the markers appear. The marker line belongs to the section it
    opens; lines before the first marker are dropped. ``steps`` only gates the
    parse (no steps, no result): sections are not matched against it.

    Example log line::

        2024-01-01T00:00:00.0000000Z ##[group]Run actions/checkout@v4

    Returns:
        Mapping of section index to the parameters parsed from that section.
    """
    step_logs: dict[int, ParsedStepLogs] = {}

    if not job_log or not steps:
        return step_logs

    current_step = -1
    current_lines: list[str] = []

    def flush() -> None:
        if current_step >= 0 and current_lines:
            parsed = parse_step_logs("\n".join(current_lines))
            step_logs[current_step] = parsed
            logger.debug(
                "Parsed %d step parameters for step %d",
                len(parsed.step_parameters),
                current_step,
            )

    for line in job_log.split("\n"):
        if STEP_GROUP_MARKER in line:
            flush()
            current_step += 1
            current_lines = [line]
        else:
            current_lines.append(line)

    flush()

    return step_logs


def collect_log_parameters(
    step_logs: dict[int, ParsedStepLogs],
    steps: Sequence[WorkflowStep],
) -> SpanParameters:
    """Fold parsed step sections into a bundle keyed by step name.

    Section ``i`` is attributed to ``steps[i]``. Sections beyond the declared
    steps are keyed by their index. Job and workflow parameters from all
    sections are combined in section order, so a later section wins a
    collision.

    Sections are counted by ``##[group]`` markers, not by steps. GitHub also
    prints nested groups inside a step (for example "Set up job" opens groups
    for the operating system and runner image), so in real job logs the
    sections run ahead of the steps and step parameters can land on a later
    step's span. Job and workflow parameters are unaffected.
    """
    params = SpanParameters()

    for index in sorted(step_logs):
        parsed = step_logs[index]
        step_name = steps[index].name if index < len(steps) else str(index)

        if parsed.step_parameters:
            params.steps.setdefault(step_name, {}).update(parsed.step_parameters)
        params.job.update(parsed.job_parameters)
        params.workflow.update(parsed.workflow_parameters)

    return params
