"""Line patterns for worker-log job markers.

Each event kind maps to one compiled regex with an optional ``name`` group.
Call sites only go through ``PATTERN_TABLE`` and ``TIMESTAMP_PATTERN``, so a
runner log format change is a change to this module alone.

Example lines:
    [2026-10-19 10:30:00Z INFO Worker] Running job: build
    [2026-10-19 10:34:12Z INFO Worker] Job build completed with result: Succeeded
"""

import re
from dataclasses import dataclass

from runner_telemetry.models import EventKind

# ---------------------------------------------------------------------------
# Timestamp
# ---------------------------------------------------------------------------

TIMESTAMP_PATTERN = re.compile(
    r"^\[(?P<date>\d{4}-\d{2}-\d{2})[ T](?P<time>\d{2}:\d{2}:\d{2})"
    r"(?P<fraction>\.\d+)?(?P<utc>Z)?"
)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# ---------------------------------------------------------------------------
# Job markers
# ---------------------------------------------------------------------------

_QUOTES = "'\"`"


def clean_job_name(raw: str | None) -> str | None:
    """Strip whitespace and surrounding quotes. Empty names become None."""
    if raw is None:
        return None
    name = raw.strip().strip(_QUOTES).strip()
    return name or None


@dataclass(frozen=True)
class LinePattern:
    kind: EventKind
    regex: re.Pattern
    name_group: str = "name"

    def match(self, line: str) -> tuple[bool, str | None]:
        """Return (matched, job_name)."""
        m = self.regex.search(line)
        if not m:
            return False, None
        return True, clean_job_name(m.groupdict().get(self.name_group))


def _completion(result: str) -> re.Pattern:
    return re.compile(
        r"\bJob(?:\s+(?P<name>.+?))?\s+completed with result:\s*" + result + r"\b",
        re.IGNORECASE,
    )


# Completions are tried first: they are the more specific markers.
PATTERN_TABLE: tuple[LinePattern, ...] = (
    LinePattern(EventKind.SUCCEEDED, _completion("Succeeded")),
    LinePattern(EventKind.FAILED, _completion("Failed")),
    LinePattern(
        EventKind.STARTED,
        re.compile(r"\bRunning job\b(?::\s*(?P<name>.*\S))?", re.IGNORECASE),
    ),
)
