"""Per-pass telemetry session: counters that each stage reports into.

A session is created by the caller, passed by reference through one
aggregation pass, and either discarded or reset before the next one.
"""

import logging
from dataclasses import asdict, dataclass

logger = logging.getLogger(__name__)


@dataclass
class TelemetrySession:
    log_dir: str | None = None
    files_scanned: int = 0
    files_skipped: int = 0
    files_truncated: int = 0
    lines_read: int = 0
    partial_lines: int = 0
    events_extracted: int = 0
    timestamp_fallbacks: int = 0
    probe_failures: int = 0

    def reset(self):
        """Zero every counter so the session can be reused for another pass."""
        fresh = TelemetrySession()
        for name, value in asdict(fresh).items():
            setattr(self, name, value)

    def to_dict(self) -> dict:
        return asdict(self)

    def log_summary(self):
        logger.info(
            "Pass complete: dir=%s, %d file(s) scanned, %d skipped, %d truncated, "
            "%d line(s), %d event(s), %d timestamp fallback(s), %d probe failure(s)",
            self.log_dir, self.files_scanned, self.files_skipped, self.files_truncated,
            self.lines_read, self.events_extracted, self.timestamp_fallbacks,
            self.probe_failures,
        )
