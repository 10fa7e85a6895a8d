"""Event extraction: classify worker-log lines into job events."""

import logging
from datetime import datetime, timezone
from typing import Iterable

from runner_telemetry.models import JobEvent, LogRecord
from runner_telemetry.patterns import PATTERN_TABLE, TIMESTAMP_FORMAT, TIMESTAMP_PATTERN
from runner_telemetry.session import TelemetrySession

logger = logging.getLogger(__name__)


def parse_timestamp(line: str) -> datetime | None:
    """Parse the leading ``[YYYY-MM-DD HH:MM:SS(.fff)(Z)`` marker of a line.

    ``Z`` values are UTC; the rest are taken as local time. Returns an aware
    datetime, or None when the marker is missing or not a real date.
    """
    m = TIMESTAMP_PATTERN.match(line)
    if not m:
        return None
    try:
        dt = datetime.strptime(f"{m.group('date')} {m.group('time')}", TIMESTAMP_FORMAT)
    except ValueError:
        return None

    fraction = m.group("fraction")
    if fraction:
        dt = dt.replace(microsecond=int(fraction[1:7].ljust(6, "0")))

    if m.group("utc"):
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone()


def classify_line(record: LogRecord, session: TelemetrySession | None = None) -> JobEvent | None:
    """Turn one line into a JobEvent, or None if it carries no job marker."""
    for pattern in PATTERN_TABLE:
        matched, name = pattern.match(record.line)
        if not matched:
            continue

        timestamp = parse_timestamp(record.line)
        inferred = timestamp is None
        if inferred:
            timestamp = record.file_mtime
            if session is not None:
                session.timestamp_fallbacks += 1
            logger.debug("No usable timestamp in %s, using file mtime", record.source_file)

        return JobEvent(
            kind=pattern.kind,
            job_name=name,
            timestamp=timestamp,
            source_file=record.source_file,
            timestamp_inferred=inferred,
        )
    return None


def extract_events(
    records: Iterable[LogRecord], session: TelemetrySession | None = None
) -> list[JobEvent]:
    """Classify every record, keeping file order and dropping non-event lines."""
    events = []
    for record in records:
        event = classify_line(record, session)
        if event is not None:
            events.append(event)
    if session is not None:
        session.events_extracted += len(events)
    return events
