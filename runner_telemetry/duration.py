"""Job duration estimation from start/completion markers in the same file."""

from typing import Generator

from runner_telemetry.models import MAX_DURATION, SENTINEL_DURATION, EventKind, JobEvent


def pair_completions(
    events: list[JobEvent],
) -> Generator[tuple[JobEvent, JobEvent | None], None, None]:
    """Yield ``(completion, start)`` for every completion, in one forward pass.

    The start is the first "Running job" line naming the job in the same file
    that no earlier completion of that job has already closed. Markers in
    other files are never paired. Unnamed completions get ``None``.
    """
    open_starts: dict[tuple[str, str], JobEvent] = {}
    for event in events:
        key = (event.source_file, event.job_name)
        if event.kind is EventKind.STARTED:
            if event.job_name:
                open_starts.setdefault(key, event)
        elif event.job_name:
            yield event, open_starts.pop(key, None)
        else:
            yield event, None


def estimate_duration(start: JobEvent | None, completion: JobEvent) -> int:
    """Seconds between *start* and *completion*.

    Falls back to SENTINEL_DURATION when there is no start, either timestamp
    came from the file mtime, or the result is not within (0, MAX_DURATION).
    """
    if start is None or not completion.job_name:
        return SENTINEL_DURATION
    if start.timestamp_inferred or completion.timestamp_inferred:
        return SENTINEL_DURATION

    seconds = (completion.timestamp - start.timestamp).total_seconds()
    if 0 < seconds < MAX_DURATION:
        return max(1, int(seconds))
    return SENTINEL_DURATION
