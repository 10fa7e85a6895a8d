"""Worker-log selection within a trailing window, and guarded line reading."""

import fnmatch
import logging
import os
import time
from datetime import datetime, timedelta
from typing import Generator

from runner_telemetry.models import LogRecord
from runner_telemetry.session import TelemetrySession

logger = logging.getLogger(__name__)


def file_mtime(path: str) -> datetime:
    """Modification time of *path* as an aware local datetime."""
    return datetime.fromtimestamp(os.path.getmtime(path)).astimezone()


def select_log_files(
    directory: str | None,
    window_days: int = 7,
    pattern: str = "Worker_*.log",
    now: datetime | None = None,
) -> list[str]:
    """List worker logs modified within the last *window_days*, newest first.

    Returns an empty list when the directory is absent, unreadable or empty.
    """
    if not directory or not os.path.isdir(directory):
        return []

    now = now or datetime.now().astimezone()
    cutoff = (now - timedelta(days=window_days)).timestamp()

    try:
        names = os.listdir(directory)
    except OSError as e:
        logger.warning("Cannot list %s: %s", directory, e)
        return []

    selected = []
    for name in names:
        if not fnmatch.fnmatch(name, pattern):
            continue
        path = os.path.join(directory, name)
        try:
            if not os.path.isfile(path):
                continue
            mtime = os.path.getmtime(path)
        except OSError:
            # Rotated away between listdir and stat
            continue
        if mtime >= cutoff:
            selected.append((mtime, path))

    selected.sort(key=lambda item: (item[0], item[1]), reverse=True)
    return [path for _, path in selected]


def read_records(
    path: str,
    session: TelemetrySession,
    max_bytes: int = 16 * 1024 * 1024,
    max_seconds: float = 5.0,
    settle_seconds: float = 2.0,
) -> Generator[LogRecord, None, None]:
    """Yield a LogRecord for each complete, non-blank line of *path*.

    Files over *max_bytes* are read from their tail only. A last line with no
    newline is kept once the file has been idle for *settle_seconds*; while
    the file is still being written it is skipped. Reading stops once
    *max_seconds* have elapsed. Unreadable files yield nothing.
    """
    try:
        stat = os.stat(path)
        mtime = datetime.fromtimestamp(stat.st_mtime).astimezone()
        truncated = stat.st_size > max_bytes
        with open(path, "rb") as f:
            if truncated:
                f.seek(stat.st_size - max_bytes)
            data = f.read(max_bytes)
    except OSError as e:
        logger.warning("Skipping unreadable log %s: %s", path, e)
        session.files_skipped += 1
        return

    session.files_scanned += 1
    if truncated:
        session.files_truncated += 1
        logger.warning(
            "Log %s is %d bytes, reading the last %d only", path, stat.st_size, max_bytes
        )

    text = data.decode("utf-8-sig", errors="replace")
    lines = text.split("\n")
    if truncated:
        # First line starts mid-way through a record
        lines = lines[1:]
    if lines and time.time() - stat.st_mtime < settle_seconds:
        tail = lines.pop()
        if tail.strip():
            # Runner is mid-flush
            session.partial_lines += 1
            logger.debug("Ignoring partial trailing line in %s", path)

    deadline = time.monotonic() + max_seconds
    for line in lines:
        if time.monotonic() > deadline:
            logger.warning("Read time limit reached for %s, skipping the rest", path)
            return
        line = line.rstrip("\r")
        if not line.strip():
            continue
        session.lines_read += 1
        yield LogRecord(line=line, source_file=path, file_mtime=mtime)
