"""One full telemetry pass: locate, select, extract, aggregate, probe, assemble."""

import logging
from datetime import datetime

from runner_telemetry.aggregator import JobAggregator
from runner_telemetry.assembler import assemble_snapshot
from runner_telemetry.charts import DiskHistorySource, build_disk_series, build_jobs_series
from runner_telemetry.config import Config
from runner_telemetry.locator import candidate_dirs, locate_log_dir
from runner_telemetry.models import DashboardSnapshot, JobStats
from runner_telemetry.parser import extract_events
from runner_telemetry.probe import PsutilProbe, SystemProbe, collect_system_metrics
from runner_telemetry.reader import file_mtime, read_records, select_log_files
from runner_telemetry.session import TelemetrySession

logger = logging.getLogger(__name__)


def aggregate_logs(config: Config, session: TelemetrySession, now: datetime) -> JobStats:
    """Read every worker log in the window and fold it into JobStats."""
    aggregator = JobAggregator(now.date(), window_days=config.window_days)

    log_dir = locate_log_dir(candidate_dirs(config))
    session.log_dir = log_dir
    paths = select_log_files(log_dir, config.window_days, config.worker_log_glob, now)
    logger.debug("Selected %d worker log(s) from %s", len(paths), log_dir)

    for path in paths:
        try:
            file_date = file_mtime(path).date()
        except OSError as e:
            logger.warning("Skipping %s: %s", path, e)
            session.files_skipped += 1
            continue
        records = read_records(
            path, session,
            max_bytes=config.max_file_bytes,
            max_seconds=config.max_file_read_seconds,
        )
        aggregator.record_file(file_date, extract_events(records, session))

    return aggregator.summary()


def build_dashboard(
    config: Config | None = None,
    probe: SystemProbe | None = None,
    session: TelemetrySession | None = None,
    now: datetime | None = None,
    disk_history: DiskHistorySource | None = None,
) -> DashboardSnapshot:
    """Build a fresh snapshot. Never raises; failures degrade to empty/zero data."""
    config = config or Config()
    probe = probe or PsutilProbe()
    session = session if session is not None else TelemetrySession()
    now = (now or datetime.now()).astimezone()
    today = now.date()

    try:
        stats = aggregate_logs(config, session, now)
    except Exception:
        logger.exception("Log aggregation failed, reporting empty job data")
        stats = JobAggregator(today, window_days=config.window_days).summary()

    system = collect_system_metrics(probe, config, session, now)
    snapshot = assemble_snapshot(
        stats,
        system,
        build_jobs_series(stats.buckets, today, config.chart_date_format),
        build_disk_series(system.disk_free_gb, today, disk_history, config.chart_date_format),
        captured_at=now,
    )
    session.log_summary()
    return snapshot
