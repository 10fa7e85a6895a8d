"""Aggregation of job events into daily buckets, today's totals, and recent jobs."""

from datetime import date, timedelta

from runner_telemetry.duration import estimate_duration, pair_completions
from runner_telemetry.models import (
    MAX_JOB_CANDIDATES,
    MAX_RECENT_JOBS,
    DailyBucket,
    EventKind,
    JobEvent,
    JobStats,
    JobSummary,
)


def success_rate(successes: int, total: int) -> int:
    """Percentage rounded half up, 0 when there were no jobs."""
    if total <= 0:
        return 0
    return min(100, max(0, int(successes * 100 / total + 0.5)))


class JobAggregator:
    """Folds per-file job events into a JobStats.

    Buckets are keyed by the log file's modification date, not the event's
    own timestamp. One aggregator is used for exactly one pass.
    """

    def __init__(
        self,
        today: date,
        window_days: int = 7,
        max_candidates: int = MAX_JOB_CANDIDATES,
        max_recent: int = MAX_RECENT_JOBS,
    ):
        self._today = today
        self._max_candidates = max_candidates
        self._max_recent = max_recent
        self._buckets: dict[date, DailyBucket] = {
            today - timedelta(days=i): DailyBucket(date=today - timedelta(days=i))
            for i in range(window_days)
        }
        self._today_success = 0
        self._today_fail = 0
        self._durations: list[int] = []
        self._candidates: list[JobSummary] = []

    def record_file(self, file_date: date, events: list[JobEvent]):
        """Count every completion event of one file under *file_date*."""
        bucket = self._buckets.setdefault(file_date, DailyBucket(date=file_date))
        is_today = file_date == self._today
        named = []

        for event, start in pair_completions(events):
            if event.kind is EventKind.SUCCEEDED:
                bucket.success_count += 1
                if is_today:
                    self._today_success += 1
            else:
                bucket.fail_count += 1
                if is_today:
                    self._today_fail += 1

            if event.job_name:
                duration = estimate_duration(start, event)
                self._durations.append(duration)
                named.append((event, duration))

        # Latest lines of the file first, so the cap keeps the newest runs
        for event, duration in reversed(named):
            if len(self._candidates) >= self._max_candidates:
                break
            self._candidates.append(JobSummary(
                name=event.job_name,
                status="success" if event.kind is EventKind.SUCCEEDED else "failure",
                timestamp=event.timestamp,
                duration_seconds=duration,
            ))

    def summary(self) -> JobStats:
        total = self._today_success + self._today_fail
        recent = sorted(self._candidates, key=lambda job: job.timestamp, reverse=True)
        avg = 0
        if self._durations:
            avg = int(sum(self._durations) / len(self._durations) + 0.5)

        return JobStats(
            buckets=dict(sorted(self._buckets.items())),
            total_jobs_today=total,
            successful_jobs=self._today_success,
            failed_jobs=self._today_fail,
            success_rate=success_rate(self._today_success, total),
            avg_job_duration=avg,
            recent_jobs=recent[: self._max_recent],
        )
