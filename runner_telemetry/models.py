"""Data model for the telemetry pass: log records, job events, and the snapshot."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

SENTINEL_DURATION = 180
MAX_DURATION = 86400
MAX_RECENT_JOBS = 8
MAX_JOB_CANDIDATES = 20
CHART_DAYS = 7


class EventKind(Enum):
    STARTED = "started"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class RunnerStatus(Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    IDLE = "idle"


@dataclass(frozen=True)
class LogRecord:
    line: str
    source_file: str
    file_mtime: datetime


@dataclass(frozen=True)
class JobEvent:
    kind: EventKind
    job_name: str | None
    timestamp: datetime
    source_file: str
    timestamp_inferred: bool = False   # True when file mtime stood in for the line


@dataclass
class DailyBucket:
    date: date
    success_count: int = 0
    fail_count: int = 0

    @property
    def total(self) -> int:
        return self.success_count + self.fail_count


@dataclass(frozen=True)
class JobSummary:
    name: str
    status: str          # "success" or "failure"
    timestamp: datetime
    duration_seconds: int

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "status": self.status,
            "timestamp": self.timestamp.isoformat(),
            "durationSeconds": self.duration_seconds,
        }


@dataclass(frozen=True)
class SystemMetrics:
    status: RunnerStatus = RunnerStatus.OFFLINE
    disk_free_gb: float = 0.0
    disk_total_gb: float = 0.0
    uptime_hours: float = 0.0


@dataclass(frozen=True)
class ChartPoint:
    date: str
    value: float


@dataclass
class JobStats:
    buckets: dict[date, DailyBucket] = field(default_factory=dict)
    total_jobs_today: int = 0
    successful_jobs: int = 0
    failed_jobs: int = 0
    success_rate: int = 0
    avg_job_duration: int = 0
    recent_jobs: list[JobSummary] = field(default_factory=list)


@dataclass(frozen=True)
class DashboardSnapshot:
    status: RunnerStatus
    timestamp: str
    total_jobs_today: int
    successful_jobs: int
    failed_jobs: int
    success_rate: int
    disk_free_gb: float
    disk_total_gb: float
    avg_job_duration: int
    uptime_hours: float
    jobs_per_day: tuple[ChartPoint, ...]
    disk_per_day: tuple[ChartPoint, ...]
    recent_jobs: tuple[JobSummary, ...]
    queue_length: int = 0

    def to_dict(self) -> dict:
        """Wire shape consumed by the dashboard client."""
        return {
            "status": self.status.value,
            "timestamp": self.timestamp,
            "metrics": {
                "totalJobsToday": self.total_jobs_today,
                "successfulJobs": self.successful_jobs,
                "failedJobs": self.failed_jobs,
                "successRate": self.success_rate,
                "diskFreeGB": self.disk_free_gb,
                "diskTotalGB": self.disk_total_gb,
                "avgJobDuration": self.avg_job_duration,
                "queueLength": self.queue_length,
                "uptimeHours": self.uptime_hours,
            },
            "charts": {
                "jobsPerDay": [
                    {"date": p.date, "count": int(p.value)} for p in self.jobs_per_day
                ],
                "diskPerDay": [
                    {"date": p.date, "freeGB": p.value} for p in self.disk_per_day
                ],
            },
            "recentJobs": [job.to_dict() for job in self.recent_jobs],
        }
