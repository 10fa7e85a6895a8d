"""Fixed seven-day chart series for job counts and free disk space."""

from abc import ABC, abstractmethod
from datetime import date, timedelta

from runner_telemetry.models import CHART_DAYS, ChartPoint, DailyBucket

# Fixed English labels, independent of the process locale
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def format_chart_date(day: date, date_format: str | None = None) -> str:
    """Label for *day*: `Oct 9` by default, or `strftime(date_format)`."""
    if date_format:
        return day.strftime(date_format)
    return f"{MONTH_ABBREVIATIONS[day.month - 1]} {day.day}"


def chart_days(today: date, days: int = CHART_DAYS) -> list[date]:
    """The trailing *days* calendar days, oldest first, ending on *today*."""
    return [today - timedelta(days=i) for i in range(days - 1, -1, -1)]


class DiskHistorySource(ABC):
    @abstractmethod
    def free_gb(self, day: date, days_ago: int, current_free_gb: float) -> float:
        """Free space in GB on *day*, which is *days_ago* days before today."""


class SynthesizedDiskHistory(DiskHistorySource):
    """Approximation, not measured history.

    No disk history is recorded, so past days are extrapolated as
    ``current + 0.5 GB per day ago``, which trends down to today's reading.
    """

    GB_PER_DAY = 0.5

    def free_gb(self, day: date, days_ago: int, current_free_gb: float) -> float:
        if days_ago <= 0:
            return current_free_gb
        return max(current_free_gb + self.GB_PER_DAY * days_ago, 0.0)


def build_jobs_series(
    buckets: dict[date, DailyBucket],
    today: date,
    date_format: str | None = None,
) -> list[ChartPoint]:
    """Completed jobs per day, zero for days without a bucket."""
    points = []
    for day in chart_days(today):
        bucket = buckets.get(day)
        points.append(ChartPoint(
            date=format_chart_date(day, date_format),
            value=bucket.total if bucket else 0,
        ))
    return points


def build_disk_series(
    current_free_gb: float,
    today: date,
    source: DiskHistorySource | None = None,
    date_format: str | None = None,
) -> list[ChartPoint]:
    source = source or SynthesizedDiskHistory()
    points = []
    for day in chart_days(today):
        days_ago = (today - day).days
        points.append(ChartPoint(
            date=format_chart_date(day, date_format),
            value=round(source.free_gb(day, days_ago, current_free_gb), 2),
        ))
    return points
