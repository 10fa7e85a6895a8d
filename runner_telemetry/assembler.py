"""Compose the final DashboardSnapshot from the stage outputs."""

from datetime import datetime

from runner_telemetry.models import ChartPoint, DashboardSnapshot, JobStats, SystemMetrics


def assemble_snapshot(
    stats: JobStats,
    system: SystemMetrics,
    jobs_series: list[ChartPoint],
    disk_series: list[ChartPoint],
    captured_at: datetime,
) -> DashboardSnapshot:
    return DashboardSnapshot(
        status=system.status,
        timestamp=captured_at.isoformat(),
        total_jobs_today=stats.total_jobs_today,
        successful_jobs=stats.successful_jobs,
        failed_jobs=stats.failed_jobs,
        success_rate=stats.success_rate,
        disk_free_gb=system.disk_free_gb,
        disk_total_gb=system.disk_total_gb,
        avg_job_duration=stats.avg_job_duration,
        uptime_hours=system.uptime_hours,
        jobs_per_day=tuple(jobs_series),
        disk_per_day=tuple(disk_series),
        recent_jobs=tuple(stats.recent_jobs),
    )
