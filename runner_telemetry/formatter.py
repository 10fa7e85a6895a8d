"""Snapshot output formatters: JSON and a human-readable text summary."""

import json

from runner_telemetry.models import DashboardSnapshot

SUCCESS_RATE_TARGET = 85


def _signed(value: int) -> str:
    return f"+{value}" if value >= 0 else str(value)


def format_duration(seconds: int) -> str:
    minutes, secs = divmod(seconds, 60)
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def format_snapshot_json(snapshot: DashboardSnapshot) -> str:
    return json.dumps(snapshot.to_dict(), indent=2)


def format_snapshot_text(snapshot: DashboardSnapshot) -> str:
    """Human-readable snapshot summary."""
    lines = []
    lines.append(f"Runner status: {snapshot.status.value}")
    lines.append(f"Captured at:   {snapshot.timestamp}")
    lines.append("")

    yesterday = snapshot.jobs_per_day[-2].value if len(snapshot.jobs_per_day) > 1 else 0
    jobs_delta = snapshot.total_jobs_today - int(yesterday)
    rate_delta = snapshot.success_rate - SUCCESS_RATE_TARGET
    disk_pct = 0
    if snapshot.disk_total_gb > 0:
        disk_pct = round(snapshot.disk_free_gb / snapshot.disk_total_gb * 100)

    lines.append(
        f"Jobs today:    {snapshot.total_jobs_today} "
        f"({snapshot.successful_jobs} ok, {snapshot.failed_jobs} failed, "
        f"{_signed(jobs_delta)} from yesterday)"
    )
    lines.append(
        f"Success rate:  {snapshot.success_rate}% ({_signed(rate_delta)}% from target)"
    )
    lines.append(f"Avg duration:  {format_duration(snapshot.avg_job_duration)}")
    lines.append(
        f"Disk free:     {snapshot.disk_free_gb} / {snapshot.disk_total_gb} GB "
        f"({disk_pct}% available)"
    )
    lines.append(f"Uptime:        {snapshot.uptime_hours}h")
    lines.append(f"Queue length:  {snapshot.queue_length}")
    lines.append("")

    lines.append("Jobs per day:")
    for point in snapshot.jobs_per_day:
        lines.append(f"  {point.date:8s} {int(point.value)}")
    lines.append("")

    if snapshot.recent_jobs:
        lines.append(f"Recent jobs ({len(snapshot.recent_jobs)}):")
        for job in snapshot.recent_jobs:
            ts = job.timestamp.strftime("%Y-%m-%d %H:%M:%S")
            lines.append(
                f"  [{ts}] {job.status:7s} {job.name} ({format_duration(job.duration_seconds)})"
            )
    else:
        lines.append("No recent jobs.")

    return "\n".join(lines)
