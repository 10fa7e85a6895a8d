import os
from datetime import date, datetime, time, timezone

import pytest

from runner_telemetry.config import Config
from runner_telemetry.probe import ServiceInfo, StaticProbe

GIB = 1024 ** 3


def log_ts(dt: datetime) -> str:
    """Bracketed UTC timestamp prefix as the runner writes it."""
    return dt.astimezone(timezone.utc).strftime("[%Y-%m-%d %H:%M:%SZ INFO Worker]")


def noon_days_ago(days: int) -> float:
    """Unix time of local noon *days* calendar days before today."""
    day = date.fromordinal(date.today().toordinal() - days)
    return datetime.combine(day, time(12, 0)).astimezone().timestamp()


@pytest.fixture
def log_dir(tmp_path):
    d = tmp_path / "_diag"
    d.mkdir()
    return str(d)


@pytest.fixture
def write_log(log_dir):
    """Factory: write lines to a worker log, optionally pinning its mtime."""

    def _write(name, lines, mtime=None):
        path = os.path.join(log_dir, name)
        with open(path, "w", encoding="utf-8") as f:
            for line in lines:
                f.write(line + "\n")
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _write


@pytest.fixture
def config(log_dir, tmp_path):
    return Config(log_dir=log_dir, install_dir=str(tmp_path / "no-install"))


@pytest.fixture
def probe():
    return StaticProbe(
        services=[ServiceInfo(name="actions.runner.acme.build-01", running=True)],
        processes=["Runner.Listener"],
        disk=(100 * GIB, 250 * GIB),
        boot_time=datetime.now().timestamp() - 5 * 3600,
    )
