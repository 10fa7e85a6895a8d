"""Runner status, disk and uptime probes, independent of log parsing.

``SystemProbe`` is the capability the engine needs from the host.
``PsutilProbe`` is the real implementation; ``StaticProbe`` returns canned
data for tests and for hosts where probing is not wanted.
"""

import fnmatch
import logging
import subprocess
import sys
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

import psutil

from runner_telemetry.config import Config
from runner_telemetry.models import RunnerStatus, SystemMetrics
from runner_telemetry.session import TelemetrySession

logger = logging.getLogger(__name__)

GIB = 1024 ** 3


@dataclass(frozen=True)
class ServiceInfo:
    name: str
    running: bool


class SystemProbe(ABC):
    @abstractmethod
    def list_services(self, pattern: str) -> list[ServiceInfo]:
        """Services whose name matches the glob *pattern*."""

    @abstractmethod
    def list_processes(self) -> list[str]:
        """Names of the running processes."""

    @abstractmethod
    def disk_usage(self, path: str) -> tuple[int, int]:
        """(free_bytes, total_bytes) of the volume holding *path*."""

    @abstractmethod
    def boot_time(self) -> float:
        """Host boot time as a Unix timestamp."""


class PsutilProbe(SystemProbe):
    def __init__(self, command_timeout: float = 10.0):
        self._timeout = command_timeout

    def list_services(self, pattern: str) -> list[ServiceInfo]:
        if sys.platform.startswith("win"):
            return self._windows_services(pattern)
        if sys.platform == "darwin":
            return self._launchd_services(pattern)
        return self._systemd_services(pattern)

    def _windows_services(self, pattern: str) -> list[ServiceInfo]:
        services = []
        for svc in psutil.win_service_iter():
            name = svc.name()
            if fnmatch.fnmatch(name.lower(), pattern.lower()):
                services.append(ServiceInfo(name=name, running=svc.status() == "running"))
        return services

    def _systemd_services(self, pattern: str) -> list[ServiceInfo]:
        output = self._run([
            "systemctl", "list-units", "--type=service", "--all",
            "--no-legend", "--plain", "--no-pager", pattern,
        ])
        services = []
        for line in output.splitlines():
            # UNIT LOAD ACTIVE SUB DESCRIPTION...
            parts = line.split()
            if len(parts) < 4:
                continue
            name = parts[0]
            if name.endswith(".service"):
                name = name[: -len(".service")]
            if fnmatch.fnmatch(name, pattern):
                services.append(ServiceInfo(name=name, running=parts[3] == "running"))
        return services

    def _launchd_services(self, pattern: str) -> list[ServiceInfo]:
        output = self._run(["launchctl", "list"])
        services = []
        for line in output.splitlines()[1:]:
            # PID STATUS LABEL
            parts = line.split(None, 2)
            if len(parts) < 3:
                continue
            pid, _, label = parts
            if fnmatch.fnmatch(label, pattern):
                services.append(ServiceInfo(name=label, running=pid != "-"))
        return services

    def _run(self, cmd: list[str]) -> str:
        try:
            proc = subprocess.run(
                cmd, capture_output=True, text=True, timeout=self._timeout, check=False,
            )
        except FileNotFoundError:
            logger.debug("%s not available, assuming no runner service", cmd[0])
            return ""
        return proc.stdout or ""

    def list_processes(self) -> list[str]:
        names = []
        for proc in psutil.process_iter(["name"]):
            name = proc.info.get("name")
            if name:
                names.append(name)
        return names

    def disk_usage(self, path: str) -> tuple[int, int]:
        usage = psutil.disk_usage(path)
        return usage.free, usage.total

    def boot_time(self) -> float:
        return psutil.boot_time()


class StaticProbe(SystemProbe):
    """Canned probe results. ``fail=True`` makes every call raise OSError."""

    def __init__(
        self,
        services: list[ServiceInfo] | None = None,
        processes: list[str] | None = None,
        disk: tuple[int, int] = (0, 0),
        boot_time: float | None = None,
        fail: bool = False,
    ):
        self._services = list(services or [])
        self._processes = list(processes or [])
        self._disk = disk
        self._boot_time = time.time() if boot_time is None else boot_time
        self._fail = fail

    def _check(self):
        if self._fail:
            raise OSError("probe unavailable")

    def list_services(self, pattern: str) -> list[ServiceInfo]:
        self._check()
        return [s for s in self._services if fnmatch.fnmatch(s.name, pattern)]

    def list_processes(self) -> list[str]:
        self._check()
        return list(self._processes)

    def disk_usage(self, path: str) -> tuple[int, int]:
        self._check()
        return self._disk

    def boot_time(self) -> float:
        self._check()
        return self._boot_time


def _normalize_process(name: str) -> str:
    name = name.lower()
    if name.endswith(".exe"):
        name = name[:-4]
    return name


def _any_running(processes: list[str], wanted: tuple[str, ...]) -> bool:
    wanted_names = {_normalize_process(w) for w in wanted}
    return any(_normalize_process(p) in wanted_names for p in processes)


def derive_status(
    services: list[ServiceInfo], processes: list[str], config: Config
) -> RunnerStatus:
    """Installed-and-stopped is OFFLINE; never installed falls through to IDLE."""
    if any(s.running for s in services):
        return RunnerStatus.ONLINE
    if services:
        return RunnerStatus.OFFLINE
    if _any_running(processes, config.listener_processes):
        return RunnerStatus.ONLINE
    if _any_running(processes, config.worker_processes):
        return RunnerStatus.ONLINE
    return RunnerStatus.IDLE


def _probe_failed(session: TelemetrySession | None, what: str, error: Exception):
    logger.warning("%s probe failed: %s", what, error)
    if session is not None:
        session.probe_failures += 1


def collect_system_metrics(
    probe: SystemProbe,
    config: Config,
    session: TelemetrySession | None = None,
    now: datetime | None = None,
) -> SystemMetrics:
    """Query *probe*; each failing subsystem reports OFFLINE/zero on its own."""
    now = now or datetime.now().astimezone()

    status = RunnerStatus.OFFLINE
    try:
        services = probe.list_services(config.service_pattern)
        processes = probe.list_processes()
        status = derive_status(services, processes, config)
    except Exception as e:
        _probe_failed(session, "Runner status", e)

    free_gb = total_gb = 0.0
    try:
        free, total = probe.disk_usage(config.disk_path)
        free_gb = round(free / GIB, 2)
        total_gb = round(total / GIB, 2)
    except Exception as e:
        _probe_failed(session, "Disk", e)

    uptime_hours = 0.0
    try:
        uptime_hours = round(max(0.0, now.timestamp() - probe.boot_time()) / 3600, 1)
    except Exception as e:
        _probe_failed(session, "Uptime", e)

    return SystemMetrics(
        status=status,
        disk_free_gb=free_gb,
        disk_total_gb=total_gb,
        uptime_hours=uptime_hours,
    )
