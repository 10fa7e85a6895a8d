"""Configuration: frozen dataclass from env vars, optional YAML file, then CLI overrides."""

import logging
import os
import sys
from dataclasses import dataclass, field, fields, replace

import yaml

logger = logging.getLogger(__name__)


def _default_install_dir() -> str:
    if sys.platform.startswith("win"):
        return "C:\\actions-runner"
    return "/opt/actions-runner"


def _default_disk_path() -> str:
    if sys.platform.startswith("win"):
        return "C:\\"
    return "/"


def _parse_list(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class Config:
    log_dir: str | None = None
    runner_root: str | None = None
    install_dir: str = field(default_factory=_default_install_dir)
    window_days: int = 7
    worker_log_glob: str = "Worker_*.log"
    max_file_bytes: int = 16 * 1024 * 1024
    max_file_read_seconds: float = 5.0
    disk_path: str = field(default_factory=_default_disk_path)
    service_pattern: str = "actions.runner.*"
    listener_processes: tuple[str, ...] = ("Runner.Listener",)
    worker_processes: tuple[str, ...] = ("Runner.Worker",)
    chart_date_format: str | None = None   # None: en-US "Oct 9" labels
    dashboard_host: str = "0.0.0.0"
    dashboard_port: int = 8080

    def __post_init__(self):
        if self.window_days < 1:
            raise ValueError(f"window_days must be >= 1, got {self.window_days}")
        if self.max_file_bytes < 1:
            raise ValueError(f"max_file_bytes must be >= 1, got {self.max_file_bytes}")
        if self.max_file_read_seconds <= 0:
            raise ValueError(
                f"max_file_read_seconds must be > 0, got {self.max_file_read_seconds}"
            )


def load_yaml_config(path: str | None) -> dict:
    """Load overrides from a YAML file. Returns empty dict if no path or no file."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as e:
        logger.warning("Invalid YAML in %s (%s), using defaults", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, using defaults", path)
        return {}
    logger.info("Loaded YAML config from %s", path)
    return data


_NUMERIC_FIELDS = {
    "window_days": int,
    "max_file_bytes": int,
    "max_file_read_seconds": float,
    "dashboard_port": int,
}


def _from_yaml(yaml_data: dict) -> dict:
    known = {f.name for f in fields(Config)}
    overrides = {}
    for key, value in yaml_data.items():
        if key not in known:
            logger.warning("Ignoring unknown config key: %s", key)
            continue
        if key in ("listener_processes", "worker_processes") and isinstance(value, list):
            value = tuple(str(v) for v in value)
        elif key in _NUMERIC_FIELDS:
            try:
                value = _NUMERIC_FIELDS[key](value)
            except (TypeError, ValueError):
                raise ValueError(f"{key} must be a number, got {value!r}") from None
        overrides[key] = value
    return overrides


def load_config(yaml_path: str | None = None, **overrides) -> Config:
    """Build Config from env vars, then YAML, then explicit (CLI) overrides.

    ``None`` values in *overrides* are ignored so argparse defaults can be
    passed straight through.
    """
    config = Config(
        log_dir=os.environ.get("RUNNER_LOG_DIR") or None,
        runner_root=os.environ.get("RUNNER_ROOT") or None,
        install_dir=os.environ.get("RUNNER_INSTALL_DIR", _default_install_dir()),
        window_days=int(os.environ.get("WINDOW_DAYS", Config.window_days)),
        worker_log_glob=os.environ.get("WORKER_LOG_GLOB", Config.worker_log_glob),
        max_file_bytes=int(os.environ.get("MAX_FILE_BYTES", Config.max_file_bytes)),
        max_file_read_seconds=float(
            os.environ.get("MAX_FILE_READ_SECONDS", Config.max_file_read_seconds)
        ),
        disk_path=os.environ.get("DISK_PATH", _default_disk_path()),
        service_pattern=os.environ.get("SERVICE_PATTERN", Config.service_pattern),
        listener_processes=_parse_list(
            os.environ.get("LISTENER_PROCESSES", ",".join(Config.listener_processes))
        ),
        worker_processes=_parse_list(
            os.environ.get("WORKER_PROCESSES", ",".join(Config.worker_processes))
        ),
        chart_date_format=os.environ.get("CHART_DATE_FORMAT") or None,
        dashboard_host=os.environ.get("DASHBOARD_HOST", Config.dashboard_host),
        dashboard_port=int(os.environ.get("DASHBOARD_PORT", Config.dashboard_port)),
    )

    yaml_path = yaml_path or os.environ.get("CONFIG_PATH")
    yaml_overrides = _from_yaml(load_yaml_config(yaml_path))
    if yaml_overrides:
        config = replace(config, **yaml_overrides)

    cli_overrides = {k: v for k, v in overrides.items() if v is not None}
    if cli_overrides:
        config = replace(config, **cli_overrides)
    return config
