"""Resolve the runner's diagnostic log directory from an ordered list of candidates."""

import logging
import os

from runner_telemetry.config import Config

logger = logging.getLogger(__name__)

DIAG_DIRNAME = "_diag"


def candidate_dirs(config: Config) -> list[str]:
    """Return candidate log directories in priority order.

    1. explicit override
    2. ``$RUNNER_ROOT/_diag``
    3. conventional install path
    4. ``~/actions-runner/_diag``
    5. ``./_diag``
    """
    candidates = []
    if config.log_dir:
        candidates.append(config.log_dir)
    if config.runner_root:
        candidates.append(os.path.join(config.runner_root, DIAG_DIRNAME))
    candidates.append(os.path.join(config.install_dir, DIAG_DIRNAME))
    candidates.append(os.path.join(os.path.expanduser("~"), "actions-runner", DIAG_DIRNAME))
    candidates.append(os.path.join(os.getcwd(), DIAG_DIRNAME))
    return candidates


def locate_log_dir(candidates: list[str]) -> str | None:
    """Return the first candidate that is an existing directory, or None."""
    for path in candidates:
        if os.path.isdir(path):
            logger.debug("Using log directory %s", path)
            return path
    logger.info("No runner log directory found (tried %d location(s))", len(candidates))
    return None
