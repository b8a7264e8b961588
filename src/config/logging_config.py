# src/config/logging_config.py

"""Logging for the umars_hands storefront.

Every launch writes ``logs/run_YYYYmmdd_HHMMSS.log`` with the whole
``umars_hands.*`` tree at DEBUG.  The console only receives records at
``Settings.CONSOLE_LOG_LEVEL`` and above: on stderr for headless
commands, or through Textual's devtools log while the TUI owns the
terminal.  Older run logs beyond ``Settings.LOG_RETENTION`` are pruned.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from textual.logging import TextualHandler

from src.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(threadName)s | "
    "%(module)s:%(lineno)d | %(message)s"
)

_CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _prune_old_logs(logs_dir: Path, keep: int) -> int:
    """Delete all but the newest *keep* run logs. Returns how many went."""
    if keep <= 0:
        return 0
    runs = sorted(logs_dir.glob("run_*.log"))
    stale = runs[:-keep]
    for path in stale:
        path.unlink(missing_ok=True)
    return len(stale)


def setup_logging(tui: bool = False) -> Path:
    """Configure the ``umars_hands`` logger for this run.

    Args:
        tui: Route console records to Textual instead of stderr, so
            warnings do not draw over the interface.

    Returns:
        The path of this run's log file.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    log_file = logs_dir / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    root_logger = logging.getLogger("umars_hands")
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls (tests, re-entry) keep the first configuration
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler: logging.Handler = (
        TextualHandler() if tui else logging.StreamHandler(sys.stderr)
    )
    console_handler.setLevel(Settings.CONSOLE_LOG_LEVEL)
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    pruned = _prune_old_logs(logs_dir, Settings.LOG_RETENTION)
    root_logger.info(
        "Logging to %s (%d old run logs pruned)", log_file, pruned,
    )
    return log_file
