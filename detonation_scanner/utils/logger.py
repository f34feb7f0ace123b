"""Logging for the scanner.

Importing this module gives a console logger at ``settings.LOG_LEVEL``.
File logging is opt-in: the server calls ``enable_file_logging()`` on
startup, which writes a timestamped per-run file plus a stable
``detonation_scanner.log`` under ``settings.LOGS_DIR``.  Library and test
use never touch the logs directory unless they ask to.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from detonation_scanner.config import settings

LOGGER_NAME = "detonation_scanner"
RUN_LOG_PATTERN = "detonation_scanner_*.log"
STABLE_LOG_NAME = "detonation_scanner.log"
MAX_RUN_LOGS = 10

_FORMAT = logging.Formatter(
    "[%(asctime)s] %(levelname)-8s %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def parse_level(value: str | int | None, default: int = logging.INFO) -> int:
    """'debug' / 'WARNING' / 10 → logging level.  Unknown names fall back to ``default``."""
    if isinstance(value, int):
        return value
    if not value:
        return default
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else default


def _is_file_handler(h: logging.Handler) -> bool:
    return isinstance(h, logging.FileHandler)


def _console_handler(log: logging.Logger) -> logging.Handler | None:
    for h in log.handlers:
        if isinstance(h, logging.StreamHandler) and not _is_file_handler(h):
            return h
    return None


def prune_run_logs(logs_dir: Path, keep: int = MAX_RUN_LOGS) -> list[Path]:
    """Delete the oldest per-run files beyond ``keep``.  Returns what was removed."""
    run_logs = sorted(logs_dir.glob(RUN_LOG_PATTERN), key=lambda p: p.stat().st_mtime)
    removed: list[Path] = []
    for old in run_logs[: max(len(run_logs) - keep, 0)]:
        try:
            old.unlink()
            removed.append(old)
        except OSError as e:
            logging.getLogger(LOGGER_NAME).debug("Could not prune %s: %s", old, e)
    return removed


def set_console_level(level: str | int) -> None:
    handler = _console_handler(logger)
    if handler is not None:
        handler.setLevel(parse_level(level))


def enable_file_logging(logs_dir: Path | None = None) -> Path:
    """Attach per-run and stable file handlers under ``logs_dir``.

    Calling again with the same directory is a no-op; a different
    directory replaces the previous file handlers.  Returns the per-run
    log path.
    """
    logs_dir = Path(logs_dir or settings.LOGS_DIR)
    current = [h for h in logger.handlers if _is_file_handler(h)]
    target = logs_dir.resolve()
    if current and all(Path(h.baseFilename).parent.resolve() == target for h in current):
        run = next(
            (h for h in current if Path(h.baseFilename).name != STABLE_LOG_NAME),
            current[0],
        )
        return Path(run.baseFilename)
    disable_file_logging()

    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    run_log = logs_dir / f"detonation_scanner_{timestamp}.log"

    run_h = logging.FileHandler(run_log, encoding="utf-8")
    run_h.setLevel(logging.DEBUG)
    run_h.setFormatter(_FORMAT)
    logger.addHandler(run_h)

    stable = logs_dir / STABLE_LOG_NAME
    try:
        stable_h = logging.FileHandler(stable, mode="w", encoding="utf-8")
    except OSError as e:
        logger.warning("Stable log %s unavailable: %s", stable, e)
    else:
        stable_h.setLevel(logging.DEBUG)
        stable_h.setFormatter(_FORMAT)
        logger.addHandler(stable_h)

    prune_run_logs(logs_dir)
    logger.info("Log started: %s", run_log)
    return run_log


def disable_file_logging() -> None:
    for h in [h for h in logger.handlers if _is_file_handler(h)]:
        logger.removeHandler(h)
        h.close()


def _setup_logger(name: str = LOGGER_NAME) -> logging.Logger:
    log = logging.getLogger(name)
    log.setLevel(logging.DEBUG)

    # Reimport keeps the existing handlers
    if log.handlers:
        return log

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(parse_level(settings.LOG_LEVEL))
    console.setFormatter(_FORMAT)
    log.addHandler(console)
    return log


logger = _setup_logger()
