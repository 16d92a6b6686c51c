# src/currex/shared/logging_conf.py
"""
Logging Configuration - Handlers for the Refresh Process

Every currex module logs through ``logging.getLogger(__name__)``. The host
process calls setup_logging() once to attach a stdout handler, a rotating
file handler, or both.

Files that USE this module:
- currex.app (main() configures logging from settings)

Files that this module USES:
- None (pure configuration module)
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "currex.log"


def _resolve_log_path(
    log_file: Optional[Union[str, Path]],
    log_dir: Optional[Union[str, Path]],
) -> Optional[Path]:
    """log_dir wins over log_file; the parent directory is created."""
    if log_dir:
        path = Path(log_dir) / LOG_FILE_NAME
    elif log_file:
        path = Path(log_file)
    else:
        return None
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def setup_logging(
    level=logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    log_dir: Optional[Union[str, Path]] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    log_to_stdout: Optional[bool] = None,
) -> None:
    """
    Attach handlers to the root logger.

    Args:
        level: Root logging level
        log_file: Rotating log file path
        log_dir: Directory for currex.log (takes precedence over log_file)
        max_bytes: Rotation size of the log file
        backup_count: Rotated files to keep
        log_to_stdout: Stdout handler on/off; None reads CURREX_LOG_STDOUT
    """
    if log_to_stdout is None:
        log_to_stdout = os.environ.get("CURREX_LOG_STDOUT", "true").lower() == "true"

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    handlers: List[logging.Handler] = []

    if log_to_stdout:
        handlers.append(logging.StreamHandler(sys.stdout))

    log_path = _resolve_log_path(log_file, log_dir)
    if log_path is not None:
        handlers.append(RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        ))

    # Never leave the process silent
    if not handlers:
        handlers.append(logging.StreamHandler(sys.stdout))

    for handler in handlers:
        handler.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=handlers)

    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))

    logging.getLogger(__name__).info(
        "Logging configured: stdout=%s file=%s level=%s",
        log_to_stdout, log_path, logging.getLevelName(level),
    )
