from __future__ import annotations

import logging
from contextlib import suppress
from logging.handlers import RotatingFileHandler
from pathlib import Path

from htmlfy.env import DISABLE_FILE_LOG_ENV, LOG_DIR_ENV, LOG_LEVEL_ENV, env_path, env_str, env_truthy

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3

_MARK = "_htmlfy_file_log"


def log_dir_from_env(default: Path) -> Path:
    return env_path(LOG_DIR_ENV, default)


def _attached_log_file(root: logging.Logger, log_file: Path) -> Path | None:
    for h in root.handlers:
        base = getattr(h, "baseFilename", None)
        if getattr(h, _MARK, False):
            return Path(str(base)).resolve() if base else log_file
        if base and Path(str(base)).resolve() == log_file:
            return log_file
    return None


def _rotating_handler(log_file: Path) -> RotatingFileHandler:
    handler = RotatingFileHandler(log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
    setattr(handler, _MARK, True)
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def ensure_file_logging(*, log_dir: Path, filename: str = "htmlfy.log") -> Path:
    """Add one rotating log file to the root logger and return its path.

    Calling it again is a no-op. `HTMLFY_DISABLE_FILE_LOG` skips the handler
    (and the directory); `HTMLFY_LOG_LEVEL` sets the root level.
    """

    log_file = (log_dir / filename).resolve()
    if env_truthy(DISABLE_FILE_LOG_ENV):
        return log_file

    root = logging.getLogger()
    attached = _attached_log_file(root, log_file)
    if attached is not None:
        return attached

    log_dir.mkdir(parents=True, exist_ok=True)
    root.addHandler(_rotating_handler(log_file))

    level = env_str(LOG_LEVEL_ENV)
    if level:
        # Unknown level names are ignored.
        with suppress(ValueError):
            root.setLevel(level.upper())

    return log_file
