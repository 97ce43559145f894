"""
Logging configuration for the Chapter Registry API.

``setup_logging`` attaches a console handler and, when ``LOG_FILE`` is
set, a file handler to the root logger.  Level and file default to the
values in ``settings``.  Handlers installed here are named so that a
second call (``create_app`` runs once per test) leaves them in place
instead of duplicating output.
"""

import logging
from pathlib import Path
from typing import Optional

from .config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
HANDLER_PREFIX = "chapter_registry."


def _numeric_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def _installed(logger: logging.Logger) -> bool:
    return any((h.get_name() or "").startswith(HANDLER_PREFIX) for h in logger.handlers)


def setup_logging(level: Optional[str] = None, logfile: Optional[str] = None) -> None:
    """Configure the root logger.

    Parameters
    ----------
    level : Optional[str]
        Level name such as ``"DEBUG"``; case insensitive, unknown names
        fall back to ``INFO``.  Defaults to ``settings.log_level``.
    logfile : Optional[str]
        File to append log records to.  Defaults to ``settings.log_file``;
        an empty value disables file logging.  Missing parent
        directories are created.
    """
    root = logging.getLogger()
    root.setLevel(_numeric_level(level or settings.log_level))
    if _installed(root):
        return

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.set_name(HANDLER_PREFIX + "console")
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    logfile = logfile if logfile is not None else settings.log_file
    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.set_name(HANDLER_PREFIX + "file")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
