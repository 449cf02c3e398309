# disasterwatch/utils/log.py
# Console logging shared by every disasterwatch module.
# get_logger(name) configures the root logger once; LOG_TO_FILE=true adds a
# rotating file under LOG_DIR.

from __future__ import annotations
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

_DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"
_LOG_FILE = "disasterwatch.log"

_INITIALIZED = False


def _init_root(level: str | None = None) -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return

    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    lvl = getattr(logging, name, None)
    if not isinstance(lvl, int):
        lvl = logging.INFO

    root = logging.getLogger()
    root.setLevel(lvl)

    for h in list(root.handlers):
        root.removeHandler(h)

    formatter = logging.Formatter(_DEFAULT_FMT, datefmt=_DEFAULT_DATEFMT)

    ch = logging.StreamHandler()
    ch.setLevel(lvl)
    ch.setFormatter(formatter)
    root.addHandler(ch)

    if os.getenv("LOG_TO_FILE", "false").lower() == "true":
        log_dir = Path(os.getenv("LOG_DIR", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            log_dir / _LOG_FILE,
            maxBytes=int(os.getenv("LOG_MAX_BYTES", "1048576")),
            backupCount=int(os.getenv("LOG_BACKUPS", "5")),
        )
        fh.setLevel(lvl)
        fh.setFormatter(formatter)
        root.addHandler(fh)

    _INITIALIZED = True


def setup_logging(verbose: bool = False) -> None:
    """Force (re)configuration, e.g. when the CLI asks for --verbose."""
    global _INITIALIZED
    _INITIALIZED = False
    _init_root("DEBUG" if verbose else None)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger with consistent formatting/level.

    Usage:
        from .utils.log import get_logger
        logger = get_logger("disasterwatch")
    """
    _init_root()
    return logging.getLogger(name)
