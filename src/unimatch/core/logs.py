from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def get_logger(
    name: str = "unimatch", level: str = "INFO", log_file: Optional[str] = None
) -> logging.Logger:
    """
    Console (and optional file) logger. Handlers are attached once per logger name,
    so repeated calls (tests, app rebuilds) don't duplicate output.
    """
    log = logging.getLogger(name)
    if log.handlers:
        return log
    lvl = getattr(logging, level.upper(), logging.INFO)
    log.setLevel(lvl)
    fmt = logging.Formatter(LOG_FORMAT)
    # Console
    ch = logging.StreamHandler()
    ch.setLevel(lvl)
    ch.setFormatter(fmt)
    log.addHandler(ch)
    # File
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file)
        fh.setLevel(lvl)
        fh.setFormatter(fmt)
        log.addHandler(fh)
    return log
