# Shared utilities. Explicit re-exports for a clean public API.

from .io import (
    atomic_write_bytes as atomic_write_bytes,
    ensure_dir as ensure_dir,
    load_yaml as load_yaml,
    save_json as save_json,
    save_yaml as save_yaml,
)
from .logs import get_logger as get_logger
from .timers import Timer as Timer, timed as timed

__all__ = [
    "atomic_write_bytes",
    "ensure_dir",
    "load_yaml",
    "save_json",
    "save_yaml",
    "get_logger",
    "Timer",
    "timed",
]
