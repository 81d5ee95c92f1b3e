# File: crudgen/utils.py
"""
NexaFlow CrudGen - Utility Functions & Helpers
===============================================
File I/O, locking and timing helpers shared by the generator and the
navigation patcher.

- Writes go through a temporary file in the destination directory followed
  by a rename, so a crash never leaves a half-written artifact or a
  truncated navigation file behind.
- Reads and writes preserve the file's bytes exactly (no newline
  translation); the patcher relies on untouched lines staying identical.
- ``path_lock`` hands out one ``threading.Lock`` per resolved path so that
  concurrent requests serialise their edits to the same file.
"""

from __future__ import annotations

import contextlib
import logging
import os
import shutil
import tempfile
import threading
import time
from pathlib import Path
from typing import Dict, Iterator, List, Optional

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.utils")


# ---------------------------------------------------------------------------
# File I/O helpers
# ---------------------------------------------------------------------------


def ensure_directory(path: Path) -> None:
    """Create directory (and parents) if it doesn't exist."""
    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)


def write_file(path: Path, content: str, atomic: bool = True) -> int:
    """
    Write *content* to *path* as UTF-8, creating parent directories.

    When *atomic* is True, writes to a temporary file first then renames.

    Returns the number of bytes written.
    """
    ensure_directory(path.parent)

    encoded: bytes = content.encode("utf-8")
    byte_count: int = len(encoded)

    if atomic:
        fd: int
        tmp_path: str
        fd, tmp_path = tempfile.mkstemp(
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(encoded)
            if path.exists():
                shutil.copymode(str(path), tmp_path)
            shutil.move(tmp_path, str(path))
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
    else:
        path.write_bytes(encoded)

    logger.debug("Wrote %d bytes to %s", byte_count, path)
    return byte_count


def read_file(path: Path) -> str:
    """Read a UTF-8 file without newline translation."""
    with open(path, "r", encoding="utf-8", newline="") as fh:
        return fh.read()


def remove_path(path: Path) -> None:
    """Delete a file or a whole directory tree."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()
    logger.debug("Removed %s", path)


# ---------------------------------------------------------------------------
# Per-path locking
# ---------------------------------------------------------------------------

_PATH_LOCKS: Dict[str, threading.Lock] = {}
_PATH_LOCKS_GUARD: threading.Lock = threading.Lock()


@contextlib.contextmanager
def path_lock(path: Path) -> Iterator[None]:
    """
    Hold the process-wide lock for *path* for the duration of the block.

    Locks are keyed on the resolved absolute path, so ``a/../b.ts`` and
    ``b.ts`` share one lock.
    """
    key: str = str(Path(path).resolve())
    with _PATH_LOCKS_GUARD:
        lock: threading.Lock = _PATH_LOCKS.setdefault(key, threading.Lock())
    with lock:
        yield


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Simple context-manager timer for profiling pipeline steps.

    Usage:
        with Timer("render OrderItem") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.info(
            "Timer [%s]: %.4f seconds",
            self.label,
            self.elapsed,
        )

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ensure_directory",
    "write_file",
    "read_file",
    "remove_path",
    "path_lock",
    "Timer",
]

logger.debug("crudgen.utils loaded (%d public symbols).", len(__all__))
