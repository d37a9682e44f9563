# SPDX-FileCopyrightText: 2026 atomicwrite authors
#
# SPDX-License-Identifier: Apache-2.0

"""Append-only JSONL audit log of staged writes."""

import json
import logging
import os
import threading
from datetime import UTC, datetime
from pathlib import Path
from types import TracebackType
from typing import Any

from atomicwrite.persistence import fsync_dir, full_write

_log = logging.getLogger(__name__)


def now_iso() -> str:
    return datetime.now(UTC).isoformat()


class EventLog:
    """Structured event log shared by any number of writers.

    Each entry is a single O_APPEND write followed by fsync, so it is
    durable on return from log(). A crash mid-append can leave a torn
    final line; read_log() drops it.
    """

    def __init__(self, path: Path, context: dict[str, str] | None = None) -> None:
        self._path = path
        self._context = context or {}
        self._fd: int | None = None
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def open(self) -> None:
        """Open (creating if needed) the log file for appending."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._fd = os.open(
            self._path,
            os.O_WRONLY | os.O_CREAT | os.O_APPEND,
            0o644,
        )
        # Fsync the directory so the new file's dir entry is durable.
        fsync_dir(self._path.parent)

    def __enter__(self) -> "EventLog":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def log(
        self,
        event: str,
        data: dict[str, Any] | None = None,
        context: dict[str, str] | None = None,
    ) -> None:
        """Append one event. Durable on return.

        `context` is merged over the log-wide context for this entry only.
        """
        line = self._serialize(event, data, context)
        with self._lock:
            if self._fd is None:
                msg = "EventLog not open"
                raise RuntimeError(msg)
            full_write(self._fd, line)
            os.fsync(self._fd)

    def close(self) -> None:
        """Close the file descriptor."""
        with self._lock:
            if self._fd is not None:
                os.close(self._fd)
                self._fd = None

    def _serialize(
        self,
        event: str,
        data: dict[str, Any] | None,
        context: dict[str, str] | None,
    ) -> bytes:
        entry: dict[str, Any] = {
            **self._context,
            **(context or {}),
            "ts": now_iso(),
            "event": event,
        }
        if data is not None:
            entry["data"] = data
        return (json.dumps(entry, separators=(",", ":")) + "\n").encode()


def read_log(path: Path) -> list[dict[str, Any]]:
    """Parse a log file. Missing file reads as empty; a torn tail is skipped."""
    if not path.exists():
        return []
    content = path.read_bytes()
    entries: list[dict[str, Any]] = []
    lines = content.split(b"\n")
    # A well-formed log ends with b"\n", leaving an empty last element.
    complete, tail = lines[:-1], lines[-1]
    if tail:
        _log.warning("dropping torn trailing entry in %s", path)
    for line in complete:
        if not line.strip():
            continue
        entries.append(json.loads(line))
    return entries


__all__ = ["EventLog", "now_iso", "read_log"]
