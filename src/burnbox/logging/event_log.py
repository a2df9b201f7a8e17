# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

"""Append-only JSONL audit log with durable writes.

A write goes to ``<log>.pending`` first, then to the log itself, then the
pending file is unlinked. Opening a log replays a leftover pending entry
unless the log already ends with it.
"""

import contextlib
import json
import os
from pathlib import Path
from types import TracebackType
from typing import Any

from burnbox import now_iso
from burnbox.persistence import fsync_dir, full_write

_APPEND = os.O_WRONLY | os.O_CREAT | os.O_APPEND


def _write_durable(path: Path, data: bytes, flags: int) -> None:
    """Open, write everything, fsync, close."""
    fd = os.open(path, flags, 0o644)
    try:
        full_write(fd, data)
        os.fsync(fd)
    finally:
        os.close(fd)


def _ends_with(path: Path, tail: bytes) -> bool:
    if not path.exists() or path.stat().st_size < len(tail):
        return False
    with path.open("rb") as f:
        f.seek(-len(tail), os.SEEK_END)
        return f.read() == tail


def _trim_partial_line(path: Path) -> None:
    """Cut the log back to its last newline. Complete logs are untouched."""
    if not path.exists():
        return
    content = path.read_bytes()
    if not content or content.endswith(b"\n"):
        return
    os.truncate(path, content.rfind(b"\n") + 1)
    fd = os.open(path, os.O_WRONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


class EventLog:
    """Durable request log for one contract.

    ``context`` fields are merged into every entry but never override
    ``ts`` or ``event``.
    """

    def __init__(self, path: Path, context: dict[str, str] | None = None) -> None:
        self._path = path
        self._pending = path.with_suffix(".pending")
        self._context = context or {}
        self._fd: int | None = None

    @property
    def path(self) -> Path:
        return self._path

    def open(self) -> None:
        """Replay any interrupted write, then open for appending."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._replay_pending()
        self._fd = os.open(self._path, _APPEND, 0o644)
        fsync_dir(self._path.parent)

    def close(self) -> None:
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None

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

    def log(self, event: str, data: dict[str, Any] | None = None) -> None:
        """Append one entry. Durable on return."""
        if self._fd is None:
            msg = "EventLog not open"
            raise RuntimeError(msg)
        entry: dict[str, Any] = {**self._context, "ts": now_iso(), "event": event}
        if data is not None:
            entry["data"] = data
        line = (json.dumps(entry, separators=(",", ":")) + "\n").encode()
        _write_durable(self._pending, line, os.O_WRONLY | os.O_CREAT | os.O_TRUNC)
        full_write(self._fd, line)
        os.fsync(self._fd)
        self._drop_pending()

    def _replay_pending(self) -> None:
        if not self._pending.exists():
            return
        line = self._pending.read_bytes()
        if line:
            _trim_partial_line(self._path)
            if not _ends_with(self._path, line):
                _write_durable(self._path, line, _APPEND)
        self._drop_pending()

    def _drop_pending(self) -> None:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(self._pending)


def read_log(path: Path) -> list[dict[str, Any]]:
    """Parse every complete entry of a JSONL log. Missing file reads as empty.

    Parsing stops at the first line that is not valid JSON, which is where a
    crash mid-append leaves off.
    """
    if not path.exists():
        return []
    entries: list[dict[str, Any]] = []
    for line in path.read_bytes().split(b"\n"):
        if not line:
            continue
        try:
            entries.append(json.loads(line))
        except json.JSONDecodeError:
            break
    return entries


__all__ = ["EventLog", "read_log"]
