# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

"""Durable key-value store backed by a single snapshot file."""

import base64
import binascii
import json
from pathlib import Path

from burnbox.errors import CorruptedStore
from burnbox.persistence import atomic_write
from burnbox.store.base import WriteBatch
from burnbox.store.memory import MemoryStore


class FileStore(MemoryStore):
    """Whole keyspace kept in memory, persisted as one JSON snapshot.

    Every apply() rewrites the snapshot atomically, so a batch is either
    fully on disk or not at all. Direct set()/remove() also persist
    immediately, one write each.
    """

    def __init__(self, path: Path) -> None:
        super().__init__(self._load(path))
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def set(self, key: bytes, value: bytes) -> None:
        self.apply({key: value})

    def remove(self, key: bytes) -> None:
        self.apply({key: None})

    def apply(self, writes: WriteBatch) -> None:
        """Apply a batch, then persist. Memory is untouched if the write fails."""
        staged = MemoryStore(self.snapshot())
        staged.apply(writes)
        atomic_write(self._path, self._serialize(staged.snapshot()))
        self._data = staged.snapshot()

    @staticmethod
    def _serialize(data: dict[bytes, bytes]) -> bytes:
        """Key/value bytes -> JSON bytes (hex keys, base64 values)."""
        obj = {k.hex(): base64.b64encode(v).decode() for k, v in sorted(data.items())}
        return json.dumps(obj, indent=1).encode()

    @staticmethod
    def _load(path: Path) -> dict[bytes, bytes]:
        """Read a snapshot. Missing file is an empty store."""
        if not path.exists():
            return {}
        try:
            obj = json.loads(path.read_bytes())
            if not isinstance(obj, dict):
                raise CorruptedStore(f"{path}: snapshot is not an object")
            return {
                bytes.fromhex(k): base64.b64decode(v, validate=True)
                for k, v in obj.items()
            }
        except (
            UnicodeDecodeError,
            json.JSONDecodeError,
            binascii.Error,
            ValueError,
            TypeError,
        ) as exc:
            raise CorruptedStore(f"{path}: {exc}") from exc
