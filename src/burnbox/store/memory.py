# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

"""Dict-backed key-value store."""

from burnbox.store.base import WriteBatch


class MemoryStore:
    """In-process store. No durability."""

    def __init__(self, data: dict[bytes, bytes] | None = None) -> None:
        self._data: dict[bytes, bytes] = dict(data) if data else {}

    def get(self, key: bytes) -> bytes | None:
        return self._data.get(key)

    def set(self, key: bytes, value: bytes) -> None:
        self._data[key] = value

    def remove(self, key: bytes) -> None:
        self._data.pop(key, None)

    def apply(self, writes: WriteBatch) -> None:
        """Apply a batch of sets and removes."""
        for key, value in writes.items():
            if value is None:
                self._data.pop(key, None)
            else:
                self._data[key] = value

    def snapshot(self) -> dict[bytes, bytes]:
        """Copy of the current contents."""
        return dict(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data
