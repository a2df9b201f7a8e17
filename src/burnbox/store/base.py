# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

"""Byte-addressed key-value store interface."""

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

# A batch of pending writes: bytes sets the key, None removes it.
WriteBatch = Mapping[bytes, bytes | None]


@runtime_checkable
class KeyValueStore(Protocol):
    """Point reads and writes by byte key. All the engine needs."""

    def get(self, key: bytes) -> bytes | None: ...

    def set(self, key: bytes, value: bytes) -> None: ...

    def remove(self, key: bytes) -> None: ...


@runtime_checkable
class BatchStore(KeyValueStore, Protocol):
    """A store that can apply a batch of writes as one unit."""

    def apply(self, writes: WriteBatch) -> None: ...
