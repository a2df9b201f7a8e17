# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

"""Per-request write buffer with all-or-nothing commit."""

from types import TracebackType

from burnbox.store.base import BatchStore


class Transaction:
    """KeyValueStore view over a BatchStore for the duration of one request.

    Reads see pending writes first. Nothing reaches the backing store until
    commit(), which hands over the whole batch at once. As a context manager
    it commits on clean exit and discards on exception.
    """

    def __init__(self, store: BatchStore) -> None:
        self._store = store
        self._pending: dict[bytes, bytes | None] = {}
        self._done = False

    def get(self, key: bytes) -> bytes | None:
        self._check_open()
        if key in self._pending:
            return self._pending[key]
        return self._store.get(key)

    def set(self, key: bytes, value: bytes) -> None:
        self._check_open()
        self._pending[key] = value

    def remove(self, key: bytes) -> None:
        self._check_open()
        self._pending[key] = None

    def commit(self) -> None:
        """Apply all pending writes to the backing store."""
        self._check_open()
        self._done = True
        if self._pending:
            self._store.apply(self._pending)
        self._pending = {}

    def rollback(self) -> None:
        """Drop all pending writes. No-op once the transaction has finished."""
        self._done = True
        self._pending = {}

    def __enter__(self) -> "Transaction":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._done:
            return
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    def _check_open(self) -> None:
        if self._done:
            msg = "transaction already finished"
            raise RuntimeError(msg)
