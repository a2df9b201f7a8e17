# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

"""Global message id counter, shared by every recipient."""

from burnbox.config import MAX_SEQ
from burnbox.errors import CorruptedStore, SequenceExhausted
from burnbox.store import codec
from burnbox.store.base import KeyValueStore
from burnbox.store.keys import SEQ_KEY


class IdSequence:
    """Read-increment-write over the persisted counter.

    Ids are never reused: the counter only moves forward, and only inside
    the caller's transaction.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def peek(self) -> int:
        """Next id that draw() would return."""
        raw = self._store.get(SEQ_KEY)
        if raw is None:
            raise CorruptedStore("message id counter missing")
        value: int = codec.decode(raw, {"next": int})["next"]
        if value < 0:
            raise CorruptedStore(f"message id counter is negative: {value}")
        return value

    def draw(self) -> int:
        """Return the next id and advance the counter."""
        value = self.peek()
        if value > MAX_SEQ:
            raise SequenceExhausted("no message ids left")
        self._store.set(SEQ_KEY, codec.encode({"next": value + 1}))
        return value
