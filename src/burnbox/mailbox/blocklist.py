# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

"""Per-recipient set of blocked senders, one key per entry."""

from burnbox.store.base import KeyValueStore
from burnbox.store.keys import block_key

_PRESENT = b"\x01"


class BlockList:
    """Membership records consulted by send. Never touches queued messages."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def block(self, owner: str, target: str) -> bool:
        """Add *target* to *owner*'s block set. True if newly added."""
        if self.is_blocked(owner, target):
            return False
        self._store.set(block_key(owner, target), _PRESENT)
        return True

    def unblock(self, owner: str, target: str) -> bool:
        """Remove *target* from *owner*'s block set. True if it was present."""
        if not self.is_blocked(owner, target):
            return False
        self._store.remove(block_key(owner, target))
        return True

    def is_blocked(self, owner: str, candidate: str) -> bool:
        return self._store.get(block_key(owner, candidate)) is not None
