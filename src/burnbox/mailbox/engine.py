# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

"""Read-once message queues over a key-value store.

Each recipient's queue is a singly linked list of message nodes, oldest
first, addressed through a small index record. Enqueue and dequeue touch
a constant number of keys; nothing loads a whole queue.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from burnbox.config import ContractConfig
from burnbox.errors import CorruptedQueue, PayloadTooLarge
from burnbox.mailbox.blocklist import BlockList
from burnbox.mailbox.records import (
    MessageNode,
    QueueIndex,
    delete_node,
    load_index,
    load_node,
    save_index,
    save_node,
)
from burnbox.mailbox.sequence import IdSequence
from burnbox.store.base import KeyValueStore

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Delivery:
    """A message handed to its recipient. The node is already deleted."""

    id: int
    content: bytes
    sender: str
    remaining: int


class MessageQueueEngine:
    """send / recv / size against one store view.

    Meant to run inside a single transaction. The engine assumes nobody
    else writes to the store while it runs and does no locking.
    """

    def __init__(self, store: KeyValueStore, config: ContractConfig) -> None:
        self._store = store
        self._config = config
        self._blocklist = BlockList(store)
        self._sequence = IdSequence(store)

    @property
    def config(self) -> ContractConfig:
        return self._config

    @property
    def blocklist(self) -> BlockList:
        return self._blocklist

    def send(self, sender: str, target: str, content: bytes) -> int:
        """Queue *content* for *target*. Returns the target's queue length.

        Blocked senders and sends to a full queue under the discard policy
        are dropped without error; the unchanged length is returned so the
        caller cannot tell the two apart.
        """
        if len(content) > self._config.max_message_size:
            raise PayloadTooLarge(len(content), self._config.max_message_size)

        index = load_index(self._store, target)
        if self._blocklist.is_blocked(target, sender):
            _log.debug("send dropped")
            return index.count
        if index.count >= self._config.max_messages:
            if self._config.discard:
                _log.debug("send dropped")
                return index.count
            self._evict_head(target, index)

        message_id = self._sequence.draw()
        save_node(
            self._store,
            target,
            MessageNode(id=message_id, sender=sender, content=content),
        )
        if index.count == 0:
            index.head = message_id
        else:
            if index.tail is None:
                raise CorruptedQueue(f"queue of {index.count} has no tail")
            previous = load_node(self._store, target, index.tail)
            previous.next = message_id
            save_node(self._store, target, previous)
        index.tail = message_id
        index.count += 1
        save_index(self._store, target, index)
        _log.debug("queued message %d, queue length %d", message_id, index.count)
        return index.count

    def recv(self, caller: str) -> Delivery | None:
        """Pop the oldest message for *caller*. None means the queue is empty."""
        index = load_index(self._store, caller)
        if index.empty:
            return None
        node = self._pop_head(caller, index)
        save_index(self._store, caller, index)
        _log.debug("delivered message %d, %d left", node.id, index.count)
        return Delivery(
            id=node.id,
            content=node.content,
            sender=node.sender,
            remaining=index.count,
        )

    def size(self, identity: str) -> int:
        """Number of queued messages. Read-only."""
        return load_index(self._store, identity).count

    def _evict_head(self, recipient: str, index: QueueIndex) -> None:
        node = self._pop_head(recipient, index)
        _log.debug("evicted message %d from full queue", node.id)

    def _pop_head(self, recipient: str, index: QueueIndex) -> MessageNode:
        """Unlink and delete the head node, updating *index* in place."""
        if index.head is None:
            raise CorruptedQueue("pop from a queue with no head")
        node = load_node(self._store, recipient, index.head)
        delete_node(self._store, recipient, node.id)
        index.head = node.next
        if index.head is None:
            index.tail = None
        index.count -= 1
        index.check()
        return node
