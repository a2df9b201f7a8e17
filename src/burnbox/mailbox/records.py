# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

"""Persisted queue records: one index per recipient, one node per message.

An absent index reads as an empty queue, so recipients never need to be
registered. None is the "no message" pointer value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from burnbox.errors import CorruptedQueue
from burnbox.store import codec
from burnbox.store.base import KeyValueStore
from burnbox.store.keys import message_key, queue_key

_OPT_INT = (int, type(None))

_INDEX_FIELDS: dict[str, type | tuple[type, ...]] = {
    "head": _OPT_INT,
    "tail": _OPT_INT,
    "count": int,
}

_NODE_FIELDS: dict[str, type | tuple[type, ...]] = {
    "id": int,
    "sender": str,
    "content": str,
    "next": _OPT_INT,
}


@dataclass
class QueueIndex:
    """Head, tail and length of one recipient's queue."""

    head: int | None = None
    tail: int | None = None
    count: int = 0

    @property
    def empty(self) -> bool:
        return self.count == 0

    def check(self) -> None:
        """Raise CorruptedQueue if the pointers disagree with the count."""
        if self.count < 0:
            raise CorruptedQueue(f"negative queue length {self.count}")
        if self.count == 0 and (self.head is not None or self.tail is not None):
            raise CorruptedQueue("empty queue with dangling pointers")
        if self.count > 0 and (self.head is None or self.tail is None):
            raise CorruptedQueue(f"queue of {self.count} has no head or tail")
        if self.count == 1 and self.head != self.tail:
            raise CorruptedQueue("single-message queue with head != tail")


@dataclass
class MessageNode:
    """One undelivered message. ``next`` points towards the newer end."""

    id: int
    sender: str
    content: bytes
    next: int | None = None


def load_index(store: KeyValueStore, recipient: str) -> QueueIndex:
    """Load a recipient's index. Missing record is an empty queue."""
    raw = store.get(queue_key(recipient))
    if raw is None:
        return QueueIndex()
    obj = codec.decode(raw, _INDEX_FIELDS)
    index = QueueIndex(head=obj["head"], tail=obj["tail"], count=obj["count"])
    index.check()
    return index


def save_index(store: KeyValueStore, recipient: str, index: QueueIndex) -> None:
    index.check()
    store.set(
        queue_key(recipient),
        codec.encode({"head": index.head, "tail": index.tail, "count": index.count}),
    )


def load_node(store: KeyValueStore, recipient: str, message_id: int) -> MessageNode:
    """Load a node the index says exists. Missing node is a corrupted queue."""
    raw = store.get(message_key(recipient, message_id))
    if raw is None:
        raise CorruptedQueue(f"message {message_id} missing from queue")
    obj: dict[str, Any] = codec.decode(raw, _NODE_FIELDS)
    if obj["id"] != message_id:
        raise CorruptedQueue(f"message {message_id} stored under wrong id")
    return MessageNode(
        id=obj["id"],
        sender=obj["sender"],
        content=codec.unb64(obj["content"]),
        next=obj["next"],
    )


def save_node(store: KeyValueStore, recipient: str, node: MessageNode) -> None:
    store.set(
        message_key(recipient, node.id),
        codec.encode(
            {
                "id": node.id,
                "sender": node.sender,
                "content": codec.b64(node.content),
                "next": node.next,
            }
        ),
    )


def delete_node(store: KeyValueStore, recipient: str, message_id: int) -> None:
    store.remove(message_key(recipient, message_id))
