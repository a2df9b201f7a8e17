# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

from burnbox.mailbox.blocklist import BlockList
from burnbox.mailbox.engine import Delivery, MessageQueueEngine
from burnbox.mailbox.records import MessageNode, QueueIndex
from burnbox.mailbox.sequence import IdSequence

__all__ = [
    "BlockList",
    "Delivery",
    "IdSequence",
    "MessageNode",
    "MessageQueueEngine",
    "QueueIndex",
]
