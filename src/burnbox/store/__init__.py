# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

from burnbox.store.base import BatchStore, KeyValueStore, WriteBatch
from burnbox.store.file import FileStore
from burnbox.store.memory import MemoryStore
from burnbox.store.txn import Transaction

__all__ = [
    "BatchStore",
    "FileStore",
    "KeyValueStore",
    "MemoryStore",
    "Transaction",
    "WriteBatch",
]
