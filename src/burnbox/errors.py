# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

"""Exception hierarchy.

Only ``PayloadTooLarge`` is recoverable at the request level; the router
turns it into an error dict. Everything else aborts the request and the
surrounding transaction is discarded.
"""


class BurnboxError(Exception):
    """Base class for all burnbox errors."""


class InvalidConfig(BurnboxError):
    """Raised when initialization parameters are out of range."""


class AlreadyInitialized(BurnboxError):
    """Raised on a second initialization of the same store."""


class NotInitialized(BurnboxError):
    """Raised when a store has no persisted configuration."""


class PayloadTooLarge(BurnboxError):
    """Raised when message content exceeds max_message_size."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"message is {size} bytes, limit is {limit}")
        self.size = size
        self.limit = limit


class CorruptedStore(BurnboxError):
    """Raised when a stored record cannot be decoded."""


class CorruptedQueue(CorruptedStore):
    """Raised when a queue index contradicts the stored message nodes."""


class SequenceExhausted(BurnboxError):
    """Raised when the message id counter would leave the uint128 range."""


class InvalidRequest(BurnboxError):
    """Raised when a request cannot be dispatched."""
