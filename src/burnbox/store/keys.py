# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

"""Storage key layout.

Every variable-length part is length-prefixed, so keys for different
identities can never collide however the identities are spelled.
"""

SEQ_KEY = b"seq"
CONFIG_KEY = b"config"
MESSAGE_PREFIX = b"mes"
QUEUE_PREFIX = b"box"
BLOCK_PREFIX = b"blk"

MAX_IDENTITY_BYTES = 0xFFFF
ID_BYTES = 16


def part(identity: str) -> bytes:
    """Length-prefixed UTF-8 encoding of one identity."""
    raw = identity.encode()
    if len(raw) > MAX_IDENTITY_BYTES:
        raise ValueError(f"identity too long: {len(raw)} bytes")
    return len(raw).to_bytes(2, "big") + raw


def message_key(recipient: str, message_id: int) -> bytes:
    return MESSAGE_PREFIX + part(recipient) + message_id.to_bytes(ID_BYTES, "big")


def queue_key(recipient: str) -> bytes:
    return QUEUE_PREFIX + part(recipient)


def block_key(owner: str, blocked: str) -> bytes:
    return BLOCK_PREFIX + part(owner) + part(blocked)
