# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

"""Response padding so response size says little about its contents."""

BLOCK_SIZE = 256


def pad(data: bytes, block_size: int = BLOCK_SIZE) -> bytes:
    """Right-pad with spaces to a whole number of blocks.

    Spaces keep padded JSON parseable. Empty input still gets one block.
    """
    if block_size < 1:
        raise ValueError(f"block_size must be positive, got {block_size}")
    remainder = len(data) % block_size
    if data and remainder == 0:
        return data
    return data + b" " * (block_size - remainder)
