# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

"""Immutable contract parameters, fixed at initialization."""

from dataclasses import dataclass

from burnbox.errors import AlreadyInitialized, InvalidConfig, NotInitialized
from burnbox.store import codec
from burnbox.store.base import KeyValueStore
from burnbox.store.keys import CONFIG_KEY, SEQ_KEY

MAX_SEQ = 2**128 - 1
MAX_MESSAGES_LIMIT = 2**31 - 1
# Message sizes must fit in 16 bits.
MAX_MESSAGE_SIZE_LIMIT = 0xFFFF


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class ContractConfig:
    """Queue limits and full-queue policy.

    ``discard`` True rejects sends to a full queue; False evicts the
    oldest message to make room.
    """

    seq_start: int
    max_messages: int
    max_message_size: int
    discard: bool

    @classmethod
    def validate(
        cls,
        seq_start: int,
        max_messages: int,
        max_message_size: int,
        discard: bool,
    ) -> "ContractConfig":
        """Build a config, raising InvalidConfig on out-of-range values."""
        if not _is_int(max_messages) or not 1 <= max_messages <= MAX_MESSAGES_LIMIT:
            raise InvalidConfig(f"invalid max_messages: {max_messages!r}")
        if not _is_int(max_message_size) or not (
            1 <= max_message_size <= MAX_MESSAGE_SIZE_LIMIT
        ):
            raise InvalidConfig(f"invalid max_message_size: {max_message_size!r}")
        if not _is_int(seq_start) or not 0 <= seq_start <= MAX_SEQ:
            raise InvalidConfig(f"invalid seq_start: {seq_start!r}")
        if not isinstance(discard, bool):
            raise InvalidConfig(f"invalid discard: {discard!r}")
        return cls(seq_start, max_messages, max_message_size, discard)


_FIELDS: dict[str, type | tuple[type, ...]] = {
    "seq_start": int,
    "max_messages": int,
    "max_message_size": int,
    "discard": bool,
}


def save_config(store: KeyValueStore, config: ContractConfig) -> None:
    store.set(
        CONFIG_KEY,
        codec.encode(
            {
                "seq_start": config.seq_start,
                "max_messages": config.max_messages,
                "max_message_size": config.max_message_size,
                "discard": config.discard,
            }
        ),
    )


def load_config(store: KeyValueStore) -> ContractConfig:
    """Load the persisted config. Raises NotInitialized if there is none."""
    raw = store.get(CONFIG_KEY)
    if raw is None:
        raise NotInitialized("contract has not been initialized")
    obj = codec.decode(raw, _FIELDS)
    return ContractConfig(
        seq_start=obj["seq_start"],
        max_messages=obj["max_messages"],
        max_message_size=obj["max_message_size"],
        discard=obj["discard"],
    )


def initialize(
    store: KeyValueStore,
    seq_start: int,
    max_messages: int,
    max_message_size: int,
    discard: bool,
) -> ContractConfig:
    """Validate and persist the config and the starting message id.

    Nothing is written if validation fails. A store can only be
    initialized once.
    """
    config = ContractConfig.validate(seq_start, max_messages, max_message_size, discard)
    if store.get(CONFIG_KEY) is not None:
        raise AlreadyInitialized("contract is already initialized")
    save_config(store, config)
    store.set(SEQ_KEY, codec.encode({"next": config.seq_start}))
    return config
