# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

"""JSON record encoding for stored values."""

import base64
import binascii
import json
from typing import Any

from burnbox.errors import CorruptedStore


def encode(obj: dict[str, Any]) -> bytes:
    """Dict -> compact JSON bytes."""
    return json.dumps(obj, separators=(",", ":"), sort_keys=True).encode()


def decode(data: bytes, fields: dict[str, type | tuple[type, ...]]) -> dict[str, Any]:
    """JSON bytes -> dict, checking that every field has the expected type.

    Raises CorruptedStore on anything unexpected. bool is rejected where
    int is expected.
    """
    try:
        obj = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise CorruptedStore(f"undecodable record: {exc}") from exc
    if not isinstance(obj, dict):
        raise CorruptedStore("record is not an object")
    for name, expected in fields.items():
        if name not in obj:
            raise CorruptedStore(f"record missing field {name!r}")
        value = obj[name]
        if isinstance(value, bool) and bool not in _as_tuple(expected):
            raise CorruptedStore(f"field {name!r} has wrong type")
        if not isinstance(value, expected):
            raise CorruptedStore(f"field {name!r} has wrong type")
    return obj


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


def unb64(text: str) -> bytes:
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise CorruptedStore(f"bad base64 field: {exc}") from exc


def _as_tuple(expected: type | tuple[type, ...]) -> tuple[type, ...]:
    return expected if isinstance(expected, tuple) else (expected,)
