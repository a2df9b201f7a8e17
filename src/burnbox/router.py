# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

"""Request layer: one router per authenticated caller.

Methods return result dicts on success and error dicts on recoverable
failure. Corrupted state and programming bugs propagate as exceptions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from burnbox.errors import InvalidRequest, PayloadTooLarge
from burnbox.logging import EventLog, log_method
from burnbox.mailbox.engine import MessageQueueEngine
from burnbox.store.keys import MAX_IDENTITY_BYTES

_log = logging.getLogger(__name__)

# Request name -> required string fields.
_REQUESTS: dict[str, tuple[str, ...]] = {
    "send": ("content", "target"),
    "recv": (),
    "size": (),
    "block": ("address",),
    "unblock": ("address",),
}
_IDENTITY_FIELDS = frozenset({"target", "address"})


class RequestRouter:
    """Dispatch typed requests for one caller to the queue engine.

    The caller identity is trusted as given; authentication happens
    before a router is built.
    """

    def __init__(
        self,
        engine: MessageQueueEngine,
        caller: str,
        log: EventLog | None = None,
    ) -> None:
        self._engine = engine
        self._caller = caller
        self._log = log

    @property
    def caller(self) -> str:
        return self._caller

    # --- Requests ---

    @log_method(after=True, redact=("content",))
    def send(self, content: str, target: str) -> dict[str, Any]:
        """Queue a message for *target*.

        Blocked and full-queue drops return the same shape as a real send.
        """
        try:
            count = self._engine.send(self._caller, target, content.encode())
        except PayloadTooLarge as exc:
            return {"error": "message is too long", "limit": exc.limit}
        return {"status": "success", "queue_count": count}

    @log_method(after=True, redact=("content",))
    def recv(self) -> dict[str, Any]:
        """Read and destroy the caller's oldest message."""
        delivery = self._engine.recv(self._caller)
        if delivery is None:
            return {"status": "empty", "remaining": 0}
        try:
            content: str | None = delivery.content.decode()
        except UnicodeDecodeError:
            _log.warning("message %d is not valid UTF-8", delivery.id)
            content = None
        return {
            "status": "success",
            "content": content,
            "sender": delivery.sender,
            "remaining": delivery.remaining,
        }

    @log_method(after=True)
    def size(self) -> dict[str, Any]:
        return {
            "status": "success",
            "count": self._engine.size(self._caller),
            "max_messages": self._engine.config.max_messages,
        }

    @log_method(after=True)
    def block(self, address: str) -> dict[str, Any]:
        self._engine.blocklist.block(self._caller, address)
        return {"status": "success"}

    @log_method(after=True)
    def unblock(self, address: str) -> dict[str, Any]:
        self._engine.blocklist.unblock(self._caller, address)
        return {"status": "success"}

    # --- Dispatch ---

    def handle(self, request: Mapping[str, Any]) -> dict[str, Any]:
        """Dispatch a ``{"<name>": {<fields>}}`` request."""
        name, fields = _parse(request)
        handler: Callable[..., dict[str, Any]] = getattr(self, name)
        return handler(**fields)


def _parse(request: Mapping[str, Any]) -> tuple[str, dict[str, str]]:
    """Validate the request envelope. Raises InvalidRequest."""
    if not isinstance(request, Mapping) or len(request) != 1:
        raise InvalidRequest("request must have exactly one key")
    ((name, body),) = request.items()
    required = _REQUESTS.get(name)
    if required is None:
        raise InvalidRequest(f"unknown request {name!r}")
    if not isinstance(body, Mapping):
        raise InvalidRequest(f"{name}: body must be an object")
    extra = set(body) - set(required)
    if extra:
        raise InvalidRequest(f"{name}: unexpected fields {sorted(extra)}")
    fields: dict[str, str] = {}
    for field in required:
        value = body.get(field)
        if not isinstance(value, str):
            raise InvalidRequest(f"{name}: field {field!r} must be a string")
        try:
            raw = value.encode()
        except UnicodeEncodeError as exc:
            msg = f"{name}: field {field!r} is not valid UTF-8"
            raise InvalidRequest(msg) from exc
        if field in _IDENTITY_FIELDS and len(raw) > MAX_IDENTITY_BYTES:
            raise InvalidRequest(f"{name}: field {field!r} is too long")
        fields[field] = value
    return name, fields
