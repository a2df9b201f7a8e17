# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

"""Contract: composition root tying config, store and routers together."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from burnbox.config import ContractConfig, initialize, load_config
from burnbox.errors import InvalidRequest
from burnbox.logging import EventLog
from burnbox.mailbox.engine import MessageQueueEngine
from burnbox.padding import pad
from burnbox.router import RequestRouter
from burnbox.store.base import BatchStore, KeyValueStore
from burnbox.store.txn import Transaction

_log = logging.getLogger(__name__)


class Contract:
    """Runs each request in its own transaction against a batch store.

    A request either commits all of its writes or, if anything raises,
    none of them.
    """

    def __init__(self, store: BatchStore, *, log: EventLog | None = None) -> None:
        self._store = store
        self._log = log
        self._config = load_config(store)

    @classmethod
    def initialize(
        cls,
        store: BatchStore,
        seq_start: int,
        max_messages: int,
        max_message_size: int,
        discard: bool,
        *,
        log: EventLog | None = None,
    ) -> Contract:
        """Validate parameters and set up a fresh store."""
        with Transaction(store) as txn:
            config = initialize(
                txn, seq_start, max_messages, max_message_size, discard
            )
        _log.info(
            "initialized: max_messages=%d max_message_size=%d discard=%s",
            config.max_messages,
            config.max_message_size,
            config.discard,
        )
        if log is not None:
            log.log(
                "initialize",
                {
                    "seq_start": str(config.seq_start),
                    "max_messages": config.max_messages,
                    "max_message_size": config.max_message_size,
                    "discard": config.discard,
                },
            )
        return cls(store, log=log)

    @property
    def config(self) -> ContractConfig:
        return self._config

    @property
    def store(self) -> BatchStore:
        return self._store

    def router(self, caller: str, store: KeyValueStore) -> RequestRouter:
        """Build a router for *caller* over a store view."""
        return RequestRouter(
            MessageQueueEngine(store, self._config), caller, log=self._log
        )

    def execute(self, caller: str, request: Mapping[str, Any]) -> dict[str, Any]:
        """Run one request for an authenticated caller."""
        txn = Transaction(self._store)
        try:
            result = self.router(caller, txn).handle(request)
            txn.commit()
        except Exception as exc:
            txn.rollback()
            _log.warning("request aborted, no changes applied", exc_info=True)
            if self._log is not None:
                self._log.log(
                    "request.aborted",
                    {"request": _request_name(request), "error": type(exc).__name__},
                )
            raise
        return result

    def execute_json(self, caller: str, payload: bytes) -> bytes:
        """JSON request in, padded JSON response out."""
        try:
            request = json.loads(payload)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise InvalidRequest(f"malformed request: {exc}") from exc
        result = self.execute(caller, request)
        return pad(json.dumps(result, separators=(",", ":")).encode())

    def query(self, request: Mapping[str, Any]) -> dict[str, Any]:
        """Unauthenticated read-only queries."""
        if request == {"ping": {}}:
            return {"response": "pong"}
        raise InvalidRequest(f"unknown query {request!r}")


def _request_name(request: object) -> str | None:
    """Name of a single-key request, or None if it has no recognisable shape."""
    if isinstance(request, Mapping) and len(request) == 1:
        name = next(iter(request))
        if isinstance(name, str):
            return name
    return None
