# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

"""Tests for the per-caller request router."""

from __future__ import annotations

from pathlib import Path
from typing import Any, NamedTuple

import pytest

from burnbox.config import initialize, load_config
from burnbox.errors import InvalidRequest
from burnbox.logging import EventLog, read_log
from burnbox.mailbox import MessageQueueEngine
from burnbox.router import RequestRouter
from burnbox.store import MemoryStore
from burnbox.store.keys import message_key, queue_key


class RouterFixture(NamedTuple):
    store: MemoryStore
    alice: RequestRouter
    bob: RequestRouter
    carol: RequestRouter


def _make(store: MemoryStore, caller: str, log: EventLog | None = None) -> RequestRouter:
    return RequestRouter(MessageQueueEngine(store, load_config(store)), caller, log)


@pytest.fixture()
def fix() -> RouterFixture:
    """Three callers sharing one store: max 2 messages, 16 bytes, evicting."""
    store = MemoryStore()
    initialize(store, 1, 2, 16, False)
    return RouterFixture(
        store, _make(store, "alice"), _make(store, "bob"), _make(store, "carol")
    )


# --- send ---


class TestSend:
    def test_success(self, fix: RouterFixture) -> None:
        assert fix.bob.send("hi", "alice") == {"status": "success", "queue_count": 1}

    def test_too_long(self, fix: RouterFixture) -> None:
        result = fix.bob.send("x" * 17, "alice")
        assert result == {"error": "message is too long", "limit": 16}
        assert fix.alice.size()["count"] == 0

    def test_size_limit_counts_utf8_bytes(self, fix: RouterFixture) -> None:
        # Nine characters, eighteen bytes.
        assert "error" in fix.bob.send("é" * 9, "alice")

    def test_blocked_same_shape_as_success(self, fix: RouterFixture) -> None:
        fix.alice.block("bob")
        blocked = fix.bob.send("hi", "alice")
        ok = fix.carol.send("hi", "alice")
        assert blocked.keys() == ok.keys()
        assert blocked["status"] == ok["status"] == "success"
        assert blocked["queue_count"] == 0


# --- recv ---


class TestRecv:
    def test_roundtrip(self, fix: RouterFixture) -> None:
        fix.bob.send("first", "alice")
        fix.carol.send("second", "alice")
        assert fix.alice.recv() == {
            "status": "success",
            "content": "first",
            "sender": "bob",
            "remaining": 1,
        }
        assert fix.alice.recv()["sender"] == "carol"

    def test_empty(self, fix: RouterFixture) -> None:
        assert fix.alice.recv() == {"status": "empty", "remaining": 0}

    def test_only_own_queue(self, fix: RouterFixture) -> None:
        fix.bob.send("for alice", "alice")
        assert fix.carol.recv()["status"] == "empty"
        assert fix.alice.recv()["content"] == "for alice"

    def test_invalid_utf8_content(self, fix: RouterFixture) -> None:
        engine = MessageQueueEngine(fix.store, load_config(fix.store))
        engine.send("bob", "alice", b"\xff\xfe")
        result = fix.alice.recv()
        assert result["status"] == "success"
        assert result["content"] is None


# --- size / block / unblock ---


class TestMisc:
    def test_size(self, fix: RouterFixture) -> None:
        fix.bob.send("a", "alice")
        assert fix.alice.size() == {"status": "success", "count": 1, "max_messages": 2}

    def test_block_unblock(self, fix: RouterFixture) -> None:
        assert fix.alice.block("bob") == {"status": "success"}
        assert fix.alice.block("bob") == {"status": "success"}
        fix.bob.send("dropped", "alice")
        assert fix.alice.unblock("bob") == {"status": "success"}
        assert fix.alice.unblock("bob") == {"status": "success"}
        fix.bob.send("delivered", "alice")
        assert fix.alice.recv()["content"] == "delivered"
        assert fix.alice.recv()["status"] == "empty"


# --- handle ---


class TestHandle:
    def test_dispatch_all(self, fix: RouterFixture) -> None:
        sent = fix.bob.handle({"send": {"content": "yo", "target": "alice"}})
        assert sent["queue_count"] == 1
        assert fix.alice.handle({"size": {}})["count"] == 1
        assert fix.alice.handle({"recv": {}})["content"] == "yo"
        assert fix.alice.handle({"block": {"address": "bob"}}) == {"status": "success"}
        assert fix.alice.handle({"unblock": {"address": "bob"}}) == {
            "status": "success"
        }

    @pytest.mark.parametrize(
        "request_",
        [
            {},
            {"recv": {}, "size": {}},
            {"delete": {}},
            {"recv": []},
            {"send": {"content": "x"}},
            {"send": {"content": 5, "target": "alice"}},
            {"block": {"address": "bob", "extra": 1}},
            ["recv"],
        ],
    )
    def test_malformed(self, fix: RouterFixture, request_: Any) -> None:
        with pytest.raises(InvalidRequest):
            fix.alice.handle(request_)

    @pytest.mark.parametrize(
        "request_",
        [
            {"send": {"content": "\ud800", "target": "alice"}},
            {"send": {"content": "hi", "target": "\udc00"}},
            {"block": {"address": "\udc00"}},
            {"unblock": {"address": "ok\ud83d"}},
        ],
    )
    def test_lone_surrogates_rejected(
        self, fix: RouterFixture, request_: Any
    ) -> None:
        before = fix.store.snapshot()
        with pytest.raises(InvalidRequest, match="UTF-8"):
            fix.bob.handle(request_)
        assert fix.store.snapshot() == before

    @pytest.mark.parametrize(
        "request_",
        [
            {"send": {"content": "hi", "target": "x" * 65536}},
            {"block": {"address": "\u00e9" * 40000}},
        ],
    )
    def test_oversized_identity_rejected(
        self, fix: RouterFixture, request_: Any
    ) -> None:
        with pytest.raises(InvalidRequest, match="too long"):
            fix.bob.handle(request_)

    def test_identity_at_key_limit_accepted(self, fix: RouterFixture) -> None:
        longest = "x" * 65535
        assert fix.bob.handle({"block": {"address": longest}}) == {
            "status": "success"
        }


# --- audit log ---


def test_audit_log_never_holds_content(tmp_path: Path) -> None:
    store = MemoryStore()
    initialize(store, 1, 5, 64, True)
    log = EventLog(tmp_path / "audit.jsonl")
    with log:
        _make(store, "bob", log).send("top secret", "alice")
        _make(store, "alice", log).recv()
    text = log.path.read_text()
    assert "top secret" not in text
    events = read_log(log.path)
    assert [e["event"] for e in events] == ["send.result", "recv.result"]
    assert events[0]["data"]["content"] == {"redacted": 10}
    assert events[1]["data"]["result"]["content"] == {"redacted": 10}


def test_router_leaves_no_garbage(fix: RouterFixture) -> None:
    fix.bob.send("a", "alice")
    fix.alice.recv()
    assert message_key("alice", 1) not in fix.store
    assert queue_key("alice") in fix.store
