"""Tests for conversation memory and its per-id serialization."""

import asyncio

from gemini_bridge.memory.conversation_store import ConversationStore, Turn


def test_unseen_id_reads_empty_without_creating(store):
    assert store.history("nope") == []
    assert "nope" not in store
    assert len(store) == 0


def test_turns_are_appended_in_order(store):
    async def scenario():
        async with store.transaction("c1") as session:
            assert session.history == []
            session.record("q1", "a1")
        async with store.transaction("c1") as session:
            assert [turn.content for turn in session.history] == ["q1", "a1"]
            session.record("q2", "a2")

    asyncio.run(scenario())

    assert store.history("c1") == [
        Turn("user", "q1"),
        Turn("assistant", "a1"),
        Turn("user", "q2"),
        Turn("assistant", "a2"),
    ]


def test_history_is_a_copy(store):
    async def scenario():
        async with store.transaction("c1") as session:
            session.record("q", "a")

    asyncio.run(scenario())

    snapshot = store.history("c1")
    snapshot.append(Turn("user", "injected"))
    assert len(store.history("c1")) == 2


def test_failed_body_records_nothing(store):
    async def scenario():
        try:
            async with store.transaction("c1"):
                raise RuntimeError("provider down")
        except RuntimeError:
            pass

    asyncio.run(scenario())

    assert store.history("c1") == []
    assert "c1" in store


def test_same_id_calls_do_not_interleave(store):
    async def call(prompt, delay):
        async with store.transaction("shared") as session:
            seen = len(session.history)
            await asyncio.sleep(delay)
            session.record(prompt, f"reply to {prompt}")
            return seen

    async def scenario():
        return await asyncio.gather(call("first", 0.05), call("second", 0))

    seen = asyncio.run(scenario())

    assert seen == [0, 2]
    assert [turn.content for turn in store.history("shared")] == [
        "first",
        "reply to first",
        "second",
        "reply to second",
    ]


def test_different_ids_are_independent():
    store = ConversationStore()
    order = []

    async def call(conversation_id, delay):
        async with store.transaction(conversation_id) as session:
            await asyncio.sleep(delay)
            order.append(conversation_id)
            session.record("q", "a")

    async def scenario():
        await asyncio.gather(call("slow", 0.05), call("fast", 0))

    asyncio.run(scenario())

    assert order == ["fast", "slow"]
    assert sorted(store.conversation_ids()) == ["fast", "slow"]
