"""Identifier-keyed conversation memory.

Purpose of this abstraction:
    Keep one append-only transcript per client-supplied conversation id so a
    `generate_text` call can be sent with the turns that came before it.

Ownership:
    A single `ConversationStore` is created at startup and injected into the
    tool dispatcher, which is its only writer. Transcripts are never deleted;
    they are dropped when the process exits.

Concurrency:
    The bridge runs on one event loop but lets several requests be in flight.
    Two overlapping calls on the same id would otherwise both read the same
    history and then append in completion order, interleaving the turns.
    `transaction(id)` therefore holds a per-id `asyncio.Lock` across
    read -> provider call -> append, so calls on one id run one at a time
    (in lock acquisition order) while different ids proceed independently.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator


logger = logging.getLogger(__name__)

USER_ROLE = "user"
ASSISTANT_ROLE = "assistant"


@dataclass(frozen=True)
class Turn:
    role: str
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}


def estimate_tokens(text):
    """Approximate token count (`4 chars ~= 1 token`), used for log output."""
    if not text:
        return 0
    return max(1, len(str(text)) // 4)


class ConversationSession:
    """Handle for one locked conversation inside `ConversationStore.transaction`.

    Attributes:
        history: Snapshot of prior turns taken when the lock was acquired.
    """

    def __init__(self, store: "ConversationStore", conversation_id: str, history: list[Turn]):
        self._store = store
        self.conversation_id = conversation_id
        self.history = history
        self.recorded = False

    def record(self, prompt: str, reply: str) -> None:
        """Append the user turn then the assistant turn."""
        self._store._append(self.conversation_id, Turn(USER_ROLE, prompt), Turn(ASSISTANT_ROLE, reply))
        self.recorded = True


class ConversationStore:
    def __init__(self):
        self._conversations: dict[str, list[Turn]] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def __contains__(self, conversation_id) -> bool:
        return conversation_id in self._conversations

    def __len__(self) -> int:
        return len(self._conversations)

    def conversation_ids(self) -> list[str]:
        return list(self._conversations)

    def history(self, conversation_id: str) -> list[Turn]:
        """Return a copy of the turns recorded under `conversation_id`.

        Unseen ids return an empty list and are not created by a read.
        """
        return list(self._conversations.get(conversation_id, ()))

    def _lock_for(self, conversation_id: str) -> asyncio.Lock:
        lock = self._locks.get(conversation_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[conversation_id] = lock
        return lock

    def _append(self, conversation_id: str, *turns: Turn) -> None:
        transcript = self._conversations.setdefault(conversation_id, [])
        transcript.extend(turns)
        logger.debug(
            "Conversation %r now has %d turns (~%d tokens)",
            conversation_id,
            len(transcript),
            sum(estimate_tokens(turn.content) for turn in transcript),
        )

    @asynccontextmanager
    async def transaction(self, conversation_id: str) -> AsyncIterator[ConversationSession]:
        """Lock a conversation for one read-call-append cycle.

        The conversation is created on first reference. If the body raises,
        nothing is appended, since `record` is only called after success.
        """
        lock = self._lock_for(conversation_id)
        if lock.locked():
            logger.debug("Waiting for in-flight call on conversation %r", conversation_id)

        async with lock:
            self._conversations.setdefault(conversation_id, [])
            yield ConversationSession(self, conversation_id, self.history(conversation_id))
