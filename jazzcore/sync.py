"""Known states and the messages peers exchange to synchronise values."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from .covalue import CoValueHeader, CoValuePriority
from .ids import RawCoID, SessionID
from .sign import Signature
from .transaction import Transaction


@dataclass
class CoValueKnownState:
    """Whether the header is known and how many transactions of each session."""

    id: RawCoID
    header: bool
    sessions: dict[SessionID, int] = field(default_factory=dict)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id.to_json(),
            "header": self.header,
            "sessions": {session.to_json(): count for session, count in self.sessions.items()},
        }

    @classmethod
    def from_json(cls, data: Any) -> CoValueKnownState:
        if not isinstance(data, dict):
            raise ValueError("known state must be an object")
        try:
            co_id = RawCoID.from_json(data["id"])
            header = data["header"]
            sessions = data["sessions"]
        except KeyError as exc:
            raise ValueError(f"known state is missing field {exc}") from None
        if not isinstance(header, bool):
            raise ValueError("header must be a boolean")
        if not isinstance(sessions, dict):
            raise ValueError("sessions must be an object")
        parsed: dict[SessionID, int] = {}
        for key, count in sessions.items():
            if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                raise ValueError("session counts must be non-negative integers")
            parsed[SessionID.from_json(key)] = count
        return cls(co_id, header, parsed)


@dataclass
class SessionNewContent:
    """Transactions of one session following index ``after``."""

    after: int
    new_transactions: list[Transaction] = field(default_factory=list)
    last_signature: Signature = field(default_factory=Signature.empty)

    def to_json(self) -> dict[str, Any]:
        return {
            "after": self.after,
            "newTransactions": [tx.to_json() for tx in self.new_transactions],
            "lastSignature": self.last_signature.to_json(),
        }


@dataclass
class LoadMessage:
    """Intent to load a value."""

    known_state: CoValueKnownState

    def to_json(self) -> dict[str, Any]:
        return {"action": "load", **self.known_state.to_json()}


@dataclass
class KnownStateMessage:
    """Summary of the sender's known state of a value."""

    known_state: CoValueKnownState
    as_dependency_of: RawCoID | None = None
    is_correction: bool | None = None

    def to_json(self) -> dict[str, Any]:
        return {
            "action": "known",
            "asDependencyOf": (
                self.as_dependency_of.to_json() if self.as_dependency_of is not None else None
            ),
            "isCorrection": self.is_correction,
            **self.known_state.to_json(),
        }


@dataclass
class NewContentMessage:
    """New transactions for a value, possibly one piece of several."""

    id: RawCoID
    header: CoValueHeader | None
    priority: CoValuePriority
    new: dict[SessionID, SessionNewContent] = field(default_factory=dict)

    def to_json(self) -> dict[str, Any]:
        return {
            "action": "content",
            "id": self.id.to_json(),
            "header": self.header.to_json() if self.header is not None else None,
            "priority": int(self.priority),
            "new": {session.to_json(): content.to_json() for session, content in self.new.items()},
        }


@dataclass
class DoneMessage:
    """A peer unsubscribing from a value."""

    id: RawCoID

    def to_json(self) -> dict[str, Any]:
        return {"action": "done", "id": self.id.to_json()}


SyncMessage = Union[LoadMessage, KnownStateMessage, NewContentMessage, DoneMessage]