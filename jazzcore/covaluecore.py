"""The core of a collaborative value: its header and session logs."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from .covalue import CoValueHeader
from .ids import RawCoID, SessionID
from .session import SessionLog
from .sync import CoValueKnownState


@dataclass
class CoValueCore:
    """A value's ID, header and the transaction logs of its sessions."""

    id: RawCoID
    header: CoValueHeader
    session_logs: dict[SessionID, SessionLog] = field(default_factory=dict)
    _cached_known_state: CoValueKnownState | None = field(
        default=None, repr=False, compare=False
    )

    def known_state_uncached(self) -> CoValueKnownState:
        return CoValueKnownState(
            id=self.id,
            header=True,
            sessions={sid: len(log.transactions) for sid, log in self.session_logs.items()},
        )

    def known_state(self) -> CoValueKnownState:
        """The known state, computed once and then served from cache."""
        if self._cached_known_state is None:
            self._cached_known_state = self.known_state_uncached()
        return replace(self._cached_known_state, sessions=dict(self._cached_known_state.sessions))

    def meta(self) -> Any:
        return self.header.meta