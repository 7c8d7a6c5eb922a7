"""Session logs and the verified state of a collaborative value."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable

from .covalue import MAX_RECOMMENDED_TX_SIZE, CoValueHeader
from .hashing import Hash, StreamingHash
from .ids import RawCoID, SessionID
from .sign import Signature, SignerID
from .sync import CoValueKnownState, NewContentMessage, SessionNewContent
from .transaction import Transaction


class InvalidHashError(ValueError):
    """A claimed session hash does not match the transactions."""


@dataclass
class SessionLog:
    """The transactions of one session with their rolling hash and signatures."""

    transactions: list[Transaction] = field(default_factory=list)
    last_hash: Hash | None = None
    streaming_hash: StreamingHash = field(default_factory=StreamingHash)
    signature_after: dict[int, Signature] = field(default_factory=dict)
    last_signature: Signature = field(default_factory=Signature.empty)


@dataclass(frozen=True)
class ExpectedNewHashAfter:
    """The hash a session would have after appending some transactions."""

    expected_new_hash: Hash
    new_streaming_hash: StreamingHash


def get_known_signature_idx(
    log: SessionLog, known_for_session: int | None, sent_for_session: int | None
) -> int | None:
    """First in-between signature index at or after what was already sent or known."""
    threshold = sent_for_session if sent_for_session is not None else (known_for_session or 0)
    return next((idx for idx in sorted(log.signature_after) if idx >= threshold), None)


def _copy_known_state(state: CoValueKnownState) -> CoValueKnownState:
    return replace(state, sessions=dict(state.sessions))


class VerifiedState:
    """A value's header and session logs whose signatures have been checked."""

    def __init__(
        self,
        id: RawCoID,
        header: CoValueHeader,
        sessions: dict[SessionID, SessionLog] | None = None,
    ) -> None:
        self.id = id
        self.header = header
        self.sessions: dict[SessionID, SessionLog] = dict(sessions or {})
        self._cached_known_state: CoValueKnownState | None = None
        self._cached_new_content_since_empty: list[NewContentMessage] | None = None

    def expected_new_hash_after(
        self, session_id: SessionID, new_transactions: Iterable[Transaction]
    ) -> ExpectedNewHashAfter:
        log = self.sessions.get(session_id)
        streaming_hash = log.streaming_hash.copy() if log is not None else StreamingHash()
        for transaction in new_transactions:
            streaming_hash.update(transaction.to_json())
        return ExpectedNewHashAfter(streaming_hash.digest(), streaming_hash)

    def _do_add_transactions(
        self,
        session_id: SessionID,
        new_transactions: list[Transaction],
        new_signature: Signature,
        expected_new_hash: Hash,
        new_streaming_hash: StreamingHash,
    ) -> None:
        previous = self.sessions.get(session_id)
        transactions = (list(previous.transactions) if previous else []) + list(new_transactions)
        signature_after = dict(previous.signature_after) if previous else {}
        last_inbetween = max(signature_after, default=0)
        size_since = sum(tx.size() for tx in transactions[last_inbetween + 1 :])
        if size_since > MAX_RECOMMENDED_TX_SIZE:
            signature_after[len(transactions) - 1] = new_signature
        self.sessions[session_id] = SessionLog(
            transactions=transactions,
            last_hash=expected_new_hash,
            streaming_hash=new_streaming_hash,
            signature_after=signature_after,
            last_signature=new_signature,
        )
        self._cached_new_content_since_empty = None
        self._cached_known_state = None

    def known_state(self) -> CoValueKnownState:
        if self._cached_known_state is None:
            self._cached_known_state = self.known_state_uncached()
        return _copy_known_state(self._cached_known_state)

    def known_state_uncached(self) -> CoValueKnownState:
        return CoValueKnownState(
            id=self.id,
            header=True,
            sessions={sid: len(log.transactions) for sid, log in self.sessions.items()},
        )

    def try_add_transactions(
        self,
        session_id: SessionID,
        signer_id: SignerID,
        new_transactions: list[Transaction],
        new_signature: Signature,
        given_expected_new_hash: Hash | None = None,
        skip_verify: bool = False,
        given_new_streaming_hash: StreamingHash | None = None,
    ) -> None:
        """Append transactions to a session, checking hash and signature unless skipped.

        Raises InvalidHashError on a hash mismatch and SignatureError on a bad signature.
        """
        if (
            skip_verify
            and given_new_streaming_hash is not None
            and given_expected_new_hash is not None
        ):
            self._do_add_transactions(
                session_id,
                new_transactions,
                new_signature,
                given_expected_new_hash,
                given_new_streaming_hash,
            )
            return
        expected = self.expected_new_hash_after(session_id, new_transactions)
        if (
            given_expected_new_hash is not None
            and given_expected_new_hash != expected.expected_new_hash
        ):
            raise InvalidHashError(
                f"Invalid hash for session {self.id} does not match "
                f"(expected: {given_expected_new_hash}, actual: {expected.expected_new_hash})"
            )
        signer_id.verify(str(expected.expected_new_hash), new_signature)
        self._do_add_transactions(
            session_id,
            new_transactions,
            new_signature,
            expected.expected_new_hash,
            expected.new_streaming_hash,
        )

    def _new_piece(self, with_header: bool) -> NewContentMessage:
        return NewContentMessage(
            id=self.id,
            header=self.header if with_header else None,
            priority=self.header.priority(),
        )

    def new_content_since(
        self, known_state: CoValueKnownState | None
    ) -> list[NewContentMessage] | None:
        """Content messages carrying what a peer with ``known_state`` lacks, or None."""
        is_known_state_empty = known_state is None or (
            not known_state.header and not known_state.sessions
        )
        if is_known_state_empty and self._cached_new_content_since_empty is not None:
            return list(self._cached_new_content_since_empty)

        header_known = known_state.header if known_state is not None else True
        current_piece = self._new_piece(with_header=not header_known)
        pieces = [current_piece]
        sent_state: dict[SessionID, int] = {}
        piece_size = 0
        sessions_to_do_again: set[SessionID] | None = None
        first_pass = True

        while first_pass or sessions_to_do_again:
            sessions_to_do = list(self.sessions) if first_pass else list(sessions_to_do_again)
            first_pass = False
            for session_id in sessions_to_do:
                log = self.sessions.get(session_id) or SessionLog()
                known_for = (
                    known_state.sessions.get(session_id) if known_state is not None else None
                )
                sent_for = sent_state.get(session_id)
                next_signature_idx = get_known_signature_idx(log, known_for, sent_for)

                first_new_tx_idx = sent_for if sent_for is not None else (known_for or 0)
                after_last_new_tx_idx = (
                    next_signature_idx + 1
                    if next_signature_idx is not None
                    else len(log.transactions)
                )
                n_new_tx = max(0, after_last_new_tx_idx - first_new_tx_idx)

                if n_new_tx == 0:
                    if sessions_to_do_again is not None:
                        sessions_to_do_again.discard(session_id)
                    continue

                if after_last_new_tx_idx < len(log.transactions):
                    if sessions_to_do_again is None:
                        sessions_to_do_again = set()
                    sessions_to_do_again.add(session_id)

                new_txs = log.transactions[first_new_tx_idx : first_new_tx_idx + n_new_tx]
                old_piece_size = piece_size
                piece_size += sum(tx.size() for tx in new_txs)

                if piece_size >= MAX_RECOMMENDED_TX_SIZE:
                    current_piece = self._new_piece(with_header=False)
                    pieces.append(current_piece)
                    piece_size -= old_piece_size

                entry = current_piece.new.get(session_id)
                if entry is None:
                    entry = SessionNewContent(after=first_new_tx_idx)
                    current_piece.new[session_id] = entry
                entry.new_transactions.extend(new_txs)

                signature = (
                    log.signature_after.get(next_signature_idx)
                    if next_signature_idx is not None
                    else None
                )
                entry.last_signature = signature if signature is not None else log.last_signature

                sent_state[session_id] = first_new_tx_idx + n_new_tx

        with_content = [piece for piece in pieces if piece.new or piece.header is not None]
        if not with_content:
            return None
        if is_known_state_empty:
            self._cached_new_content_since_empty = list(with_content)
        return with_content