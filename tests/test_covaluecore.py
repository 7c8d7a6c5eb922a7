from datetime import datetime, timezone

from jazzcore.covalue import CoValueHeader, CoValueUniqueness, UnsafeAllowAll
from jazzcore.covaluecore import CoValueCore
from jazzcore.ids import CoID, RawCoID, SessionID
from jazzcore.session import SessionLog
from jazzcore.transaction import Transaction, TrustingTransaction


def make_core(meta=None, logs=None):
    header = CoValueHeader(
        "comap",
        UnsafeAllowAll(),
        meta,
        CoValueUniqueness("unique", datetime(2024, 1, 1, tzinfo=timezone.utc)),
    )
    return CoValueCore(header.id(), header, logs or {})


SESSION_A = SessionID(CoID(RawCoID(bytes(19))), "a")
SESSION_B = SessionID(CoID(RawCoID(bytes(19))), "b")


def log_of(count):
    return SessionLog(
        transactions=[Transaction(n, TrustingTransaction(b"x")) for n in range(count)]
    )


def test_known_state_uncached_counts_transactions():
    core = make_core(logs={SESSION_A: log_of(2), SESSION_B: log_of(0)})
    known = core.known_state_uncached()
    assert known.id == core.id
    assert known.header is True
    assert known.sessions == {SESSION_A: 2, SESSION_B: 0}


def test_known_state_is_cached():
    core = make_core(logs={SESSION_A: log_of(1)})
    first = core.known_state()
    core.session_logs[SESSION_B] = log_of(3)
    assert core.known_state().sessions == first.sessions
    assert core.known_state_uncached().sessions == {SESSION_A: 1, SESSION_B: 3}


def test_known_state_copy_is_independent():
    core = make_core(logs={SESSION_A: log_of(1)})
    core.known_state().sessions.clear()
    assert core.known_state().sessions == {SESSION_A: 1}


def test_meta_returns_header_meta():
    meta = {"type": "account"}
    assert make_core(meta=meta).meta() == meta
    assert make_core().meta() is None