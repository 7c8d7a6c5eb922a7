import pytest
from hypothesis import given
from hypothesis import strategies as st

from jazzcore.base58 import b58encode
from jazzcore.hashing import ShortHash
from jazzcore.ids import CoID, RawCoID, SessionID, TransactionID

RAW19 = bytes(range(19))


def test_raw_co_id_string_starts_with_marker_and_round_trips():
    co_id = RawCoID(RAW19)
    text = str(co_id)
    assert text.startswith("co_z")
    assert RawCoID.parse(text) == co_id


def test_raw_co_id_shorter_than_short_hash_displays_only_marker():
    assert str(RawCoID(b"\x01\x02")) == "co_z"


def test_raw_co_id_display_truncates_to_short_hash_length():
    assert str(RawCoID(bytes(range(25)))) == str(RawCoID(RAW19))


def test_raw_co_id_parse_ignores_text_before_marker():
    assert RawCoID.parse("prefixco_z" + b58encode(b"abc")) == RawCoID(b"abc")


@pytest.mark.parametrize("text", ["z" + b58encode(RAW19), "co_z0OIl", "nothing"])
def test_raw_co_id_parse_rejects_invalid(text):
    with pytest.raises(ValueError):
        RawCoID.parse(text)


def test_raw_co_id_from_short_hash_keeps_bytes():
    short = ShortHash.from_value({"a": 1})
    assert RawCoID.from_short_hash(short).raw == short.raw


def test_raw_co_id_json_round_trip():
    co_id = RawCoID(b"\x00\xffxyz")
    assert co_id.to_json() == [0, 255, 120, 121, 122]
    assert RawCoID.from_json(co_id.to_json()) == co_id


@pytest.mark.parametrize("data", ["abc", [1, 256], [True], None])
def test_raw_co_id_from_json_rejects_invalid(data):
    with pytest.raises(ValueError):
        RawCoID.from_json(data)


def test_co_id_raw_and_display():
    raw = RawCoID(RAW19)
    co_id = CoID(raw)
    assert co_id.raw() is raw
    assert str(co_id) == str(raw)
    assert CoID(RawCoID(RAW19)) == co_id


def test_session_id_display_format():
    account = CoID(RawCoID(RAW19))
    session = SessionID(account, "abc")
    assert str(session) == f"{account}_session_zabc"


@given(st.binary(min_size=19, max_size=19), st.text())
def test_session_id_round_trip(raw, random):
    session = SessionID(CoID(RawCoID(raw)), random)
    assert SessionID.parse(str(session)) == session
    assert SessionID.from_json(session.to_json()) == session


@pytest.mark.parametrize("text", ["co_zabc", "nope_session_zabc", "co_z0_session_zabc"])
def test_session_id_parse_rejects_invalid(text):
    with pytest.raises(ValueError):
        SessionID.parse(text)


def test_session_id_from_json_requires_string():
    with pytest.raises(ValueError):
        SessionID.from_json(42)


def test_session_id_is_usable_as_key():
    first = SessionID(CoID(RawCoID(RAW19)), "x")
    second = SessionID.parse(str(first))
    assert {first: 1}[second] == 1


def test_transaction_id_holds_fields():
    session = SessionID(CoID(RawCoID(RAW19)), "x")
    tx_id = TransactionID(session, 4)
    assert tx_id.session_id == session
    assert tx_id.tx_index == 4