from datetime import datetime, timedelta, timezone

import pytest

from jazzcore.covalue import (
    CoValueHeader,
    CoValuePriority,
    CoValueUniqueness,
    GroupRuleset,
    OwnedByGroup,
    UnsafeAllowAll,
    priority_of,
)
from jazzcore.ids import CoID, RawCoID

WHEN = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _header(type_="comap", ruleset=None, meta=None, uniqueness="u", when=WHEN):
    return CoValueHeader(
        type_, ruleset or UnsafeAllowAll(), meta, CoValueUniqueness(uniqueness, when)
    )


@pytest.mark.parametrize(
    "value, member",
    [(0, CoValuePriority.HIGH), (3, CoValuePriority.MEDIUM), (6, CoValuePriority.LOW)],
)
def test_priority_from_value(value, member):
    assert CoValuePriority(value) is member


def test_priority_ordering():
    ordered = sorted([CoValuePriority(6), CoValuePriority(0), CoValuePriority(3)])
    assert ordered == [CoValuePriority.HIGH, CoValuePriority.MEDIUM, CoValuePriority.LOW]


def test_priority_rejects_out_of_range():
    with pytest.raises(ValueError):
        CoValuePriority(8)


@pytest.mark.parametrize(
    "header, expected",
    [
        (_header(meta={"type": "account"}), CoValuePriority.HIGH),
        (_header(ruleset=GroupRuleset(CoID(RawCoID(b"a" * 19)))), CoValuePriority.HIGH),
        (_header(type_="costream", meta={"type": "binary"}), CoValuePriority.LOW),
        (_header(type_="costream"), CoValuePriority.MEDIUM),
        (_header(meta={"type": "binary"}), CoValuePriority.MEDIUM),
        (_header(meta=["type"]), CoValuePriority.MEDIUM),
        (_header(meta={"type": 1}), CoValuePriority.MEDIUM),
        (_header(), CoValuePriority.MEDIUM),
    ],
)
def test_header_priority(header, expected):
    assert header.priority() is expected
    assert priority_of(header) is expected


@pytest.mark.parametrize("value", [None, True, False])
def test_priority_of_non_header_is_medium(value):
    assert priority_of(value) is CoValuePriority.MEDIUM


@pytest.mark.parametrize(
    "ruleset",
    [
        UnsafeAllowAll(),
        GroupRuleset(CoID(RawCoID(bytes(range(19))))),
        OwnedByGroup(RawCoID(bytes(range(19)))),
    ],
)
def test_header_json_round_trip(ruleset):
    header = _header(ruleset=ruleset, meta={"type": "x", "n": [1, 2]})
    assert CoValueHeader.from_json(header.to_json()) == header


def test_created_at_formats():
    assert _header().to_json()["createdAt"] == "2024-01-02T03:04:05Z"
    millis = _header(when=WHEN.replace(microsecond=123000))
    assert millis.to_json()["createdAt"] == "2024-01-02T03:04:05.123Z"


def test_created_at_with_microseconds_round_trips():
    header = _header(when=WHEN.replace(microsecond=123456))
    assert CoValueHeader.from_json(header.to_json()).uniqueness.created_at == header.uniqueness.created_at


def test_created_at_offset_is_parsed_to_utc():
    data = _header().to_json()
    data["createdAt"] = "2024-01-02T05:04:05+02:00"
    assert CoValueHeader.from_json(data).uniqueness.created_at == WHEN


def test_uniqueness_normalises_to_utc_and_rejects_naive():
    local = WHEN.astimezone(timezone(timedelta(hours=5)))
    assert CoValueUniqueness("u", local).created_at.utcoffset() == timedelta(0)
    with pytest.raises(ValueError):
        CoValueUniqueness("u", datetime(2024, 1, 1))


def test_header_id_is_deterministic_and_depends_on_content():
    first = _header()
    assert first.id() == _header().id()
    assert first.id() != _header(uniqueness="v").id()
    assert len(first.id().raw) == 19
    assert RawCoID.parse(str(first.id())) == first.id()


@pytest.mark.parametrize(
    "mutate",
    [
        lambda d: d.pop("type"),
        lambda d: d.update(ruleset={"type": "Nope"}),
        lambda d: d.update(ruleset={"type": "Group"}),
        lambda d: d.update(createdAt="yesterday"),
        lambda d: d.update(uniqueness=3),
    ],
)
def test_header_from_json_rejects_invalid(mutate):
    data = _header().to_json()
    mutate(data)
    with pytest.raises(ValueError):
        CoValueHeader.from_json(data)