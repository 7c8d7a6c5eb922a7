"""Collaborative value headers, rulesets and priorities."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, IntEnum, auto
from typing import Any, Union

from .hashing import ShortHash
from .ids import CoID, RawCoID

MAX_RECOMMENDED_TX_SIZE = 100 * 1024


class CoValueType(Enum):
    CO_MAP = auto()
    GROUP = auto()
    ACCOUNT = auto()
    PROFILE = auto()
    CO_LIST = auto()
    CO_PLAIN_TEXT = auto()
    CO_STREAM = auto()
    BINARY_CO_STREAM = auto()


class SyncRole(Enum):
    SERVER = auto()
    CLIENT = auto()
    PEER = auto()
    STORAGE = auto()


class CoValuePriority(IntEnum):
    """Priority of content messages; lower values are sent first."""

    HIGH = 0
    ONE = 1
    TWO = 2
    MEDIUM = 3
    FOUR = 4
    FIVE = 5
    LOW = 6
    SEVEN = 7


_DATETIME = re.compile(
    r"^(\d{4}-\d{2}-\d{2})T(\d{2}:\d{2}:\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})$"
)


def _format_datetime(value: datetime) -> str:
    base = value.strftime("%Y-%m-%dT%H:%M:%S")
    micro = value.microsecond
    if micro == 0:
        fraction = ""
    elif micro % 1000 == 0:
        fraction = f".{micro // 1000:03d}"
    else:
        fraction = f".{micro:06d}"
    return f"{base}{fraction}Z"


def _parse_datetime(text: Any) -> datetime:
    match = _DATETIME.match(text) if isinstance(text, str) else None
    if match is None:
        raise ValueError(f"not an RFC 3339 timestamp: {text!r}")
    date, time, fraction, offset = match.groups()
    offset = "+00:00" if offset == "Z" else offset
    parsed = datetime.fromisoformat(f"{date}T{time}{offset}")
    micro = int((fraction or "")[:6].ljust(6, "0"))
    return parsed.replace(microsecond=micro).astimezone(timezone.utc)


@dataclass(frozen=True)
class CoValueUniqueness:
    """What makes otherwise identical headers distinct."""

    uniqueness: str
    created_at: datetime

    def __post_init__(self) -> None:
        if self.created_at.tzinfo is None:
            raise ValueError("created_at must be timezone-aware")
        object.__setattr__(self, "created_at", self.created_at.astimezone(timezone.utc))


@dataclass(frozen=True)
class UnsafeAllowAll:
    """Ruleset allowing every operation."""


@dataclass(frozen=True)
class GroupRuleset:
    """Ruleset of a group, started by its initial admin."""

    initial_admin: CoID


@dataclass(frozen=True)
class OwnedByGroup:
    """Ruleset delegating permissions to a group."""

    group: RawCoID


Ruleset = Union[UnsafeAllowAll, GroupRuleset, OwnedByGroup]


def _ruleset_to_json(ruleset: Ruleset) -> dict[str, Any]:
    if isinstance(ruleset, GroupRuleset):
        return {"type": "Group", "initialAdmin": ruleset.initial_admin.raw().to_json()}
    if isinstance(ruleset, OwnedByGroup):
        return {"type": "OwnedByGroup", "group": ruleset.group.to_json()}
    return {"type": "UnsafeAllowAll"}


def _ruleset_from_json(data: Any) -> Ruleset:
    if not isinstance(data, dict):
        raise ValueError("ruleset must be an object")
    kind = data.get("type")
    try:
        if kind == "UnsafeAllowAll":
            return UnsafeAllowAll()
        if kind == "Group":
            return GroupRuleset(CoID(RawCoID.from_json(data["initialAdmin"])))
        if kind == "OwnedByGroup":
            return OwnedByGroup(RawCoID.from_json(data["group"]))
    except KeyError as exc:
        raise ValueError(f"ruleset {kind!r} is missing field {exc}") from None
    raise ValueError(f"unknown ruleset type {kind!r}")


@dataclass(frozen=True)
class CoValueHeader:
    """The immutable header of a collaborative value; its hash is the value's ID."""

    type_: str
    ruleset: Ruleset
    meta: Any
    uniqueness: CoValueUniqueness

    def to_json(self) -> dict[str, Any]:
        return {
            "type": self.type_,
            "ruleset": _ruleset_to_json(self.ruleset),
            "meta": self.meta,
            "uniqueness": self.uniqueness.uniqueness,
            "createdAt": _format_datetime(self.uniqueness.created_at),
        }

    @classmethod
    def from_json(cls, data: Any) -> CoValueHeader:
        if not isinstance(data, dict):
            raise ValueError("header must be an object")
        try:
            type_ = data["type"]
            ruleset = _ruleset_from_json(data["ruleset"])
            uniqueness = data["uniqueness"]
            created_at = _parse_datetime(data["createdAt"])
        except KeyError as exc:
            raise ValueError(f"header is missing field {exc}") from None
        if not isinstance(type_, str) or not isinstance(uniqueness, str):
            raise ValueError("header type and uniqueness must be strings")
        return cls(type_, ruleset, data.get("meta"), CoValueUniqueness(uniqueness, created_at))

    def id(self) -> RawCoID:
        """The ID derived from hashing the header."""
        return RawCoID.from_short_hash(ShortHash.from_value(self.to_json()))

    def priority(self) -> CoValuePriority:
        meta_type = self.meta.get("type") if isinstance(self.meta, dict) else None
        if meta_type == "account":
            return CoValuePriority.HIGH
        if isinstance(self.ruleset, GroupRuleset):
            return CoValuePriority.HIGH
        if self.type_ == "costream" and meta_type == "binary":
            return CoValuePriority.LOW
        return CoValuePriority.MEDIUM


def priority_of(header: Any) -> CoValuePriority:
    """Priority of a header; anything else (a missing header, a flag) is medium."""
    if isinstance(header, CoValueHeader):
        return header.priority()
    return CoValuePriority.MEDIUM