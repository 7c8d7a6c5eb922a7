"""Identifiers for collaborative values, accounts, sessions and transactions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .base58 import b58decode, b58encode
from .hashing import SHORT_HASH_LENGTH, ShortHash

_CO_MARKER = "co_z"
_SESSION_MARKER = "_session_z"

_RAW_CO_ID_ERROR = (
    "String not a valid CoID; CoIDs begin with `co_z` followed by a Base58-encoded string"
)
_SESSION_ID_ERROR = (
    "String not a valid session ID; session IDs begin with a raw account ID "
    "followed by `_session_z` followed by a random string"
)

T = TypeVar("T")


@dataclass(frozen=True, order=True)
class RawCoID:
    """The untyped identifier of a collaborative value."""

    raw: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw", bytes(self.raw))

    @classmethod
    def parse(cls, text: str) -> RawCoID:
        _, found, encoded = text.partition(_CO_MARKER)
        if not found:
            raise ValueError(_RAW_CO_ID_ERROR)
        try:
            return cls(b58decode(encoded))
        except ValueError:
            raise ValueError(_RAW_CO_ID_ERROR) from None

    @classmethod
    def from_short_hash(cls, short_hash: ShortHash) -> RawCoID:
        return cls(short_hash.raw)

    def to_json(self) -> list[int]:
        return list(self.raw)

    @classmethod
    def from_json(cls, data: Any) -> RawCoID:
        if not isinstance(data, list):
            raise ValueError("RawCoID must be a list of bytes")
        if not all(
            isinstance(b, int) and not isinstance(b, bool) and 0 <= b <= 255 for b in data
        ):
            raise ValueError("RawCoID must contain integers between 0 and 255")
        return cls(bytes(data))

    def __str__(self) -> str:
        shown = self.raw[:SHORT_HASH_LENGTH] if len(self.raw) >= SHORT_HASH_LENGTH else b""
        return _CO_MARKER + b58encode(shown)


@dataclass(frozen=True, order=True)
class CoID(Generic[T]):
    """A raw identifier tagged with the kind of value it names."""

    raw_id: RawCoID

    def raw(self) -> RawCoID:
        return self.raw_id

    def __str__(self) -> str:
        return str(self.raw_id)


RawAccountID = CoID


@dataclass(frozen=True)
class SessionID:
    """An account's identifier together with a random per-session string."""

    account: CoID
    random: str

    @classmethod
    def parse(cls, text: str) -> SessionID:
        account_text, found, random = text.partition(_SESSION_MARKER)
        if not found:
            raise ValueError(_SESSION_ID_ERROR)
        try:
            account = CoID(RawCoID.parse(account_text))
        except ValueError:
            raise ValueError(_SESSION_ID_ERROR) from None
        return cls(account, random)

    def to_json(self) -> str:
        return str(self)

    @classmethod
    def from_json(cls, data: Any) -> SessionID:
        if not isinstance(data, str):
            raise ValueError("SessionID must be a string")
        return cls.parse(data)

    def __str__(self) -> str:
        return f"{self.account}{_SESSION_MARKER}{self.random}"


@dataclass(frozen=True)
class TransactionID:
    """The position of a transaction within a session."""

    session_id: SessionID
    tx_index: int