"""Content hashes over canonical JSON: full, short and streaming."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from .base58 import b58decode, b58encode
from .blake3 import Blake3Hasher, blake3

HASH_LENGTH = 32
SHORT_HASH_LENGTH = 19

_HASH_MARKER = "hash_z"
_SHORT_HASH_MARKER = "shortHash_z"


def canonical_json(value: Any) -> str:
    """Render a JSON value pretty-printed with two-space indent and sorted keys."""
    return json.dumps(value, indent=2, sort_keys=True, ensure_ascii=False, allow_nan=False)


def _decode_after(text: str, marker: str, length: int, message: str) -> bytes:
    _, found, encoded = text.partition(marker)
    if not found:
        raise ValueError(message)
    try:
        raw = b58decode(encoded)
    except ValueError:
        raise ValueError(message) from None
    if len(raw) != length:
        raise ValueError(message)
    return raw


def _bytes_from_json(data: Any, length: int, what: str) -> bytes:
    if not isinstance(data, list) or len(data) != length:
        raise ValueError(f"{what} must be a list of {length} bytes")
    if not all(isinstance(b, int) and not isinstance(b, bool) and 0 <= b <= 255 for b in data):
        raise ValueError(f"{what} must contain integers between 0 and 255")
    return bytes(data)


@dataclass(frozen=True, order=True)
class Hash:
    """A 32-byte BLAKE3 hash."""

    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != HASH_LENGTH:
            raise ValueError(f"a Hash holds {HASH_LENGTH} bytes, got {len(self.raw)}")

    @classmethod
    def from_value(cls, value: Any) -> Hash:
        """Hash the canonical JSON rendering of ``value``."""
        return cls(blake3(canonical_json(value).encode("utf-8")))

    @classmethod
    def parse(cls, text: str) -> Hash:
        return cls(
            _decode_after(
                text,
                _HASH_MARKER,
                HASH_LENGTH,
                "String not a valid `Hash`; `Hash`s begin with `hash_z` "
                "followed by a Base58-encoded BLAKE3 hash",
            )
        )

    def to_json(self) -> list[int]:
        return list(self.raw)

    @classmethod
    def from_json(cls, data: Any) -> Hash:
        return cls(_bytes_from_json(data, HASH_LENGTH, "Hash"))

    def __str__(self) -> str:
        return _HASH_MARKER + b58encode(self.raw)


@dataclass(frozen=True, order=True)
class ShortHash:
    """A BLAKE3 hash truncated to 19 bytes."""

    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != SHORT_HASH_LENGTH:
            raise ValueError(
                f"a ShortHash holds {SHORT_HASH_LENGTH} bytes, got {len(self.raw)}"
            )

    @classmethod
    def from_value(cls, value: Any) -> ShortHash:
        return cls.from_hash(Hash.from_value(value))

    @classmethod
    def from_hash(cls, hash: Hash) -> ShortHash:
        return cls(hash.raw[:SHORT_HASH_LENGTH])

    @classmethod
    def parse(cls, text: str) -> ShortHash:
        return cls(
            _decode_after(
                text,
                _SHORT_HASH_MARKER,
                SHORT_HASH_LENGTH,
                "String not a valid `ShortHash`; `ShortHash`s begin with `shortHash_z` "
                "followed by a truncated Base58-encoded BLAKE3 hash",
            )
        )

    def __str__(self) -> str:
        return _SHORT_HASH_MARKER + b58encode(self.raw)


class StreamingHash:
    """A rolling hash over a sequence of JSON values."""

    def __init__(self) -> None:
        self._hasher = Blake3Hasher()

    def update(self, value: Any) -> None:
        self._hasher.update(canonical_json(value).encode("utf-8"))

    def digest(self) -> Hash:
        return Hash(self._hasher.digest())

    def copy(self) -> StreamingHash:
        other = StreamingHash()
        other._hasher = self._hasher.copy()
        return other

    def __repr__(self) -> str:
        return f"StreamingHash({self.digest()})"