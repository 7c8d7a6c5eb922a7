"""Ed25519 signatures, signer secrets and signer IDs."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from .base58 import b58decode, b58encode
from .hashing import canonical_json

SIGNATURE_LENGTH = 64
KEY_LENGTH = 32

_SIGNATURE_MARKER = "signature_z"
_SECRET_MARKER = "signerSecret_z"
_SIGNER_MARKER = "signer_z"


class SignatureError(Exception):
    """A signature did not verify."""


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


def _message_bytes(message: Any) -> bytes:
    return canonical_json(message).encode("utf-8")


def _verify(public_key: Ed25519PublicKey, message: Any, signature: Signature) -> None:
    try:
        public_key.verify(signature.raw, _message_bytes(message))
    except InvalidSignature:
        raise SignatureError("signature does not match message") from None


@dataclass(frozen=True, order=True)
class Signature:
    """A 64-byte Ed25519 signature."""

    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != SIGNATURE_LENGTH:
            raise ValueError(
                f"a Signature holds {SIGNATURE_LENGTH} bytes, got {len(self.raw)}"
            )

    @classmethod
    def empty(cls) -> Signature:
        """The all-zero placeholder signature."""
        return cls(bytes(SIGNATURE_LENGTH))

    @classmethod
    def parse(cls, text: str) -> Signature:
        return cls(
            _decode_after(
                text,
                _SIGNATURE_MARKER,
                SIGNATURE_LENGTH,
                "String not a valid signature; signatures begin with `signature_z` "
                "followed by a Base58-encoded Ed25519 signature",
            )
        )

    def to_json(self) -> list[int]:
        return list(self.raw)

    @classmethod
    def from_json(cls, data: Any) -> Signature:
        if not isinstance(data, list) or len(data) != SIGNATURE_LENGTH:
            raise ValueError(f"Signature must be a list of {SIGNATURE_LENGTH} bytes")
        if not all(
            isinstance(b, int) and not isinstance(b, bool) and 0 <= b <= 255 for b in data
        ):
            raise ValueError("Signature must contain integers between 0 and 255")
        return cls(bytes(data))

    def __str__(self) -> str:
        return _SIGNATURE_MARKER + b58encode(self.raw)


@dataclass(frozen=True)
class SignerID:
    """A public Ed25519 verifying key identifying a signer."""

    public_key: bytes

    def __post_init__(self) -> None:
        if len(self.public_key) != KEY_LENGTH:
            raise ValueError(f"a SignerID holds {KEY_LENGTH} bytes, got {len(self.public_key)}")

    @classmethod
    def parse(cls, text: str) -> SignerID:
        return cls(
            _decode_after(
                text,
                _SIGNER_MARKER,
                KEY_LENGTH,
                "String not a valid signer ID; signer IDs begin with `signer_z` "
                "followed by a Base58-encoded verifying key",
            )
        )

    def verify(self, message: Any, signature: Signature) -> None:
        """Raise SignatureError unless ``signature`` signs ``message``."""
        try:
            key = Ed25519PublicKey.from_public_bytes(self.public_key)
        except ValueError as exc:
            raise SignatureError(f"invalid verifying key: {exc}") from None
        _verify(key, message, signature)

    def __str__(self) -> str:
        return _SIGNER_MARKER + b58encode(self.public_key)


@dataclass(frozen=True)
class SignerSecret:
    """A private Ed25519 signing key, held as its 32-byte seed."""

    seed: bytes
    _key: Ed25519PrivateKey = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.seed) != KEY_LENGTH:
            raise ValueError(f"a SignerSecret holds {KEY_LENGTH} bytes, got {len(self.seed)}")
        object.__setattr__(self, "_key", Ed25519PrivateKey.from_private_bytes(self.seed))

    @classmethod
    def generate(cls) -> SignerSecret:
        return cls(os.urandom(KEY_LENGTH))

    @classmethod
    def parse(cls, text: str) -> SignerSecret:
        return cls(
            _decode_after(
                text,
                _SECRET_MARKER,
                KEY_LENGTH,
                "String not a valid signer secret; signer secrets begin with "
                "`signerSecret_z` followed by a Base58-encoded signing key",
            )
        )

    def verifying_key(self) -> bytes:
        """The raw 32-byte public key."""
        return self._key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)

    def signer_id(self) -> SignerID:
        return SignerID(self.verifying_key())

    def sign(self, message: Any) -> Signature:
        """Sign the canonical JSON rendering of ``message``."""
        return Signature(self._key.sign(_message_bytes(message)))

    def verify(self, message: Any, signature: Signature) -> None:
        """Raise SignatureError unless ``signature`` signs ``message`` with this key."""
        _verify(self._key.public_key(), message, signature)

    def __str__(self) -> str:
        return _SECRET_MARKER + b58encode(self.seed)