"""Transactions: timestamped, possibly encrypted, changes in a session."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class TransactionPrivacy(Enum):
    PRIVATE = "Private"
    TRUSTING = "Trusting"


@dataclass(frozen=True)
class PrivateTransaction:
    """Encrypted changes, with the ID of the key used."""

    key_used: bytes
    encrypted_changes: bytes


@dataclass(frozen=True)
class TrustingTransaction:
    """Unencrypted changes."""

    changes: bytes


TransactionContent = Union[PrivateTransaction, TrustingTransaction]


def _bytes_from_json(data: Any, what: str) -> bytes:
    if not isinstance(data, list) or not all(
        isinstance(b, int) and not isinstance(b, bool) and 0 <= b <= 255 for b in data
    ):
        raise ValueError(f"{what} must be a list of integers between 0 and 255")
    return bytes(data)


@dataclass(frozen=True)
class Transaction:
    """A transaction made at a millisecond timestamp."""

    made_at: int
    content: TransactionContent

    def __post_init__(self) -> None:
        if isinstance(self.made_at, bool) or not isinstance(self.made_at, int) or self.made_at < 0:
            raise ValueError("made_at must be a non-negative integer")

    def privacy(self) -> TransactionPrivacy:
        if isinstance(self.content, PrivateTransaction):
            return TransactionPrivacy.PRIVATE
        return TransactionPrivacy.TRUSTING

    def size(self) -> int:
        """Number of bytes of (possibly encrypted) changes."""
        if isinstance(self.content, PrivateTransaction):
            return len(self.content.encrypted_changes)
        return len(self.content.changes)

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {"madeAt": self.made_at, "privacy": self.privacy().value}
        if isinstance(self.content, PrivateTransaction):
            data["keyUsed"] = list(self.content.key_used)
            data["encryptedChanges"] = list(self.content.encrypted_changes)
        else:
            data["changes"] = list(self.content.changes)
        return data

    @classmethod
    def from_json(cls, data: Any) -> Transaction:
        if not isinstance(data, dict):
            raise ValueError("transaction must be an object")
        try:
            made_at = data["madeAt"]
            privacy = TransactionPrivacy(data["privacy"])
            if privacy is TransactionPrivacy.PRIVATE:
                content: TransactionContent = PrivateTransaction(
                    _bytes_from_json(data["keyUsed"], "keyUsed"),
                    _bytes_from_json(data["encryptedChanges"], "encryptedChanges"),
                )
            else:
                content = TrustingTransaction(_bytes_from_json(data["changes"], "changes"))
        except KeyError as exc:
            raise ValueError(f"transaction is missing field {exc}") from None
        return cls(made_at, content)