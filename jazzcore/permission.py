"""Accounts and the roles they can hold in a group."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from .sign import Signature, SignerSecret


@dataclass(frozen=True)
class Account:
    """An account, identified by its private signing key."""

    signing_key: SignerSecret
    _key: Ed25519PrivateKey = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_key", Ed25519PrivateKey.from_private_bytes(self.signing_key.seed)
        )

    def verifying_key(self) -> bytes:
        """The account's raw 32-byte public key."""
        return self.signing_key.verifying_key()

    def sign(self, message: bytes) -> Signature:
        """Sign raw bytes with the account's private key."""
        return Signature(self._key.sign(bytes(message)))

    def __hash__(self) -> int:
        return hash(self.verifying_key())


class AccountRole(Enum):
    """The access an account member has."""

    READER = "Reader"
    WRITER = "Writer"
    ADMIN = "Admin"
    WRITE_ONLY = "WriteOnly"


_ROLE_NAMES = (
    "Account",
    "Revoked",
    "AdminInvite",
    "WriterInvite",
    "ReaderInvite",
    "WriteOnlyInvite",
)


@dataclass(frozen=True)
class Role:
    """A role in a group: an account role, a revocation or an invite."""

    name: str
    account_role: AccountRole | None = None

    def __post_init__(self) -> None:
        if self.name not in _ROLE_NAMES:
            raise ValueError(f"unknown role {self.name!r}")
        if (self.name == "Account") != (self.account_role is not None):
            raise ValueError("an account role is required for, and only for, 'Account'")

    @classmethod
    def account(cls, role: AccountRole) -> Role:
        return cls("Account", role)