import pytest
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from jazzcore.permission import Account, AccountRole, Role
from jazzcore.sign import SignerSecret


def _account(seed_byte=7):
    return Account(SignerSecret(bytes([seed_byte]) * 32))


def test_verifying_key_matches_secret():
    secret = SignerSecret(bytes([3]) * 32)
    assert Account(secret).verifying_key() == secret.verifying_key()


def test_sign_produces_verifiable_signature_over_raw_bytes():
    account = _account()
    signature = account.sign(b"hello")
    public = Ed25519PublicKey.from_public_bytes(account.verifying_key())
    public.verify(signature.raw, b"hello")
    with pytest.raises(InvalidSignature):
        public.verify(signature.raw, b"other")


def test_accounts_with_same_key_are_equal_and_hash_alike():
    assert _account(1) == _account(1)
    assert len({_account(1), _account(1), _account(2)}) == 2


@pytest.mark.parametrize(
    "value, member",
    [
        ("Reader", AccountRole.READER),
        ("Writer", AccountRole.WRITER),
        ("Admin", AccountRole.ADMIN),
        ("WriteOnly", AccountRole.WRITE_ONLY),
    ],
)
def test_account_role_from_value(value, member):
    assert AccountRole(value) is member


def test_account_role_rejects_unknown_value():
    with pytest.raises(ValueError):
        AccountRole("Owner")


def test_role_account_constructor():
    role = Role.account(AccountRole.ADMIN)
    assert role.name == "Account"
    assert role.account_role is AccountRole.ADMIN


def test_role_invite_has_no_account_role():
    assert Role("ReaderInvite").account_role is None


@pytest.mark.parametrize(
    "name, account_role",
    [("Owner", None), ("Account", None), ("Revoked", AccountRole.READER)],
)
def test_role_rejects_invalid(name, account_role):
    with pytest.raises(ValueError):
        Role(name, account_role)