from __future__ import annotations

import pytest

from nautilus.application.services.password_hashing import BcryptPasswordHasher


@pytest.fixture()
def hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=4)


def test_hash_verifies_own_digest(hasher: BcryptPasswordHasher) -> None:
    digest = hasher.hash("secret123")

    assert digest.startswith("$2b$04$")
    assert hasher.verify("secret123", digest) is True
    assert hasher.verify("secret124", digest) is False


def test_hash_is_salted(hasher: BcryptPasswordHasher) -> None:
    assert hasher.hash("secret123") != hasher.hash("secret123")


@pytest.mark.parametrize("junk", ["", "not-a-hash", "$2b$04$short", "$2a$10$" + "x" * 10])
def test_verify_rejects_junk_without_raising(hasher: BcryptPasswordHasher, junk: str) -> None:
    assert hasher.verify("secret123", junk) is False


def test_verify_empty_password(hasher: BcryptPasswordHasher) -> None:
    assert hasher.verify("", hasher.hash("secret123")) is False


def test_verify_accepts_2a_prefix(hasher: BcryptPasswordHasher) -> None:
    digest = hasher.hash("secret123")
    legacy = "$2a$" + digest[4:]

    assert hasher.verify("secret123", legacy) is True


def test_only_first_72_bytes_count(hasher: BcryptPasswordHasher) -> None:
    base = "a" * 72
    digest = hasher.hash(base + "tail")

    assert hasher.verify(base, digest) is True
