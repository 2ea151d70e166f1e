import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from guidauth.services.errors import HashingError
from guidauth.services.hashing import RefreshTokenHasher


def test_hash_verifies_against_same_secret():
    hasher = RefreshTokenHasher(rounds=4)
    digest = hasher.hash("refresh-secret")

    assert digest != "refresh-secret"
    assert digest.startswith("$2")
    assert hasher.verify("refresh-secret", digest)


def test_hash_rejects_different_secret():
    hasher = RefreshTokenHasher(rounds=4)
    digest = hasher.hash("refresh-secret")

    assert not hasher.verify("refresh-secreT", digest)


def test_hash_is_salted():
    hasher = RefreshTokenHasher(rounds=4)

    assert hasher.hash("same") != hasher.hash("same")


def test_default_cost_factor_is_ten():
    digest = RefreshTokenHasher().hash("secret")

    assert digest.split("$")[2] == "10"


def test_hash_fails_for_secret_over_bcrypt_limit():
    hasher = RefreshTokenHasher(rounds=4)

    with pytest.raises(HashingError):
        hasher.hash("x" * 73)


def test_hash_fails_for_empty_secret():
    with pytest.raises(HashingError):
        RefreshTokenHasher(rounds=4).hash("")


def test_verify_returns_false_for_malformed_digest():
    hasher = RefreshTokenHasher(rounds=4)

    assert hasher.verify("secret", "not-a-bcrypt-digest") is False
    assert hasher.verify("secret", "") is False


def test_verify_does_not_match_on_truncated_prefix():
    hasher = RefreshTokenHasher(rounds=4)
    secret = "a" * 72
    digest = hasher.hash(secret)

    assert hasher.verify(secret, digest)
    assert not hasher.verify(secret + "extra", digest)


def test_verify_returns_false_for_unencodable_secret():
    hasher = RefreshTokenHasher(rounds=4)
    digest = hasher.hash("secret")

    assert hasher.verify("\ud800", digest) is False


def test_hash_fails_for_unencodable_secret():
    with pytest.raises(HashingError):
        RefreshTokenHasher(rounds=4).hash("\ud800")
