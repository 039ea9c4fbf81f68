import pytest
from argon2 import PasswordHasher
from inkpost_authentication.hasher import hash_password, needs_rehash, verify_password


class TestPasswordHasher:
    def test_hash_is_not_plaintext(self):
        hashed = hash_password("secret")
        assert hashed != "secret"
        assert hashed.startswith("$argon2")

    def test_same_password_hashes_differently(self):
        assert hash_password("secret") != hash_password("secret")

    def test_verify_roundtrip(self):
        hashed = hash_password("secret")
        assert verify_password(hashed, "secret") is True
        assert verify_password(hashed, "wrong") is False

    def test_empty_password_rejected(self):
        with pytest.raises(ValueError, match="Password cannot be empty"):
            hash_password("")

    def test_garbage_hash_does_not_raise(self):
        assert verify_password("not-a-hash", "secret") is False


class TestNeedsRehash:
    def test_current_parameters(self):
        assert needs_rehash(hash_password("secret")) is False

    def test_weaker_parameters(self):
        weak = PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)
        assert needs_rehash(weak.hash("secret")) is True

    def test_unreadable_hash(self):
        assert needs_rehash("not-a-hash") is True
