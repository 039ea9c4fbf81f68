"""
Argon2id password hashing.
"""

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

password_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """
    >>> hash_password("s3cret").startswith("$argon2id$")
    True
    """
    if not password:
        raise ValueError("Password cannot be empty")
    return password_hasher.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    """False on a mismatch or an unreadable stored hash; never raises."""
    try:
        return password_hasher.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def needs_rehash(password_hash: str) -> bool:
    """True when the stored hash was made with weaker parameters than today's."""
    try:
        return password_hasher.check_needs_rehash(password_hash)
    except InvalidHashError:
        return True
