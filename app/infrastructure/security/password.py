"""Password hashing (bcrypt over a SHA-256 pre-hash).

bcrypt truncates inputs at 72 bytes; the base64 SHA-256 digest is a
fixed 44-byte input so long passphrases keep all of their entropy.
"""

import base64
import hashlib

import bcrypt

MIN_PASSWORD_LENGTH = 8


def _prehash(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if plain_password matches hashed_password."""
    try:
        return bool(
            bcrypt.checkpw(_prehash(plain_password), hashed_password.encode("utf-8"))
        )
    except (ValueError, TypeError):
        return False


def get_password_hash(password: str) -> str:
    """Return a bcrypt hash of password.

    Raises:
        ValueError: If password is shorter than MIN_PASSWORD_LENGTH.
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt()).decode("utf-8")
