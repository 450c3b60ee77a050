"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from tasktrack.core.config import settings

# bcrypt cost factor for stored account passwords.
BCRYPT_ROUNDS = 12

# Field bounds shared by the registration and login schemas.
EMAIL_MAX_LEN = 255
USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# bcrypt only reads the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72


def _password_bytes(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain_password: str) -> str:
    """Salted bcrypt hash of an account password, as stored in accounts.password_hash."""
    digest = bcrypt.hashpw(_password_bytes(plain_password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return digest.decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    """True when plain_password matches password_hash; a malformed hash never matches."""
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False


# Compared against when the login identifier matches no account, so unknown
# identifiers cost one full bcrypt check like a wrong password does.
DUMMY_PASSWORD_HASH = hash_password("tasktrack-dummy-password")


def create_access_token(sub: str | int, role: str) -> str:
    """Signed session token for account sub, valid for JWT_EXPIRE_MINUTES."""
    issued_at = datetime.now(UTC)
    claims: dict[str, Any] = {
        "sub": str(sub),
        "role": role,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    }
    return jwt.encode(claims, settings.JWT_SECRET.get_secret_value(), algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, role, exp, iat).
    Raises jwt.ExpiredSignatureError when expired, jwt.PyJWTError on any other failure.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["exp", "sub"]},
    )
