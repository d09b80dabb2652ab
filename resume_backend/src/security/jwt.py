"""Security utilities for JWT auth and password hashing.

Passwords are hashed with passlib's bcrypt handler at a caller-chosen cost
factor (the account controller uses 10).

Pre-hashing policy:
- To avoid bcrypt's 72-byte input limit, we pre-hash long passwords using SHA-256
  and tag stored hashes as "bcrypt-sha256$<bcrypt-hash>" so verification can
  handle both plain and pre-hashed formats.

PySecure-4-Minimal controls:
- Avoid logging secrets.
- Deterministic, validated token generation.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import hashlib

from jose import jwt  # python-jose (fastapi-compatible)
from passlib.context import CryptContext

from src.core.config import get_settings
from src.models.user import TokenModel

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

_BCRYPT_MAX_BYTES = 72
_PREHASH_TAG = "bcrypt-sha256$"


def _sha256_hex(s: str) -> str:
    """
    Return a hex-encoded SHA-256 digest of the provided string using UTF-8.
    This is used to pre-hash long passwords to safely fit bcrypt's 72-byte limit.
    """
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


def _needs_prehash(pw: str) -> bool:
    return len(pw.encode("utf-8")) > _BCRYPT_MAX_BYTES


def _is_sha256_bcrypt_tagged(hashed: str) -> bool:
    """Detect our scheme tag for pre-hashed bcrypt format."""
    return hashed.startswith(_PREHASH_TAG)


# PUBLIC_INTERFACE
def encrypt_password(password: str, rounds: int) -> str:
    """
    PUBLIC_INTERFACE
    Hash a password with bcrypt at the given cost factor.

    If the raw password is longer than 72 bytes when utf-8 encoded, it is
    pre-hashed with SHA-256 (hex) first and the result is tagged with
    "bcrypt-sha256$".

    Raises:
        ValueError: If password is not a string or rounds is out of bcrypt's range.
    """
    if not isinstance(password, str):
        raise ValueError("Password must be a string.")
    context = _pwd_context.copy(bcrypt__rounds=rounds)
    if _needs_prehash(password):
        return _PREHASH_TAG + context.hash(_sha256_hex(password))
    return context.hash(password)


# PUBLIC_INTERFACE
def is_equal_password(hashed: str, password: str) -> bool:
    """
    PUBLIC_INTERFACE
    Verify a plaintext password against a stored hash.

    Supports both "bcrypt-sha256$<bcrypt>" (pre-hashed) and plain bcrypt hashes.
    A malformed stored hash verifies as False.
    """
    if not hashed or not isinstance(password, str):
        return False
    try:
        if _is_sha256_bcrypt_tagged(hashed):
            return _pwd_context.verify(_sha256_hex(password), hashed[len(_PREHASH_TAG):])
        return _pwd_context.verify(password, hashed)
    except ValueError:
        # passlib raises ValueError for hashes it cannot identify
        return False


_RESERVED_CLAIMS = {"sub", "iat", "exp"}


# PUBLIC_INTERFACE
def create_token(payload: TokenModel, expires_minutes: Optional[int] = None) -> str:
    """
    PUBLIC_INTERFACE
    Create a signed JWT access token for a user.

    ``sub`` is the user id; the public projection rides along as camelCase
    claims so clients can read the profile without another request.

    Args:
        payload: The user's token projection (never includes the password).
        expires_minutes: TTL override; if None, use settings.
    """
    settings = get_settings()
    ttl = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    if ttl <= 0:
        raise ValueError("Token lifetime must be positive.")
    now = datetime.now(timezone.utc)
    claims: dict[str, Any] = {
        k: v for k, v in payload.model_dump(by_alias=True).items() if k not in _RESERVED_CLAIMS
    }
    claims.update(
        sub=payload.id,
        iat=int(now.timestamp()),
        exp=int((now + timedelta(minutes=ttl)).timestamp()),
    )
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


# PUBLIC_INTERFACE
def decode_token(token: str) -> dict[str, Any]:
    """
    PUBLIC_INTERFACE
    Decode a bearer token issued by ``create_token`` and return its claims.

    Tokens without ``sub`` or ``exp`` are rejected along with bad signatures
    and expired tokens.

    Raises:
        JWTError: If token is invalid, incomplete or expired.
    """
    settings = get_settings()
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        options={"require_sub": True, "require_exp": True},
    )
