

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import argon2
from jose import JWTError, jws, jwt
from jose.exceptions import JWSError

from todo_api.core.config import settings


# Set up argon2 hasher
ph = argon2.PasswordHasher(
    time_cost=3,
    memory_cost=65536,
    parallelism=4,
    hash_len=32,
    salt_len=16,
)

logger = logging.getLogger(__name__)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed, expiring JWT.

    Args:
        data: Claims to encode in the token.
        expires_delta: Optional custom expiration time.

    Returns:
        str: Encoded JWT token.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.oauth_state_expire_minutes)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)
    return encoded_jwt


def verify_token(token: str) -> Optional[dict]:
    """
    Verify and decode a JWT token.

    Args:
        token: JWT token to verify.

    Returns:
        Optional[dict]: Decoded token payload or None if invalid.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        return payload
    except JWTError:
        return None


def create_state_token() -> str:
    """
    Create the OAuth ``state`` value used for CSRF protection.

    The state is a short-lived JWT wrapping a random nonce, so the callback
    can check both integrity and age.
    """
    return create_access_token(data={"nonce": secrets.token_urlsafe(16)})


def generate_session_id() -> str:
    """Generate an opaque, unguessable session identifier."""
    return secrets.token_urlsafe(32)


def sign_session_id(session_id: str) -> str:
    """
    Sign a session id for use as a cookie value.

    Args:
        session_id: The raw session id stored in the session store.

    Returns:
        str: Compact JWS carrying the session id.
    """
    return jws.sign(session_id.encode("utf-8"), settings.session_secret, algorithm=settings.algorithm)


def unsign_session_id(cookie_value: str) -> Optional[str]:
    """
    Verify a signed cookie value and extract the session id.

    Returns:
        Optional[str]: The session id, or None if the signature does not verify.
    """
    try:
        payload = jws.verify(cookie_value, settings.session_secret, algorithms=[settings.algorithm])
    except JWSError:
        return None
    return payload.decode("utf-8")


def hash_password(password: str) -> str:
    """
    Hash a password credential with argon2.

    Args:
        password: The raw credential.

    Returns:
        str: Argon2 hash of the credential.
    """
    try:
        return ph.hash(password)
    except Exception as e:
        logger.error(f"Failed to hash password: {e}")
        raise


def make_unusable_password() -> str:
    """
    Build a password credential for accounts that only sign in through OAuth.

    The random secret is discarded after hashing, so nothing can match it.
    """
    return hash_password(secrets.token_urlsafe(32))

