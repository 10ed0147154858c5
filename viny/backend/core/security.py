"""
Security Utilities.

Password hashing and JWT helpers. Access and refresh tokens are signed
with different secrets so one can never be replayed as the other.
"""

import uuid
from datetime import timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from viny.backend.core.config import get_app_config, get_settings
from viny.backend.core.exceptions import AuthenticationError
from viny.backend.core.logging import get_logger
from viny.backend.core.utils import utc_now

logger = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def hash_password(password: str) -> str:
    """Hash a password using bcrypt with the configured cost factor."""
    rounds = get_app_config().security.password.bcrypt_rounds
    password_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        # Malformed stored hash
        return False


def _token_claims(user: Any, token_type: str) -> dict[str, Any]:
    jwt_config = get_app_config().security.jwt
    return {
        "sub": str(user.id),
        "email": user.email,
        "name": user.name,
        "type": token_type,
        "jti": str(uuid.uuid4()),
        "iss": jwt_config.issuer,
        "aud": jwt_config.audience,
    }


def create_access_token(user: Any, expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token for a user.

    Args:
        user: Object with ``id``, ``email`` and ``name`` attributes
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt

    if expires_delta is None:
        expires_delta = timedelta(minutes=jwt_config.access_token_expire_minutes)

    to_encode = _token_claims(user, ACCESS_TOKEN_TYPE)
    to_encode["exp"] = utc_now() + expires_delta
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=jwt_config.algorithm)


def create_refresh_token(user: Any, expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT refresh token for a user.

    Every token carries a fresh ``jti`` so two tokens issued in the same
    second still differ, which is what makes rotation detectable.
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt

    if expires_delta is None:
        expires_delta = timedelta(days=jwt_config.refresh_token_expire_days)

    to_encode = _token_claims(user, REFRESH_TOKEN_TYPE)
    to_encode["exp"] = utc_now() + expires_delta
    return jwt.encode(
        to_encode,
        settings.jwt_refresh_secret,
        algorithm=jwt_config.algorithm,
    )


def _decode(token: str, secret: str, token_type: str, error_message: str) -> dict[str, Any]:
    jwt_config = get_app_config().security.jwt
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[jwt_config.algorithm],
            audience=jwt_config.audience,
            issuer=jwt_config.issuer,
        )
    except JWTError as e:
        logger.warning(
            "Token decode failed",
            extra={"token_type": token_type, "error": str(e)},
        )
        raise AuthenticationError(error_message) from e

    if payload.get("type") != token_type or not str(payload.get("sub", "")).isdigit():
        logger.warning("Token has unexpected claims", extra={"token_type": token_type})
        raise AuthenticationError(error_message)

    return payload


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate an access token.

    Raises:
        AuthenticationError: If token is invalid or expired
    """
    return _decode(
        token,
        get_settings().jwt_secret,
        ACCESS_TOKEN_TYPE,
        "Invalid or expired token",
    )


def decode_refresh_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a refresh token.

    Raises:
        AuthenticationError: If token is invalid or expired
    """
    return _decode(
        token,
        get_settings().jwt_refresh_secret,
        REFRESH_TOKEN_TYPE,
        "Invalid or expired refresh token",
    )
