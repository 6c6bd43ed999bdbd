"""
Security utilities for JWT authentication and password hashing
"""

import time
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

import structlog
from joserfc import jwt as jose_jwt
from joserfc.errors import BadSignatureError, DecodeError, ExpiredTokenError, InvalidTokenError
from joserfc.jwk import OctKey
from pwdlib import PasswordHash
from pwdlib.hashers.bcrypt import BcryptHasher

from newsletter_api.core.config import JWT_CONFIG, settings
from newsletter_api.core.exceptions import UnauthorizedError

logger = structlog.get_logger()

pwd_context = PasswordHash((BcryptHasher(rounds=settings.BCRYPT_ROUNDS),))

ALGORITHM = JWT_CONFIG["algorithm"]
ACCESS_TOKEN_EXPIRE_MINUTES = JWT_CONFIG["access_token_expire_minutes"]

_jwt_key = OctKey.import_key(JWT_CONFIG["secret_key"])


def create_access_token(
    subject: Union[str, Any],
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create JWT access token

    Args:
        subject: Token subject (the user id)
        expires_delta: Custom expiration time

    Returns:
        Encoded JWT token
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode = {
        "exp": int(expire.timestamp()),
        "sub": str(subject),
        "type": "access",
        "iat": int(now.timestamp())
    }

    encoded_jwt = jose_jwt.encode({"alg": ALGORITHM}, to_encode, _jwt_key)

    logger.debug("Access token created", subject=subject, expires=expire)
    return encoded_jwt


def verify_token(token: str, token_type: str = "access") -> str:
    """
    Verify JWT token and return its subject

    Raises:
        UnauthorizedError: If the token is malformed, of the wrong type or expired
    """
    try:
        payload = jose_jwt.decode(token, _jwt_key, algorithms=[ALGORITHM]).claims
    except (BadSignatureError, DecodeError, ExpiredTokenError, InvalidTokenError, ValueError) as exc:
        logger.warning("JWT verification failed", error=str(exc))
        raise UnauthorizedError("Could not validate credentials")

    if payload.get("type") != token_type:
        logger.warning("Invalid token type", expected=token_type, actual=payload.get("type"))
        raise UnauthorizedError("Invalid token type")

    subject = payload.get("sub")
    if subject is None:
        logger.warning("Token missing subject")
        raise UnauthorizedError("Invalid token: missing subject")

    exp = payload.get("exp")
    if exp and time.time() > exp:
        logger.warning("Token expired", subject=subject)
        raise UnauthorizedError("Token expired")

    return str(subject)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception as e:
        logger.error("Password verification error", error=str(e))
        return False


def get_password_hash(password: str) -> str:
    """
    Hash a password

    Bcrypt only reads the first 72 bytes, longer passwords are truncated.
    """
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > 72:
        password = password_bytes[:72].decode("utf-8", errors="ignore")
        logger.warning("Password truncated to 72 bytes for bcrypt")

    return pwd_context.hash(password)
