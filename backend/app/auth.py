# backend/app/auth.py
"""
Bearer token verification.

Tokens are issued by the external identity provider and signed with the
shared ``SECRET_KEY``; this module only decodes them. ``create_access_token``
exists for local tooling and tests.
"""

from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict, Optional, cast

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
import jwt
from jwt import PyJWTError

from .core.config import settings

logger = logging.getLogger(__name__)

oauth2_scheme_optional = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)


def _secret_value(secret_obj: Any) -> str:
    getter = getattr(secret_obj, "get_secret_value", None)
    if callable(getter):
        return cast(str, getter())
    return cast(str, secret_obj)


def decode_access_token(token: str) -> Dict[str, Any]:
    payload_raw = jwt.decode(
        token,
        _secret_value(settings.secret_key),
        algorithms=[settings.algorithm],
        options={"verify_aud": False},
    )
    return cast(Dict[str, Any], payload_raw)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: The claims to encode; ``sub`` must be the user id
        expires_delta: Optional expiration time delta

    Returns:
        str: The encoded JWT token
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, _secret_value(settings.secret_key), algorithm=settings.algorithm)


def user_id_from_token(token: Optional[str]) -> str:
    """
    The ``sub`` claim of a valid bearer token.

    Raises:
        HTTPException: 401 when the token is missing, invalid or expired
    """
    not_authenticated = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
    invalid_credentials = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise not_authenticated
    try:
        payload = decode_access_token(token)
    except PyJWTError as e:
        logger.warning(f"JWT validation failed: {str(e)}")
        raise invalid_credentials

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        logger.warning("JWT payload missing 'sub' claim")
        raise invalid_credentials
    return user_id


async def get_current_user_id(token: Optional[str] = Depends(oauth2_scheme_optional)) -> str:
    """Dependency form of ``user_id_from_token``."""
    return user_id_from_token(token)
