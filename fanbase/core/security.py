# fanbase/core/security.py

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from jose import JWTError, jwt
from passlib.context import CryptContext

from fanbase.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

security_logger = logging.getLogger("fanbase.security")

ACCESS = "access"
REFRESH = "refresh"


def get_password_hash(password: str) -> str:
    try:
        return pwd_context.hash(password)
    except Exception as exc:
        security_logger.critical("Could not hash password: %s", exc, exc_info=True)
        raise


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Check a plaintext password against its bcrypt hash.
    A malformed stored hash counts as a mismatch.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as exc:
        security_logger.warning("Stored password hash rejected: %s", exc)
        return False


def _sign(
    claims: Dict[str, Any], kind: str, lifetime: timedelta, secret: str, algorithm: str
) -> str:
    issued = datetime.now(timezone.utc)
    claims.update(
        typ=kind,
        iat=issued,
        exp=issued + lifetime,
        iss=settings.JWT_ISSUER,
        aud=settings.JWT_AUDIENCE,
    )
    return jwt.encode(claims, secret, algorithm=algorithm)


def _verify(token: str, kind: str, secret: str, algorithm: str) -> Dict[str, Any]:
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except JWTError as exc:
        security_logger.warning("Rejected %s token: %s", kind, exc)
        raise ValueError(f"Invalid {kind} token") from exc
    if claims.get("typ") != kind:
        security_logger.warning("Token of type %r used as %s token", claims.get("typ"), kind)
        raise ValueError(f"Invalid {kind} token")
    return claims


def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a short-lived access token for ``subject`` (the user id).
    """
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _sign(
        {"sub": subject},
        ACCESS,
        lifetime,
        settings.ACCESS_TOKEN_SECRET,
        settings.ACCESS_TOKEN_ALGORITHM,
    )


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Return the claims of a valid access token.
    Raises ValueError for expired, tampered or foreign tokens.
    """
    return _verify(
        token, ACCESS, settings.ACCESS_TOKEN_SECRET, settings.ACCESS_TOKEN_ALGORITHM
    )


def create_refresh_token(
    subject: str, expires_delta: Optional[timedelta] = None
) -> Tuple[str, str]:
    """
    Sign a refresh token carrying a fresh ``jti``.
    Returns ``(token, jti)``; the jti is what gets stored server-side.
    """
    lifetime = expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    jti = uuid.uuid4().hex
    token = _sign(
        {"sub": subject, "jti": jti},
        REFRESH,
        lifetime,
        settings.REFRESH_TOKEN_SECRET,
        settings.REFRESH_TOKEN_ALGORITHM,
    )
    return token, jti


def decode_refresh_token(token: str) -> Dict[str, Any]:
    return _verify(
        token, REFRESH, settings.REFRESH_TOKEN_SECRET, settings.REFRESH_TOKEN_ALGORITHM
    )
