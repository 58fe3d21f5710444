# fanbase/services/auth_service.py
"""
Account registration, credential checks and token lifecycle.

Refresh tokens are tracked in Redis by ``jti``: a refresh token is valid only
while its key exists, so rotating or logging out deletes the key. Access
tokens are stateless; logging out blacklists the token until it expires.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fanbase.core.security import (
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
    get_password_hash,
    verify_password,
)
from fanbase.db.redis import redis_client
from fanbase.models.user import User
from fanbase.schemas.auth import LoginRequest, RegisterRequest
from fanbase.utils.exceptions import (
    ConflictError,
    ServiceUnavailableError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("audit")
security_logger = logging.getLogger("fanbase.security")

EMAIL_TAKEN = "Email already registered. Please log in instead."


def _refresh_key(jti: str) -> str:
    return f"refresh:jti:{jti}"


def _revoked_key(token: str) -> str:
    return f"revoked_token:{token}"


def _seconds_left(claims: dict) -> int:
    return int(claims["exp"]) - int(datetime.now(timezone.utc).timestamp())


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    stmt = select(User).where(User.email == email.strip().lower())
    return (await db.execute(stmt)).scalars().first()


async def get_user_by_id(db: AsyncSession, user_id: str) -> Optional[User]:
    try:
        key = uuid.UUID(user_id)
    except ValueError:
        logger.warning("Malformed user id in token: %r", user_id)
        return None
    return (await db.execute(select(User).where(User.id == key))).scalars().first()


async def register_user(db: AsyncSession, data: RegisterRequest) -> User:
    """
    Create an account. Emails are unique case-insensitively since they are
    stored lower-cased.
    """
    if await get_user_by_email(db, data.email):
        security_logger.warning("Registration with existing email %s", data.email)
        raise ConflictError(EMAIL_TAKEN)

    user = User(
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        hashed_password=get_password_hash(data.password),
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(EMAIL_TAKEN)
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("Could not register %s: %s", data.email, exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")

    logger.info("Registered user %s", user.id)
    audit_logger.info("User registered: id=%s email=%s", user.id, user.email)
    return user


async def authenticate_user(db: AsyncSession, data: LoginRequest) -> User:
    """
    Check email and password and stamp ``last_login``.
    Unknown email, wrong password and deactivated accounts look the same.
    """
    user = await get_user_by_email(db, data.email)
    if (
        user is None
        or not user.is_active
        or not verify_password(data.password, user.hashed_password)
    ):
        security_logger.warning("Failed login for email=%s", data.email)
        raise UnauthorizedError("Invalid email or password")

    user_id = user.id
    user.last_login = datetime.now(timezone.utc)
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        # rollback expires the instance, so only log the bound id
        await db.rollback()
        logger.error("Could not record login of %s: %s", user_id, exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")

    audit_logger.info("User login: id=%s email=%s", user.id, user.email)
    return user


async def issue_tokens(user: User) -> Tuple[str, str]:
    """
    Return a new ``(access_token, refresh_token)`` pair for ``user``.
    The refresh token's jti is stored in Redis for the token's lifetime.
    """
    access = create_access_token(subject=str(user.id))
    refresh, jti = create_refresh_token(subject=str(user.id))
    ttl = _seconds_left(decode_refresh_token(refresh))
    await redis_client.set(_refresh_key(jti), str(user.id), ex=ttl)
    return access, refresh


async def is_refresh_token_revoked(token: str) -> bool:
    try:
        jti = decode_refresh_token(token).get("jti")
    except ValueError:
        return True
    if not jti:
        return True
    return not await redis_client.exists(_refresh_key(jti))


async def revoke_refresh_token(token: str) -> None:
    try:
        jti = decode_refresh_token(token).get("jti")
    except ValueError:
        logger.info("Ignoring revocation of an invalid refresh token")
        return
    if jti and await redis_client.delete(_refresh_key(jti)):
        audit_logger.info("Refresh token revoked: jti=%s", jti)


async def rotate_refresh_token(
    db: AsyncSession, token: Optional[str]
) -> Tuple[User, str, str]:
    """
    Exchange a live refresh token for a new token pair.
    The presented token is revoked, so replaying it later fails with 401.
    """
    if not token:
        security_logger.warning("Refresh attempted without a refresh cookie")
        raise UnauthorizedError("Refresh token missing")
    if await is_refresh_token_revoked(token):
        security_logger.warning("Revoked or reused refresh token presented")
        raise UnauthorizedError("Refresh token revoked")

    user_id = decode_refresh_token(token).get("sub")
    user = await get_user_by_id(db, str(user_id))
    if user is None or not user.is_active:
        security_logger.warning("Refresh token for unknown or inactive user %s", user_id)
        raise UnauthorizedError("Invalid user")

    await revoke_refresh_token(token)
    access, refresh = await issue_tokens(user)
    audit_logger.info("Token refresh: id=%s", user.id)
    return user, access, refresh


async def revoke_access_token(token: str) -> None:
    """Blacklist an access token until it would have expired anyway."""
    try:
        claims = decode_access_token(token)
    except ValueError:
        return
    ttl = _seconds_left(claims)
    if ttl > 0:
        await redis_client.set(_revoked_key(token), "1", ex=ttl)
        audit_logger.info("Access token revoked: user=%s", claims.get("sub"))


async def is_access_token_revoked(token: str) -> bool:
    return bool(await redis_client.get(_revoked_key(token)))
