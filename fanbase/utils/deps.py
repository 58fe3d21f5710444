# fanbase/utils/deps.py

import logging

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from fanbase.core.security import decode_access_token
from fanbase.db.session import get_db
from fanbase.models.user import User
from fanbase.services.auth_service import get_user_by_id, is_access_token_revoked
from fanbase.utils.exceptions import UnauthorizedError

security_logger = logging.getLogger("fanbase.security")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the bearer token to an active user, raising 401 otherwise.
    """
    try:
        claims = decode_access_token(token)
    except ValueError:
        raise UnauthorizedError("Invalid token")

    if await is_access_token_revoked(token):
        security_logger.warning("Revoked access token presented (sub=%s)", claims.get("sub"))
        raise UnauthorizedError("Token has been revoked")

    user = await get_user_by_id(db, str(claims.get("sub", "")))
    if user is None or not user.is_active:
        security_logger.warning("Token for unknown or inactive user %s", claims.get("sub"))
        raise UnauthorizedError("Inactive or non-existent user")
    return user
