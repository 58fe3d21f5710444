# fanbase/api/auth.py

from fastapi import APIRouter, Depends, Request, Response, status
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncSession

from fanbase.core.config import settings
from fanbase.db.session import get_db
from fanbase.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from fanbase.services.auth_service import (
    authenticate_user,
    issue_tokens,
    register_user,
    revoke_access_token,
    revoke_refresh_token,
    rotate_refresh_token,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])
limiter = Limiter(key_func=get_remote_address)

REFRESH_COOKIE = "refresh_token"
COOKIE_OPTIONS = {
    "httponly": True,
    "secure": settings.REFRESH_COOKIE_SECURE,
    "samesite": "strict",
    "path": "/",
}


def _token_response(response: Response, access: str, refresh: str) -> TokenResponse:
    # The refresh token only ever travels in the httpOnly cookie
    response.set_cookie(
        REFRESH_COOKIE,
        refresh,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 86400,
        **COOKIE_OPTIONS,
    )
    return TokenResponse(access_token=access, refresh_token="stored in httpOnly cookie")


@router.post(
    "/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED
)
async def register(
    data: RegisterRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Create an account and sign the new user in."""
    user = await register_user(db, data)
    return _token_response(response, *await issue_tokens(user))


@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.RATE_LIMIT_LOGIN)
async def login(
    request: Request,
    data: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    user = await authenticate_user(db, data)
    return _token_response(response, *await issue_tokens(user))


@router.post("/refresh", response_model=TokenResponse)
@limiter.limit(settings.RATE_LIMIT_REFRESH)
async def refresh(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """
    Rotate tokens using the refresh cookie. The old refresh token stops
    working immediately.
    """
    _, access, new_refresh = await rotate_refresh_token(
        db, request.cookies.get(REFRESH_COOKIE)
    )
    return _token_response(response, access, new_refresh)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(request: Request):
    """
    End the session: revoke the refresh cookie and, when sent, the bearer
    access token.
    """
    refresh_token = request.cookies.get(REFRESH_COOKIE)
    if refresh_token:
        await revoke_refresh_token(refresh_token)

    scheme, _, access = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() == "bearer" and access:
        await revoke_access_token(access)

    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(REFRESH_COOKIE, **COOKIE_OPTIONS)
    return response
