"""Shared FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from videohub.database import get_db
from videohub.errors import AuthenticationError
from videohub.logger import auth_logger
from videohub.models.user import User
from videohub.services.auth_service import ACCESS, AuthService

bearer_scheme = HTTPBearer(auto_error=False)

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"


async def get_current_user(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> User:
    """
    Resolve the caller from a Bearer token or the ``accessToken`` cookie.

    Raises:
        AuthenticationError: when no valid access token identifies a user
    """
    token = credentials.credentials if credentials else request.cookies.get(ACCESS_TOKEN_COOKIE)
    if not token:
        raise AuthenticationError("Unauthorized request")

    token_data = AuthService.decode_token(token, ACCESS)

    user = db.query(User).filter(User.id == token_data.user_id).first()
    if not user:
        auth_logger.warning(f"Token for unknown user {token_data.user_id}")
        raise AuthenticationError("Invalid access token")

    return user
