from pydantic import BaseModel

from videohub.schemas.user import UserResponse
from videohub.schemas.video import CamelModel


class Token(CamelModel):
    """JWT token pair."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    """Data extracted from JWT token."""

    user_id: str
    token_type: str


class LoginRequest(CamelModel):
    """Login with either username or email."""

    username: str | None = None
    email: str | None = None
    password: str | None = None


class LoginResponse(Token):
    user: UserResponse


class RefreshTokenRequest(CamelModel):
    """Request body for token refresh."""

    refresh_token: str | None = None
