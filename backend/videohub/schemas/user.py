from datetime import datetime
from pydantic import EmailStr

from videohub.schemas.video import CamelModel


class UserResponse(CamelModel):
    """User response schema; never carries credentials."""

    id: str
    username: str
    email: EmailStr
    full_name: str
    avatar: str
    cover_image: str | None = None
    created_at: datetime
    updated_at: datetime


class UserUpdate(CamelModel):
    """Schema for updating account details."""

    full_name: str | None = None
    email: str | None = None


class ChangePasswordRequest(CamelModel):
    old_password: str | None = None
    new_password: str | None = None


class ChannelProfileResponse(CamelModel):
    """Public channel view of a user."""

    id: str
    username: str
    full_name: str
    email: EmailStr
    avatar: str
    cover_image: str | None = None
    videos_count: int
