from videohub.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    Token,
    TokenData,
)
from videohub.schemas.response import ApiErrorResponse, ApiResponse
from videohub.schemas.user import (
    ChangePasswordRequest,
    ChannelProfileResponse,
    UserResponse,
    UserUpdate,
)
from videohub.schemas.video import (
    DeletedVideoResponse,
    VideoListItem,
    VideoListParams,
    VideoResponse,
    WatchHistoryItem,
)

__all__ = [
    "Token",
    "TokenData",
    "LoginRequest",
    "LoginResponse",
    "RefreshTokenRequest",
    "ApiResponse",
    "ApiErrorResponse",
    "UserResponse",
    "UserUpdate",
    "ChangePasswordRequest",
    "ChannelProfileResponse",
    "VideoResponse",
    "VideoListItem",
    "VideoListParams",
    "DeletedVideoResponse",
    "WatchHistoryItem",
]
