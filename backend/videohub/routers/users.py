"""Users router: registration, sessions, account details, channel profile and watch history."""

from typing import Annotated

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Body,
    Depends,
    File,
    Form,
    Request,
    UploadFile,
    status,
)
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from videohub.config import settings
from videohub.database import get_db
from videohub.dependencies import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    get_current_user,
)
from videohub.models.user import User
from videohub.repositories.user_repository import UserRepository
from videohub.schemas.auth import LoginRequest, LoginResponse, RefreshTokenRequest, Token
from videohub.schemas.response import api_response
from videohub.schemas.user import (
    ChangePasswordRequest,
    ChannelProfileResponse,
    UserResponse,
    UserUpdate,
)
from videohub.schemas.video import WatchHistoryItem
from videohub.services.asset_cleanup import AssetCleanup, get_asset_cleanup
from videohub.services.media_store import get_media_store
from videohub.services.user_service import UserService
from videohub.utils.uploads import remove_local_file, save_upload_to_temp

router = APIRouter(prefix="/users")


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
    media_store=Depends(get_media_store),
    cleanup: AssetCleanup = Depends(get_asset_cleanup),
) -> UserService:
    return UserService(UserRepository(db), media_store, cleanup)


def _set_auth_cookies(response: JSONResponse, tokens: dict[str, str]) -> JSONResponse:
    for name, value in (
        (ACCESS_TOKEN_COOKIE, tokens["access_token"]),
        (REFRESH_TOKEN_COOKIE, tokens["refresh_token"]),
    ):
        response.set_cookie(
            name,
            value,
            httponly=True,
            secure=settings.cookie_secure,
            samesite="lax",
        )
    return response


def _clear_auth_cookies(response: JSONResponse) -> JSONResponse:
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    response.delete_cookie(REFRESH_TOKEN_COOKIE)
    return response


@router.post("/register")
async def register_user(
    service: Annotated[UserService, Depends(get_user_service)],
    full_name: str | None = Form(None, alias="fullName"),
    email: str | None = Form(None),
    username: str | None = Form(None),
    password: str | None = Form(None),
    avatar: UploadFile | None = File(None),
    cover_image: UploadFile | None = File(None, alias="coverImage"),
):
    """Create an account; the avatar image is required, the cover image optional."""
    avatar_path = await save_upload_to_temp(avatar)
    cover_image_path = await save_upload_to_temp(cover_image)

    try:
        user = await service.register(
            full_name=full_name,
            email=email,
            username=username,
            password=password,
            avatar_path=avatar_path,
            cover_image_path=cover_image_path,
        )
    finally:
        remove_local_file(avatar_path)
        remove_local_file(cover_image_path)

    return api_response(
        UserResponse.model_validate(user),
        "User registered successfully",
        status_code=status.HTTP_201_CREATED,
    )


@router.post("/login")
async def login_user(
    payload: LoginRequest,
    service: Annotated[UserService, Depends(get_user_service)],
):
    """
    Log in with username or email and password.

    Returns the token pair in the body and sets both as http-only cookies.
    """
    user, tokens = service.login(payload.username, payload.email, payload.password)

    body = LoginResponse(
        user=UserResponse.model_validate(user),
        access_token=tokens["access_token"],
        refresh_token=tokens["refresh_token"],
    )
    return _set_auth_cookies(api_response(body, "User logged in successfully"), tokens)


@router.post("/logout")
async def logout_user(
    service: Annotated[UserService, Depends(get_user_service)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    service.logout(current_user)
    return _clear_auth_cookies(api_response({}, "User logged out"))


@router.post("/refresh-token")
async def refresh_access_token(
    request: Request,
    service: Annotated[UserService, Depends(get_user_service)],
    payload: RefreshTokenRequest | None = Body(None),
):
    """Exchange the current refresh token (cookie or body) for a new pair."""
    incoming = request.cookies.get(REFRESH_TOKEN_COOKIE) or (
        payload.refresh_token if payload else None
    )
    tokens = service.refresh_access_token(incoming)

    body = Token(
        access_token=tokens["access_token"], refresh_token=tokens["refresh_token"]
    )
    return _set_auth_cookies(api_response(body, "Access token refreshed"), tokens)


@router.post("/change-password")
async def change_current_password(
    payload: ChangePasswordRequest,
    service: Annotated[UserService, Depends(get_user_service)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    service.change_password(current_user, payload.old_password, payload.new_password)
    return api_response({}, "Password changed successfully")


@router.get("/current-user")
async def current_user_details(
    current_user: Annotated[User, Depends(get_current_user)],
):
    return api_response(
        UserResponse.model_validate(current_user), "Current user fetched successfully"
    )


@router.patch("/update-account")
async def update_account_details(
    payload: UserUpdate,
    service: Annotated[UserService, Depends(get_user_service)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    user = service.update_account(current_user, payload.full_name, payload.email)
    return api_response(
        UserResponse.model_validate(user), "Account details updated successfully"
    )


@router.patch("/update-user-avatar")
async def update_user_avatar(
    background_tasks: BackgroundTasks,
    service: Annotated[UserService, Depends(get_user_service)],
    current_user: Annotated[User, Depends(get_current_user)],
    avatar: UploadFile | None = File(None),
):
    local_path = await save_upload_to_temp(avatar)
    try:
        user = await service.update_avatar(current_user, local_path, background_tasks)
    finally:
        remove_local_file(local_path)

    return api_response(UserResponse.model_validate(user), "Avatar updated successfully")


@router.patch("/update-user-coverImage")
async def update_user_cover_image(
    background_tasks: BackgroundTasks,
    service: Annotated[UserService, Depends(get_user_service)],
    current_user: Annotated[User, Depends(get_current_user)],
    cover_image: UploadFile | None = File(None, alias="coverImage"),
):
    local_path = await save_upload_to_temp(cover_image)
    try:
        user = await service.update_cover_image(current_user, local_path, background_tasks)
    finally:
        remove_local_file(local_path)

    return api_response(
        UserResponse.model_validate(user), "Cover image updated successfully"
    )


@router.get("/c/{username}")
async def get_channel_profile(
    username: str,
    service: Annotated[UserService, Depends(get_user_service)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Public profile of a channel with its published video count."""
    user, videos_count = service.get_channel_profile(username)

    profile = ChannelProfileResponse.model_validate(
        {**UserResponse.model_validate(user).model_dump(), "videos_count": videos_count}
    )
    return api_response(profile, "User channel fetched successfully")


@router.get("/history")
async def get_watch_history(
    service: Annotated[UserService, Depends(get_user_service)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    videos = service.get_watch_history(current_user)
    return api_response(
        [WatchHistoryItem.model_validate(video) for video in videos],
        "Watch history fetched successfully",
    )
