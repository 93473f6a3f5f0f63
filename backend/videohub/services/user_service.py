"""User account workflows: registration, sessions, profile and history."""

from fastapi import BackgroundTasks

from videohub.errors import (
    AuthenticationError,
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from videohub.logger import auth_logger
from videohub.models.user import User
from videohub.models.video import Video
from videohub.repositories.user_repository import UserRepository
from videohub.services.asset_cleanup import AssetCleanup
from videohub.services.auth_service import REFRESH, AuthService
from videohub.services.media_store import IMAGE
from videohub.validators import is_blank, normalize_email, require_fields


class UserService:
    """Account workflows built on the user repository and the media store."""

    def __init__(self, users: UserRepository, media_store, cleanup: AssetCleanup):
        self.users = users
        self.media_store = media_store
        self.cleanup = cleanup

    async def register(
        self,
        full_name: str | None,
        email: str | None,
        username: str | None,
        password: str | None,
        avatar_path: str | None,
        cover_image_path: str | None = None,
    ) -> User:
        require_fields("All fields are required", full_name, email, username, password)
        email = normalize_email(email)

        if self.users.find_by_username_or_email(username=username, email=email):
            raise ConflictError("User with email or username already exists")

        if not avatar_path:
            raise ValidationError("Avatar file is required")

        avatar = await self.media_store.upload(avatar_path, IMAGE)
        if not avatar:
            raise InternalError("Failed to upload the avatar")

        cover_image = None
        if cover_image_path:
            cover_image = await self.media_store.upload(cover_image_path, IMAGE)

        user = self.users.create(
            full_name=full_name.strip(),
            email=email,
            username=username.strip().lower(),
            password_hash=AuthService.hash_password(password),
            avatar=avatar.url,
            cover_image=cover_image.url if cover_image else None,
        )

        auth_logger.info(f"Registered user {user.id} ({user.username})")
        return user

    def _issue_tokens(self, user: User) -> dict[str, str]:
        """Create a token pair and make its refresh token the current session."""
        tokens = AuthService.create_tokens_for_user(user)
        self.users.find_by_id_and_update(user.id, {"refresh_token": tokens["refresh_token"]})
        return tokens

    def login(
        self, username: str | None, email: str | None, password: str | None
    ) -> tuple[User, dict[str, str]]:
        if is_blank(username) and is_blank(email):
            raise ValidationError("username or email is required")

        user = self.users.find_by_username_or_email(username=username, email=email)
        if not user:
            raise NotFoundError("User does not exist")

        if is_blank(password) or not AuthService.verify_password(password, user.password_hash):
            auth_logger.warning(f"Failed login for user {user.id}")
            raise AuthenticationError("Invalid user credentials")

        tokens = self._issue_tokens(user)
        auth_logger.info(f"User {user.id} logged in")
        return user, tokens

    def logout(self, user: User) -> None:
        self.users.find_by_id_and_update(user.id, {"refresh_token": None})
        auth_logger.info(f"User {user.id} logged out")

    def refresh_access_token(self, incoming_token: str | None) -> dict[str, str]:
        if not incoming_token:
            raise AuthenticationError("Unauthorized request")

        token_data = AuthService.decode_token(incoming_token, REFRESH)

        user = self.users.find_by_id(token_data.user_id)
        if not user:
            raise AuthenticationError("Invalid refresh token")

        if user.refresh_token != incoming_token:
            auth_logger.warning(f"Stale refresh token presented for user {user.id}")
            raise AuthenticationError("Refresh token is expired or used")

        return self._issue_tokens(user)

    def change_password(
        self, user: User, old_password: str | None, new_password: str | None
    ) -> None:
        if is_blank(old_password) or not AuthService.verify_password(
            old_password, user.password_hash
        ):
            raise ValidationError("Invalid old password")
        require_fields("New password is required", new_password)

        self.users.find_by_id_and_update(
            user.id, {"password_hash": AuthService.hash_password(new_password)}
        )
        auth_logger.info(f"User {user.id} changed password")

    def update_account(
        self, user: User, full_name: str | None, email: str | None
    ) -> User:
        require_fields("All fields are required", full_name, email)
        email = normalize_email(email)

        if self.users.email_taken_by_other(email, user.id):
            raise ConflictError("Email is already in use")

        return self.users.find_by_id_and_update(
            user.id,
            {"full_name": full_name.strip(), "email": email},
        )

    async def _replace_image(
        self,
        user: User,
        field: str,
        local_path: str | None,
        label: str,
        background_tasks: BackgroundTasks,
    ) -> User:
        if not local_path:
            raise ValidationError(f"{label} file is missing")

        asset = await self.media_store.upload(local_path, IMAGE)
        if not asset:
            raise InternalError(f"Error while uploading {label.lower()}")

        previous = getattr(user, field)
        updated = self.users.find_by_id_and_update(user.id, {field: asset.url})

        if previous and previous != asset.url:
            self.cleanup.schedule(background_tasks, previous, IMAGE)

        return updated

    async def update_avatar(
        self, user: User, local_path: str | None, background_tasks: BackgroundTasks
    ) -> User:
        return await self._replace_image(user, "avatar", local_path, "Avatar", background_tasks)

    async def update_cover_image(
        self, user: User, local_path: str | None, background_tasks: BackgroundTasks
    ) -> User:
        return await self._replace_image(
            user, "cover_image", local_path, "Cover image", background_tasks
        )

    def get_channel_profile(self, username: str | None) -> tuple[User, int]:
        if is_blank(username):
            raise ValidationError("username is missing")

        profile = self.users.get_channel_profile(username)
        if not profile:
            raise NotFoundError("channel does not exist")

        return profile

    def get_watch_history(self, user: User) -> list[Video]:
        return self.users.get_watch_history(user.id)
