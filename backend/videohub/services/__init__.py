from videohub.services.auth_service import AuthService
from videohub.services.user_service import UserService
from videohub.services.video_service import VideoService

__all__ = ["AuthService", "UserService", "VideoService"]
