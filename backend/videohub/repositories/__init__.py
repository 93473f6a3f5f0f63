from videohub.repositories.user_repository import UserRepository
from videohub.repositories.video_repository import (
    SORT_FIELDS,
    VideoListingQuery,
    VideoRepository,
)

__all__ = ["UserRepository", "VideoRepository", "VideoListingQuery", "SORT_FIELDS"]
