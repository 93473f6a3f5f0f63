from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialized with camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class VideoResponse(CamelModel):
    """Video response schema."""

    id: str
    video_file: str
    thumbnail: str
    title: str
    description: str
    duration: float
    views: int
    is_published: bool
    owner: str = Field(validation_alias="owner_id")
    created_at: datetime
    updated_at: datetime


class VideoListItem(CamelModel):
    """Row of the video listing, joined with owner display fields."""

    id: str
    title: str
    video_file: str
    thumbnail: str
    views: int
    duration: float
    created_at: datetime
    owner: str
    owner_name: str | None = None
    owner_avatar: str | None = None


class VideoListParams(BaseModel):
    """Raw listing parameters as received on the query string."""

    page: str | None = None
    limit: str | None = None
    query: str | None = None
    sort_by: str | None = None
    sort_type: str | None = None
    user_id: str | None = None


class DeletedVideoResponse(CamelModel):
    id: str


class WatchHistoryOwner(CamelModel):
    id: str
    full_name: str
    username: str
    avatar: str


class WatchHistoryItem(VideoResponse):
    """Watched video with its owner's public profile."""

    owner_profile: WatchHistoryOwner | None = Field(
        default=None, validation_alias="owner"
    )
