"""Videos router: listing, upload, retrieval, update, delete, publish toggle."""

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from videohub.database import get_db
from videohub.dependencies import get_current_user
from videohub.models.user import User
from videohub.repositories.video_repository import VideoRepository
from videohub.schemas.response import api_response
from videohub.schemas.video import (
    DeletedVideoResponse,
    VideoListItem,
    VideoListParams,
    VideoResponse,
)
from videohub.services.asset_cleanup import AssetCleanup, get_asset_cleanup
from videohub.services.media_store import get_media_store
from videohub.services.video_service import VideoService
from videohub.utils.uploads import remove_local_file, save_upload_to_temp

router = APIRouter(prefix="/videos")


def get_video_service(
    db: Annotated[Session, Depends(get_db)],
    media_store=Depends(get_media_store),
    cleanup: AssetCleanup = Depends(get_asset_cleanup),
) -> VideoService:
    return VideoService(VideoRepository(db), media_store, cleanup)


@router.get("")
async def get_all_videos(
    service: Annotated[VideoService, Depends(get_video_service)],
    page: str | None = Query(None),
    limit: str | None = Query(None),
    query: str | None = Query(None, description="Case-insensitive title search"),
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_type: str | None = Query(None, alias="sortType", description="asc or desc"),
    user_id: str | None = Query(None, alias="userId"),
):
    """
    List published videos whose title matches ``query``.

    Rows are joined with the owner's name and avatar, sorted by ``sortBy``
    (descending only when ``sortType=desc``) and paginated with
    ``page``/``limit``. ``userId`` restricts the page to one owner.
    """
    params = VideoListParams(
        page=page,
        limit=limit,
        query=query,
        sort_by=sort_by,
        sort_type=sort_type,
        user_id=user_id,
    )
    rows = service.list_videos(params)

    return api_response(
        [VideoListItem.model_validate(row) for row in rows],
        "All videos fetched successfully",
    )


@router.post("")
async def publish_a_video(
    service: Annotated[VideoService, Depends(get_video_service)],
    current_user: Annotated[User, Depends(get_current_user)],
    title: str | None = Form(None),
    description: str | None = Form(None),
    video_file: UploadFile | None = File(None, alias="videoFile"),
    thumbnail: UploadFile | None = File(None),
):
    """Upload a video and its thumbnail, then create the video record."""
    video_file_path = await save_upload_to_temp(video_file)
    thumbnail_path = await save_upload_to_temp(thumbnail)

    try:
        video = await service.publish_video(
            owner_id=current_user.id,
            title=title,
            description=description,
            video_file_path=video_file_path,
            thumbnail_path=thumbnail_path,
        )
    finally:
        remove_local_file(video_file_path)
        remove_local_file(thumbnail_path)

    return api_response(VideoResponse.model_validate(video), "Video Uploaded successfully")


@router.get("/{video_id}")
async def get_video_by_id(
    video_id: str,
    service: Annotated[VideoService, Depends(get_video_service)],
):
    video = service.get_video(video_id)
    return api_response(
        VideoResponse.model_validate(video), "Video Found and fetched successfully"
    )


@router.patch("/{video_id}")
async def update_video(
    video_id: str,
    background_tasks: BackgroundTasks,
    service: Annotated[VideoService, Depends(get_video_service)],
    current_user: Annotated[User, Depends(get_current_user)],
    title: str | None = Form(None),
    description: str | None = Form(None),
    thumbnail: UploadFile | None = File(None),
):
    """
    Replace title, description and thumbnail of a video the caller owns.

    The previous thumbnail is deleted from the media store in the
    background once the update has been saved.
    """
    thumbnail_path = await save_upload_to_temp(thumbnail)

    try:
        video = await service.update_video(
            video_id=video_id,
            caller_id=current_user.id,
            title=title,
            description=description,
            thumbnail_path=thumbnail_path,
            background_tasks=background_tasks,
        )
    finally:
        remove_local_file(thumbnail_path)

    return api_response(
        VideoResponse.model_validate(video), "The video is updated successfully"
    )


@router.delete("/{video_id}")
async def delete_video(
    video_id: str,
    background_tasks: BackgroundTasks,
    service: Annotated[VideoService, Depends(get_video_service)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    deleted_id = service.delete_video(video_id, current_user.id, background_tasks)
    return api_response(
        DeletedVideoResponse(id=deleted_id), "Video deleted successfully"
    )


@router.patch("/toggle/publish/{video_id}")
@router.patch("/{video_id}/toggle-publish")
async def toggle_publish_status(
    video_id: str,
    service: Annotated[VideoService, Depends(get_video_service)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    video = service.toggle_publish_status(video_id, current_user.id)
    return api_response(
        VideoResponse.model_validate(video), "Publish status toggled successfully"
    )
