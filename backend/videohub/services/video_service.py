"""Video workflows: listing, upload, update, retrieval, delete, publish toggle."""

from fastapi import BackgroundTasks

from videohub.config import settings
from videohub.errors import (
    AuthorizationError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from videohub.logger import api_logger
from videohub.models.video import Video
from videohub.repositories.video_repository import (
    SORT_FIELDS,
    VideoListingQuery,
    VideoRepository,
)
from videohub.schemas.video import VideoListParams
from videohub.services.asset_cleanup import AssetCleanup
from videohub.services.media_store import IMAGE, VIDEO
from videohub.validators import (
    MAX_SQL_INT,
    ensure_owner,
    is_blank,
    is_valid_id,
    parse_positive_int,
    require_fields,
    require_id,
)

DEFAULT_SORT_BY = "createdAt"
PAGE_MESSAGE = "Page should be a positive integer"
LIMIT_MESSAGE = "Video limit should be a positive integer"


class VideoService:
    """
    Orchestrates validation, media-store calls and persistence for videos.

    Remote calls are awaited one after another: assets are uploaded before
    the record is written, and superseded assets are only scheduled for
    deletion once the write has committed.
    """

    def __init__(
        self,
        videos: VideoRepository,
        media_store,
        cleanup: AssetCleanup,
    ):
        self.videos = videos
        self.media_store = media_store
        self.cleanup = cleanup

    def build_listing_query(self, params: VideoListParams) -> VideoListingQuery:
        """Validate raw query-string parameters into a listing query."""
        page = parse_positive_int(params.page, 1, PAGE_MESSAGE)
        limit = parse_positive_int(params.limit, settings.default_page_size, LIMIT_MESSAGE)

        # The row offset has to fit the database's OFFSET integer as well
        if (page - 1) * limit > MAX_SQL_INT:
            raise ValidationError(PAGE_MESSAGE)

        if is_blank(params.query):
            raise ValidationError("Query is required")

        owner_id = None
        if params.user_id:
            if not is_valid_id(params.user_id):
                raise ValidationError("Please provide a valid user id")
            owner_id = params.user_id

        sort_by = params.sort_by or DEFAULT_SORT_BY
        if sort_by not in SORT_FIELDS:
            raise ValidationError(
                f"sortBy must be one of: {', '.join(sorted(SORT_FIELDS))}"
            )

        return VideoListingQuery(
            query=params.query.strip(),
            page=page,
            limit=limit,
            sort_by=sort_by,
            descending=params.sort_type == "desc",
            owner_id=owner_id,
        )

    def list_videos(self, params: VideoListParams) -> list[dict]:
        listing = self.build_listing_query(params)
        return self.videos.aggregate(listing)

    async def publish_video(
        self,
        owner_id: str,
        title: str | None,
        description: str | None,
        video_file_path: str | None,
        thumbnail_path: str | None,
    ) -> Video:
        require_fields("Title and description are required fields", title, description)
        if not (video_file_path and thumbnail_path):
            raise ValidationError("no video file or thumbnail detected")

        video_asset = await self.media_store.upload(video_file_path, VIDEO)
        thumbnail_asset = await self.media_store.upload(thumbnail_path, IMAGE)

        if not (video_asset and thumbnail_asset):
            # Nothing compensates an asset that did upload; record it as leaked
            for asset in (video_asset, thumbnail_asset):
                if asset:
                    self.cleanup.ledger.record(asset.url, "sibling upload failed")
            raise InternalError(
                "Something went wrong while uploading the video or thumbnail"
            )

        if video_asset.duration is None:
            api_logger.warning(f"No duration reported for {video_asset.url}")
            for asset in (video_asset, thumbnail_asset):
                self.cleanup.ledger.record(asset.url, "video duration unavailable")
            raise InternalError("Could not read the duration of the uploaded video")

        created = self.videos.create(
            video_file=video_asset.url,
            thumbnail=thumbnail_asset.url,
            title=title.strip(),
            description=description.strip(),
            duration=video_asset.duration,
            owner_id=owner_id,
        )

        video = self.videos.find_by_id(created.id)
        if not video:
            raise InternalError("Something went wrong while uploading the video")

        api_logger.info(f"User {owner_id} published video {video.id}")
        return video

    def get_video(self, video_id: str | None) -> Video:
        if not video_id:
            raise ValidationError("Video id is required")
        if not is_valid_id(video_id):
            raise ValidationError("Invalid video ID")

        video = self.videos.find_by_id(video_id)
        if not video:
            raise NotFoundError("Video not found")

        return video

    def _get_owned_video(self, video_id: str, caller_id: str, action: str) -> Video:
        video = self.videos.find_by_id(video_id)
        if not video:
            raise NotFoundError("Video not found")

        try:
            ensure_owner(
                caller_id, video.owner_id, f"You are not authorized to {action} this video"
            )
        except AuthorizationError:
            api_logger.warning(f"User {caller_id} denied {action} on video {video_id}")
            raise
        return video

    async def update_video(
        self,
        video_id: str,
        caller_id: str,
        title: str | None,
        description: str | None,
        thumbnail_path: str | None,
        background_tasks: BackgroundTasks,
    ) -> Video:
        require_id(video_id, "Invalid video ID")

        if not thumbnail_path:
            raise ValidationError("No thumbnail file detected")
        require_fields("Title and description are required fields", title, description)

        video = self._get_owned_video(video_id, caller_id, "update")
        old_thumbnail = video.thumbnail

        thumbnail_asset = await self.media_store.upload(thumbnail_path, IMAGE)
        if not thumbnail_asset:
            raise InternalError("Failed to upload the new thumbnail")

        updated = self.videos.find_by_id_and_update(
            video_id,
            {
                "title": title.strip(),
                "description": description.strip(),
                "thumbnail": thumbnail_asset.url,
            },
        )
        if not updated:
            self.cleanup.ledger.record(thumbnail_asset.url, "video vanished during update")
            raise NotFoundError("Video not found")

        if old_thumbnail and old_thumbnail != thumbnail_asset.url:
            self.cleanup.schedule(background_tasks, old_thumbnail, IMAGE)

        api_logger.info(f"User {caller_id} updated video {video_id}")
        return updated

    def delete_video(
        self, video_id: str, caller_id: str, background_tasks: BackgroundTasks
    ) -> str:
        require_id(video_id, "Invalid video ID")
        video = self._get_owned_video(video_id, caller_id, "delete")

        video_file, thumbnail = video.video_file, video.thumbnail
        self.videos.delete(video)

        self.cleanup.schedule(background_tasks, video_file, VIDEO)
        self.cleanup.schedule(background_tasks, thumbnail, IMAGE)

        api_logger.info(f"User {caller_id} deleted video {video_id}")
        return video_id

    def toggle_publish_status(self, video_id: str, caller_id: str) -> Video:
        require_id(video_id, "Invalid video ID")
        video = self._get_owned_video(video_id, caller_id, "change the publish status of")

        updated = self.videos.find_by_id_and_update(
            video_id, {"is_published": not video.is_published}
        )
        if not updated:
            raise NotFoundError("Video not found")

        api_logger.info(
            f"User {caller_id} set video {video_id} published={updated.is_published}"
        )
        return updated
