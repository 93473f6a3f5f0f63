"""Persistence accessors for the videos collection."""

from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from videohub.models.user import User
from videohub.models.video import Video

# API sort keys mapped to the columns they order by
SORT_FIELDS = {
    "createdAt": Video.created_at,
    "updatedAt": Video.updated_at,
    "views": Video.views,
    "duration": Video.duration,
    "title": Video.title,
}


@dataclass(frozen=True)
class VideoListingQuery:
    """Already-validated parameters of one listing page."""

    query: str
    page: int
    limit: int
    sort_by: str = "createdAt"
    descending: bool = False
    owner_id: str | None = None

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class VideoRepository:
    """Typed accessors over the ``videos`` table."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, **fields: Any) -> Video:
        video = Video(**fields)
        self.db.add(video)
        self.db.commit()
        self.db.refresh(video)
        return video

    def find_by_id(self, video_id: str) -> Video | None:
        return self.db.query(Video).filter(Video.id == video_id).first()

    def find_by_id_and_update(self, video_id: str, values: dict[str, Any]) -> Video | None:
        """Apply ``values`` in a single UPDATE and return the fresh record."""
        updated = (
            self.db.query(Video)
            .filter(Video.id == video_id)
            .update(values, synchronize_session=False)
        )
        self.db.commit()

        if not updated:
            return None

        video = self.find_by_id(video_id)
        if video is not None:
            self.db.refresh(video)
        return video

    def delete(self, video: Video) -> None:
        self.db.delete(video)
        self.db.commit()

    def aggregate(self, listing: VideoListingQuery) -> list[dict[str, Any]]:
        """
        Run the listing query: filter, join owner, sort, paginate.

        Only published videos whose title contains ``listing.query``
        (case-insensitive) are considered; the owner filter applies only
        when ``listing.owner_id`` is set. Owner fields come from a left
        join, so a missing owner yields ``None`` instead of dropping the row.
        """
        sort_column = SORT_FIELDS[listing.sort_by]
        order = sort_column.desc() if listing.descending else sort_column.asc()

        query = (
            self.db.query(
                Video.id,
                Video.title,
                Video.video_file,
                Video.thumbnail,
                Video.views,
                Video.duration,
                Video.created_at,
                Video.owner_id.label("owner"),
                User.full_name.label("owner_name"),
                User.avatar.label("owner_avatar"),
            )
            .outerjoin(User, User.id == Video.owner_id)
            .filter(Video.is_published.is_(True))
            .filter(
                Video.title.ilike(f"%{_escape_like(listing.query)}%", escape="\\")
            )
        )

        if listing.owner_id is not None:
            query = query.filter(Video.owner_id == listing.owner_id)

        rows = (
            query.order_by(order, Video.id.asc())
            .offset(listing.skip)
            .limit(listing.limit)
            .all()
        )

        return [row._asdict() for row in rows]
