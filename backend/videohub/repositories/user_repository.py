"""Persistence accessors for the users collection."""

from typing import Any

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session, joinedload

from videohub.models.user import User, watch_history
from videohub.models.video import Video


class UserRepository:
    """Typed accessors over the ``users`` table."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, **fields: Any) -> User:
        user = User(**fields)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def find_by_id(self, user_id: str) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def find_by_username_or_email(
        self, username: str | None = None, email: str | None = None
    ) -> User | None:
        conditions = []
        if username:
            conditions.append(User.username == username.strip().lower())
        if email:
            conditions.append(User.email == email.strip().lower())
        if not conditions:
            return None

        return self.db.query(User).filter(or_(*conditions)).first()

    def email_taken_by_other(self, email: str, user_id: str) -> bool:
        return (
            self.db.query(User)
            .filter(User.email == email.strip().lower(), User.id != user_id)
            .first()
            is not None
        )

    def find_by_id_and_update(self, user_id: str, values: dict[str, Any]) -> User | None:
        updated = (
            self.db.query(User)
            .filter(User.id == user_id)
            .update(values, synchronize_session=False)
        )
        self.db.commit()

        if not updated:
            return None

        user = self.find_by_id(user_id)
        if user is not None:
            self.db.refresh(user)
        return user

    def get_watch_history(self, user_id: str) -> list[Video]:
        """Watched videos in stored order, with owners eagerly loaded."""
        return (
            self.db.query(Video)
            .join(watch_history, watch_history.c.video_id == Video.id)
            .filter(watch_history.c.user_id == user_id)
            .options(joinedload(Video.owner))
            .order_by(watch_history.c.position.asc())
            .all()
        )

    def get_channel_profile(self, username: str) -> tuple[User, int] | None:
        """A user looked up by username, with the number of their published videos."""
        return (
            self.db.query(User, func.count(Video.id))
            .outerjoin(
                Video,
                and_(Video.owner_id == User.id, Video.is_published.is_(True)),
            )
            .filter(User.username == username.strip().lower())
            .group_by(User.id)
            .first()
        )
