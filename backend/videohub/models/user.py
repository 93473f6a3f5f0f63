import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, Integer, ForeignKey, Table
from sqlalchemy.orm import relationship

from videohub.database import Base

# Ordered list of videos a user has watched
watch_history = Table(
    "watch_history",
    Base.metadata,
    Column(
        "user_id",
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "video_id",
        String(36),
        ForeignKey("videos.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("position", Integer, nullable=False),
)


class User(Base):
    """Registered account that can own videos."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=False, index=True)
    avatar = Column(String(512), nullable=False)
    cover_image = Column(String(512), nullable=True)

    password_hash = Column(String(255), nullable=False)
    # Current session's refresh token; rotated on login and refresh
    refresh_token = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    # Relationships
    watch_history = relationship(
        "Video",
        secondary=watch_history,
        order_by=watch_history.c.position,
        viewonly=True,
    )
