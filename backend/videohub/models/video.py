import uuid
from datetime import datetime
from sqlalchemy import (
    Column,
    Integer,
    Float,
    String,
    DateTime,
    Text,
    ForeignKey,
    Boolean,
    Index,
)
from sqlalchemy.orm import relationship

from videohub.database import Base


class Video(Base):
    """Uploaded video and its media-store assets."""

    __tablename__ = "videos"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Media store URLs
    video_file = Column(String(512), nullable=False)
    thumbnail = Column(String(512), nullable=False)

    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)

    # Seconds, as reported by the media store at upload time
    duration = Column(Float, default=0, nullable=False)
    views = Column(Integer, default=0, nullable=False)
    is_published = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    # Relationships
    owner = relationship("User")

    __table_args__ = (
        Index("idx_owner_published", "owner_id", "is_published"),
    )
