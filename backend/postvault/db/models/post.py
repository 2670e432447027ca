"""Saved post model."""
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from postvault.db.base import Base


class Post(Base):
    """A post saved by a user from LinkedIn, Substack, etc."""

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), nullable=False, index=True)

    # Source
    original_url = Column(String(2000))
    platform = Column(String(50), default="linkedin")
    author_name = Column(String(255))
    author_url = Column(String(2000))
    image_url = Column(String(2000))

    # Content
    content = Column(Text, nullable=False)
    summary = Column(Text)
    tags = Column(JSON, default=list)
    is_favorite = Column(Boolean, default=False)

    # Timestamps
    published_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # Relationships
    entity_links = relationship("EntityLink", back_populates="post", cascade="all, delete-orphan", passive_deletes=True)
    extraction_status = relationship(
        "ExtractionStatus", back_populates="post", uselist=False, cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (Index("idx_posts_user_created", "user_id", "created_at"),)
