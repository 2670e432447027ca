"""Entity model for the per-user knowledge graph."""
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from postvault.db.base import Base

ENTITY_TYPES = ("person", "company", "topic", "technology")


class Entity(Base):
    """Named entity extracted from a user's posts, deduplicated on canonical name."""

    __tablename__ = "entities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), nullable=False, index=True)
    name = Column(Text, nullable=False)  # first-seen spelling
    canonical_name = Column(Text, nullable=False)
    type = Column(String(50), nullable=False)
    description = Column(Text)
    mention_count = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # Relationships
    links = relationship("EntityLink", back_populates="entity", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        UniqueConstraint("user_id", "canonical_name", "type", name="uq_entities_user_canonical_type"),
        CheckConstraint("mention_count >= 1", name="ck_entities_mention_count_positive"),
        CheckConstraint(
            "type IN (" + ", ".join(f"'{t}'" for t in ENTITY_TYPES) + ")",
            name="ck_entities_type",
        ),
        Index("idx_entities_user_type", "user_id", "type"),
    )
