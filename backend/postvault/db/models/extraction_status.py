"""Per-post entity extraction status."""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from postvault.db.base import Base

STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"


class ExtractionStatus(Base):
    """Whether entity extraction has run for a post.

    A post without a row has never been attempted.
    """

    __tablename__ = "extraction_status"

    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    status = Column(String(50), nullable=False)  # completed, failed
    processed_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    error = Column(Text)

    post = relationship("Post", back_populates="extraction_status")
