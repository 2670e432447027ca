"""Post-Entity association model."""
from sqlalchemy import Column, Float, ForeignKey, Index, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from postvault.db.base import Base


class EntityLink(Base):
    """Evidence that an entity was mentioned in a post."""

    __tablename__ = "entity_links"

    id = Column(Integer, primary_key=True, autoincrement=True)
    entity_id = Column(Integer, ForeignKey("entities.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    confidence = Column(Float, nullable=False, default=1.0)
    context = Column(Text)

    # Relationships
    entity = relationship("Entity", back_populates="links")
    post = relationship("Post", back_populates="entity_links")

    __table_args__ = (
        UniqueConstraint("entity_id", "post_id", name="uq_entity_links_entity_post"),
        Index("idx_entity_links_post", "post_id"),
    )
