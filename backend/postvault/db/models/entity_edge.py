"""Entity co-occurrence edges."""
from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, String, UniqueConstraint

from postvault.db.base import Base


class EntityEdge(Base):
    """Undirected co-occurrence edge between two entities of the same user.

    Stored with source_entity_id < target_entity_id so each unordered pair
    has exactly one row per user.
    """

    __tablename__ = "entity_edges"

    id = Column(Integer, primary_key=True, autoincrement=True)
    source_entity_id = Column(Integer, ForeignKey("entities.id", ondelete="CASCADE"), nullable=False)
    target_entity_id = Column(Integer, ForeignKey("entities.id", ondelete="CASCADE"), nullable=False)
    relation_type = Column(String(50), nullable=False, default="co-occurrence")
    weight = Column(Integer, nullable=False, default=1)
    user_id = Column(String(255), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("source_entity_id", "target_entity_id", "user_id", name="uq_entity_edges_pair_user"),
        CheckConstraint("source_entity_id < target_entity_id", name="ck_entity_edges_ordered_pair"),
        CheckConstraint("weight >= 1", name="ck_entity_edges_weight_positive"),
        Index("idx_entity_edges_source", "source_entity_id"),
        Index("idx_entity_edges_target", "target_entity_id"),
    )
