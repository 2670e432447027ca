"""Database models package."""
from postvault.db.models.entity import Entity
from postvault.db.models.entity_edge import EntityEdge
from postvault.db.models.entity_link import EntityLink
from postvault.db.models.extraction_status import ExtractionStatus
from postvault.db.models.post import Post

__all__ = [
    "Post",
    "Entity",
    "EntityLink",
    "EntityEdge",
    "ExtractionStatus",
]
