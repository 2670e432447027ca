"""Repository exports."""
from postvault.repositories.edge_repository import EdgeRepository
from postvault.repositories.entity_repository import EntityRepository
from postvault.repositories.extraction_status_repository import ExtractionStatusRepository
from postvault.repositories.post_repository import PostRepository

__all__ = [
    "PostRepository",
    "EntityRepository",
    "EdgeRepository",
    "ExtractionStatusRepository",
]
