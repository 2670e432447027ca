"""Services package for business logic and external integrations."""

from postvault.services.canonicalize import canonicalize
from postvault.services.entity_extraction import EntityExtractionService

__all__ = ["canonicalize", "EntityExtractionService"]
