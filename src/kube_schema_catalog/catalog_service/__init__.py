"""Catalog service exports."""

from .resolved_tree_cache import ResolvedTreeCache
from .schema_catalog_service import DEFAULT_PRIMARY_SOURCE_ID, SchemaCatalogService

__all__ = [
    "ResolvedTreeCache",
    "DEFAULT_PRIMARY_SOURCE_ID",
    "SchemaCatalogService",
]
