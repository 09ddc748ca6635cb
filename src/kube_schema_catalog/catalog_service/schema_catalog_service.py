"""Schema catalog use-case service.

Owns the source registry, the raw and resolved caches and the resource index,
and exposes the operations the UI layer calls. Every operation downstream of
startup degrades instead of raising: unknown sources and resources yield
None or empty lists, and broken documents or CRDs are logged and skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from kube_schema_catalog.cluster_crds.cluster_crd_provider import ClusterCRDProvider
from kube_schema_catalog.cluster_crds.crd_models import (
    CLUSTER_CRD_SOURCE_ID,
    CLUSTER_CRD_SOURCE_NAME,
)
from kube_schema_catalog.cluster_crds.crd_schema_converter import CRDSchemaConverter
from kube_schema_catalog.resource_index.resource_index import (
    ResourceIndex,
    merge_resources,
    rank_by_relevance,
)
from kube_schema_catalog.resource_index.resource_models import FlattenedResource
from kube_schema_catalog.schema_management.schema_tree_builder import build_schema_tree
from kube_schema_catalog.schema_management.schema_models import SchemaTreeNode
from kube_schema_catalog.schema_sources.raw_schema_cache import RawSchemaCache
from kube_schema_catalog.schema_sources.raw_schema_loader import RawSchemaLoader
from kube_schema_catalog.schema_sources.schema_file_store import (
    LocalSchemaFileStore,
    SchemaFileStore,
)
from kube_schema_catalog.schema_sources.source_models import (
    RawSchemaCacheEntry,
    SchemaSource,
    SourceStats,
)
from kube_schema_catalog.schema_sources.source_registry import SchemaSourceRegistry

from .resolved_tree_cache import ResolvedTreeCache

logger = logging.getLogger(__name__)

DEFAULT_PRIMARY_SOURCE_ID = "kubernetes"


class SchemaCatalogService:  # pylint: disable=too-many-instance-attributes
    """Schema resolution and resource catalog for one process."""

    def __init__(
        self,
        *,
        file_store: SchemaFileStore | None = None,
        crd_provider: ClusterCRDProvider | None = None,
        primary_source_id: str = DEFAULT_PRIMARY_SOURCE_ID,
    ) -> None:
        self._resource_index = ResourceIndex()
        self._registry = SchemaSourceRegistry(self._resource_index)
        self._raw_cache = RawSchemaCache()
        self._tree_cache = ResolvedTreeCache()
        self._loader = RawSchemaLoader(
            file_store=file_store or LocalSchemaFileStore(),
            raw_cache=self._raw_cache,
            resource_index=self._resource_index,
        )
        self._converter = CRDSchemaConverter(
            raw_cache=self._raw_cache, resource_index=self._resource_index
        )
        self._crd_provider = crd_provider
        self._primary_source_id = primary_source_id
        self._initialized = False

    def register_schema_source(self, source: SchemaSource) -> None:
        """Register `source`; raises `SchemaSourceError` for an empty id.

        Replacing a registered source discards everything loaded for it.
        """
        self._registry.register(source)
        self._raw_cache.drop_source(source.id)
        self._tree_cache.clear_source(source.id)

    def set_source_enabled(self, source_id: str, enabled: bool) -> SchemaSource:
        return self._registry.set_enabled(source_id, enabled)

    def initialize(self) -> None:
        """Load every enabled vanilla source, replacing what an earlier call loaded."""
        sources = [
            source
            for source in self._registry.list_sources()
            if source.id != CLUSTER_CRD_SOURCE_ID
        ]
        logger.info("Initializing schema catalog with %d sources", len(sources))
        for source in sources:
            self._raw_cache.drop_source(source.id)
            self._resource_index.reset_source(source.id)
            self._tree_cache.clear_source(source.id)
            if not source.enabled:
                logger.info("Skipping disabled source: %s", source.id)
                continue
            self._loader.load(source)

        self._initialized = True
        logger.info(
            "Schema catalog initialized: %d cached documents, %d resources",
            len(self._raw_cache),
            sum(self._resource_index.resource_count(source.id) for source in sources),
        )

    def initialize_crds(self, connection_hint: str | None = None) -> int:
        """Discover and convert CRDs; returns how many were added.

        Discovery failures are logged and leave the CRD source empty.
        """
        if self._crd_provider is None:
            logger.info("No CRD provider configured; skipping CRD discovery")
            return 0
        if not self._initialized:
            logger.warning("Discovering CRDs before vanilla sources were initialized")

        self._registry.register(
            SchemaSource(
                id=CLUSTER_CRD_SOURCE_ID,
                name=CLUSTER_CRD_SOURCE_NAME,
                storage_location="cluster",
            )
        )
        self._raw_cache.drop_source(CLUSTER_CRD_SOURCE_ID)
        self._tree_cache.clear_source(CLUSTER_CRD_SOURCE_ID)

        try:
            descriptors = self._crd_provider.discover_crds(connection_hint)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.error("Failed to discover cluster CRDs: %s", exc)
            return 0

        converted = sum(1 for crd in descriptors if self._converter.convert(crd) is not None)
        logger.info("Converted %d of %d discovered CRDs", converted, len(descriptors))
        return converted

    def is_ready(self) -> bool:
        return self._initialized

    def get_available_sources(self) -> list[SchemaSource]:
        return self._registry.list_sources()

    def get_source_stats(self, source_id: str) -> SourceStats | None:
        return self._registry.get_stats(source_id)

    def get_cache_keys(self) -> list[str]:
        return self._raw_cache.keys()

    def get_resources_from_source(self, source_id: str) -> list[FlattenedResource]:
        if not self._initialized:
            return []
        return self._resource_index.resources(source_id)

    def search_in_source(
        self, source_id: str, query: str, *, ranked: bool = False
    ) -> list[FlattenedResource]:
        if not self._initialized:
            return []
        return self._resource_index.search(source_id, query, ranked=ranked)

    def search_all_sources(self, query: str, *, ranked: bool = False) -> list[FlattenedResource]:
        """Search every source, de-duplicated by (kind, apiVersion)."""
        resources = self._across_sources(
            lambda source_id: self.search_in_source(source_id, query)
        )
        if ranked:
            return rank_by_relevance(resources, query.strip().lower())
        return resources

    def get_all_resources(self) -> list[FlattenedResource]:
        return self._across_sources(self.get_resources_from_source)

    def get_resource_schema_tree(
        self, source_id: str, resource_key: str
    ) -> list[SchemaTreeNode] | None:
        """Return the resolved tree of one resource, or None when it is unknown or broken."""
        cached = self._tree_cache.get(source_id, resource_key)
        if cached is not None:
            return list(cached)

        located = self._locate_definition(source_id, resource_key)
        if located is None:
            return None
        entry, definition_key = located

        definitions = entry.document.definitions
        try:
            tree = build_schema_tree(
                definitions[definition_key],
                definitions,
                name=resource_key,
                path="",
                parent_required=(),
            )
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception("Error building schema tree for %s in %s", resource_key, source_id)
            return None

        self._tree_cache.store(source_id, resource_key, tree)
        entry.touch()
        return tree

    def get_raw_resource_schema(self, source_id: str, resource_key: str) -> Any | None:
        """Return the unresolved definition of one resource, references intact."""
        located = self._locate_definition(source_id, resource_key)
        if located is None:
            return None
        entry, definition_key = located
        return entry.document.raw_definitions[definition_key]

    def get_raw_cache_document(self, cache_key: str) -> dict[str, Any] | None:
        """Return the raw definitions document stored under `cache_key`."""
        entry = self._raw_cache.get(cache_key)
        if entry is None:
            return None
        return {"definitions": dict(entry.document.raw_definitions)}

    def _across_sources(
        self, per_source: Callable[[str], list[FlattenedResource]]
    ) -> list[FlattenedResource]:
        if not self._initialized:
            return []
        try:
            groups = [per_source(source_id) for source_id in self._resource_index.source_ids()]
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.warning(
                "Cross-source lookup failed, falling back to %s: %s", self._primary_source_id, exc
            )
            return merge_resources([per_source(self._primary_source_id)])
        return merge_resources(groups)

    def _locate_definition(
        self, source_id: str, resource_key: str
    ) -> tuple[RawSchemaCacheEntry, str] | None:
        indexed = self._resource_index.get(source_id, resource_key)
        if indexed is not None and indexed.cache_key is not None:
            entry = self._raw_cache.get(indexed.cache_key)
            if entry is not None and _is_object_definition(
                entry.document.raw_definitions.get(indexed.original_definition_key)
            ):
                return entry, indexed.original_definition_key

        candidates = self._raw_cache.entries_for_source(source_id)
        if not candidates:
            logger.warning("No raw schema cache found for source: %s", source_id)
            return None
        for _, entry in candidates:
            if _is_object_definition(entry.document.raw_definitions.get(resource_key)):
                return entry, resource_key
        logger.warning("Resource schema not found: %s in source: %s", resource_key, source_id)
        return None


def _is_object_definition(raw_definition: Any) -> bool:
    return isinstance(raw_definition, Mapping)
