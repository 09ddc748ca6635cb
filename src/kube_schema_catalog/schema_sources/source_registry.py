"""Schema source registry."""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING

from .source_models import SchemaSource, SourceStats

if TYPE_CHECKING:
    from kube_schema_catalog.resource_index.resource_index import ResourceIndex

logger = logging.getLogger(__name__)


class SchemaSourceError(Exception):
    """Raised when a schema source cannot be registered."""


class SchemaSourceRegistry:
    """Registered schema sources, each paired with its resource index."""

    def __init__(self, resource_index: ResourceIndex) -> None:
        self._sources: dict[str, SchemaSource] = {}
        self._resource_index = resource_index

    def register(self, source: SchemaSource) -> None:
        """Add or replace `source` and reset its resource index."""
        if not source.id or not source.id.strip():
            raise SchemaSourceError("Schema source id must not be empty.")
        if source.id in self._sources:
            logger.info("Replacing schema source %s", source.id)
        self._sources[source.id] = source
        self._resource_index.reset_source(source.id)

    def get(self, source_id: str) -> SchemaSource | None:
        return self._sources.get(source_id)

    def list_sources(self) -> list[SchemaSource]:
        return list(self._sources.values())

    def set_enabled(self, source_id: str, enabled: bool) -> SchemaSource:
        """Toggle the enabled flag, the only mutable attribute of a registered source."""
        source = self._sources.get(source_id)
        if source is None:
            raise SchemaSourceError(f"Unknown schema source: {source_id}")
        updated = dataclasses.replace(source, enabled=enabled)
        self._sources[source_id] = updated
        return updated

    def get_stats(self, source_id: str) -> SourceStats | None:
        source = self._sources.get(source_id)
        if source is None:
            return None
        return SourceStats(
            resource_count=self._resource_index.resource_count(source_id),
            enabled=source.enabled,
        )
