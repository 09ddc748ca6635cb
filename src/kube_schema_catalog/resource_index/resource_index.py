"""Per-source resource index and search."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from kube_schema_catalog.schema_management.schema_models import SchemaDocument
from kube_schema_catalog.schema_sources.cache_keys import (
    group_from_api_version,
    resource_index_key,
)

from .group_version_inference import infer_api_version, kind_from_definition_key
from .resource_models import FlattenedResource

logger = logging.getLogger(__name__)

_RESOURCE_MARKER_PROPERTIES = ("kind", "apiVersion", "metadata")


class ResourceIndex:
    """Maps each source id to its resources keyed by ``{apiVersion}/{kind}``."""

    def __init__(self) -> None:
        self._resources_by_source: dict[str, dict[str, FlattenedResource]] = {}

    def reset_source(self, source_id: str) -> None:
        self._resources_by_source[source_id] = {}

    def source_ids(self) -> list[str]:
        return list(self._resources_by_source)

    def has_source(self, source_id: str) -> bool:
        return source_id in self._resources_by_source

    def resource_count(self, source_id: str) -> int:
        return len(self._resources_by_source.get(source_id, {}))

    def add(self, resource: FlattenedResource) -> None:
        """Insert `resource`, replacing any entry with the same key in its source."""
        source_map = self._resources_by_source.setdefault(resource.source, {})
        source_map[resource.key] = resource

    def get(self, source_id: str, key: str) -> FlattenedResource | None:
        return self._resources_by_source.get(source_id, {}).get(key)

    def extract_resources(
        self, document: SchemaDocument, *, source_id: str, cache_key: str
    ) -> int:
        """Index every resource-like definition of `document` and return how many were added."""
        added = 0
        for definition_key, raw_definition in document.raw_definitions.items():
            if not is_resource_like(raw_definition):
                continue
            resource = build_flattened_resource(
                definition_key, raw_definition, source_id=source_id, cache_key=cache_key
            )
            if resource is None:
                continue
            self.add(resource)
            added += 1
        logger.debug("Indexed %d resources from %s", added, cache_key)
        return added

    def resources(self, source_id: str) -> list[FlattenedResource]:
        """Return the resources of `source_id` sorted by kind."""
        return sort_by_kind(self._resources_by_source.get(source_id, {}).values())

    def search(self, source_id: str, query: str, *, ranked: bool = False) -> list[FlattenedResource]:
        """Return resources of `source_id` whose kind, apiVersion or description contains `query`."""
        needle = query.strip().lower()
        if not needle:
            return []
        matches = [
            resource
            for resource in self._resources_by_source.get(source_id, {}).values()
            if _matches(resource, needle)
        ]
        if ranked:
            return rank_by_relevance(matches, needle)
        return sort_by_kind(matches)


def is_resource_like(raw_definition: Any) -> bool:
    """Return True for definitions that look like Kubernetes resources.

    Bare `$ref` definitions are accepted without following the reference.
    """
    if not isinstance(raw_definition, Mapping):
        return False
    if isinstance(raw_definition.get("$ref"), str):
        return True
    properties = raw_definition.get("properties")
    if not isinstance(properties, Mapping):
        return False
    return any(name in properties for name in _RESOURCE_MARKER_PROPERTIES)


def build_flattened_resource(
    definition_key: str,
    raw_definition: Mapping[str, Any],
    *,
    source_id: str,
    cache_key: str | None = None,
) -> FlattenedResource | None:
    kind = kind_from_definition_key(definition_key)
    if kind is None:
        logger.warning("Skipping definition without kind segment: %s", definition_key)
        return None
    api_version = infer_api_version(definition_key, raw_definition)
    required = raw_definition.get("required")
    description = raw_definition.get("description")
    return FlattenedResource(
        key=resource_index_key(kind, api_version),
        kind=kind,
        api_version=api_version,
        group=group_from_api_version(api_version),
        description=description if isinstance(description, str) else None,
        required_top_level_fields=(
            tuple(item for item in required if isinstance(item, str))
            if isinstance(required, list)
            else ()
        ),
        source=source_id,
        original_definition_key=definition_key,
        cache_key=cache_key,
    )


def merge_resources(groups: Iterable[Iterable[FlattenedResource]]) -> list[FlattenedResource]:
    """Union resource lists, keeping the first resource per (kind, apiVersion), sorted by kind."""
    merged: dict[tuple[str, str | None], FlattenedResource] = {}
    for resources in groups:
        for resource in resources:
            merged.setdefault((resource.kind, resource.api_version), resource)
    return sort_by_kind(merged.values())


def sort_by_kind(resources: Iterable[FlattenedResource]) -> list[FlattenedResource]:
    return sorted(resources, key=_kind_sort_key)


def rank_by_relevance(
    resources: Iterable[FlattenedResource], needle: str
) -> list[FlattenedResource]:
    """Order exact kind matches first, then kind prefix matches, then the rest."""

    def rank(resource: FlattenedResource) -> int:
        kind = resource.kind.lower()
        if kind == needle:
            return 0
        if kind.startswith(needle):
            return 1
        return 2

    return sorted(resources, key=lambda resource: (rank(resource), *_kind_sort_key(resource)))


def _kind_sort_key(resource: FlattenedResource) -> tuple[str, str, str]:
    return (resource.kind.lower(), resource.kind, resource.api_version or "")


def _matches(resource: FlattenedResource, needle: str) -> bool:
    candidates = (resource.kind, resource.api_version, resource.description)
    return any(value and needle in value.lower() for value in candidates)
