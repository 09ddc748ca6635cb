"""Memoized schema trees keyed by (source id, resource key)."""

from __future__ import annotations

from kube_schema_catalog.schema_management.schema_models import SchemaTreeNode


class ResolvedTreeCache:
    """Trees are kept until their source is reloaded; there is no eviction."""

    def __init__(self) -> None:
        self._trees: dict[tuple[str, str], tuple[SchemaTreeNode, ...]] = {}

    def __len__(self) -> int:
        return len(self._trees)

    def get(self, source_id: str, resource_key: str) -> tuple[SchemaTreeNode, ...] | None:
        return self._trees.get((source_id, resource_key))

    def store(self, source_id: str, resource_key: str, tree: list[SchemaTreeNode]) -> None:
        self._trees[(source_id, resource_key)] = tuple(tree)

    def clear_source(self, source_id: str) -> None:
        for key in [key for key in self._trees if key[0] == source_id]:
            del self._trees[key]
