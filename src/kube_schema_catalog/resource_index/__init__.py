"""Resource index exports."""

from .group_version_inference import (
    DEFAULT_API_VERSION,
    api_version_from_definition_key,
    api_version_from_metadata,
    infer_api_version,
    kind_from_definition_key,
)
from .resource_index import (
    ResourceIndex,
    build_flattened_resource,
    is_resource_like,
    merge_resources,
    rank_by_relevance,
    sort_by_kind,
)
from .resource_models import FlattenedResource

__all__ = [
    "DEFAULT_API_VERSION",
    "api_version_from_definition_key",
    "api_version_from_metadata",
    "infer_api_version",
    "kind_from_definition_key",
    "ResourceIndex",
    "build_flattened_resource",
    "is_resource_like",
    "merge_resources",
    "rank_by_relevance",
    "sort_by_kind",
    "FlattenedResource",
]
