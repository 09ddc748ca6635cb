"""Schema source exports."""

from .cache_keys import (
    CORE_GROUP,
    crd_api_version,
    crd_cache_key,
    crd_resource_key,
    group_from_api_version,
    resource_index_key,
    source_cache_key,
    versioned_cache_prefix,
)
from .raw_schema_cache import RawSchemaCache
from .raw_schema_loader import DEFINITIONS_FILENAME, RawSchemaLoader, SchemaLoadError
from .schema_file_store import LocalSchemaFileStore, SchemaFileStore
from .source_models import (
    VERSIONED_SOURCE_IDS,
    RawSchemaCacheEntry,
    SchemaSource,
    SourceStats,
)
from .source_registry import SchemaSourceError, SchemaSourceRegistry

__all__ = [
    "CORE_GROUP",
    "crd_api_version",
    "crd_cache_key",
    "crd_resource_key",
    "group_from_api_version",
    "resource_index_key",
    "source_cache_key",
    "versioned_cache_prefix",
    "RawSchemaCache",
    "DEFINITIONS_FILENAME",
    "RawSchemaLoader",
    "SchemaLoadError",
    "LocalSchemaFileStore",
    "SchemaFileStore",
    "VERSIONED_SOURCE_IDS",
    "RawSchemaCacheEntry",
    "SchemaSource",
    "SourceStats",
    "SchemaSourceError",
    "SchemaSourceRegistry",
]
