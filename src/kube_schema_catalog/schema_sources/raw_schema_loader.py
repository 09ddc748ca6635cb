"""Raw schema loading service.

Reads the definitions documents of one source into the raw cache, references
intact, and indexes their resource-like definitions. Failures are logged and
never raised: a broken version directory or source contributes nothing while
everything else keeps loading.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from kube_schema_catalog.schema_management.schema_models import (
    SchemaDocument,
    parse_schema_document,
)

from .cache_keys import source_cache_key
from .raw_schema_cache import RawSchemaCache
from .schema_file_store import SchemaFileStore
from .source_models import RawSchemaCacheEntry, SchemaSource

if TYPE_CHECKING:
    from kube_schema_catalog.resource_index.resource_index import ResourceIndex

logger = logging.getLogger(__name__)

DEFINITIONS_FILENAME = "_definitions.json"


class SchemaLoadError(Exception):
    """Raised when a definitions document cannot be read or parsed."""


class RawSchemaLoader:
    """Populates the raw cache and resource index for one source at a time."""

    def __init__(
        self,
        *,
        file_store: SchemaFileStore,
        raw_cache: RawSchemaCache,
        resource_index: ResourceIndex,
    ) -> None:
        self._file_store = file_store
        self._raw_cache = raw_cache
        self._resource_index = resource_index

    def load(self, source: SchemaSource) -> None:
        """Load every definitions document of `source`; failures are logged, not raised."""
        try:
            self._load_source(source)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.error("Failed to load schema source %s: %s", source.id, exc)

    def _load_source(self, source: SchemaSource) -> None:
        location = source.storage_location
        if not self._file_store.exists(location):
            logger.error("Schema source path does not exist: %s (%s)", location, source.id)
            return

        if source.is_versioned:
            self._load_versioned_source(source)
        else:
            self._load_legacy_source(source)

        logger.info(
            "Loaded schema source %s: %d resources",
            source.id,
            self._resource_index.resource_count(source.id),
        )

    def _load_versioned_source(self, source: SchemaSource) -> None:
        version_dirs = self._file_store.list_subdirectories(source.storage_location)
        if not version_dirs:
            logger.warning("No version directories found in %s", source.storage_location)
            return

        for version in version_dirs:
            definitions_path = self._file_store.join(
                source.storage_location, version, DEFINITIONS_FILENAME
            )
            if not self._file_store.exists(definitions_path):
                logger.warning("No definitions file found: %s", definitions_path)
                continue
            try:
                document = self._read_document(definitions_path)
            except SchemaLoadError as exc:
                logger.error("Skipping %s version %s: %s", source.id, version, exc)
                continue
            self._store(source, source_cache_key(source.id, version), document, definitions_path)

    def _load_legacy_source(self, source: SchemaSource) -> None:
        definitions_path = self._file_store.join(source.storage_location, DEFINITIONS_FILENAME)
        if not self._file_store.exists(definitions_path):
            logger.warning("No definitions file found: %s", definitions_path)
            return
        try:
            document = self._read_document(definitions_path)
        except SchemaLoadError as exc:
            logger.error("Skipping schema source %s: %s", source.id, exc)
            return
        self._store(source, source_cache_key(source.id), document, definitions_path)

    def _read_document(self, definitions_path: str) -> SchemaDocument:
        try:
            text = self._file_store.read_text_file(definitions_path)
        except (OSError, UnicodeDecodeError) as exc:
            raise SchemaLoadError(f"Cannot read {definitions_path}: {exc}") from exc
        try:
            return parse_schema_document(json.loads(text))
        except json.JSONDecodeError as exc:
            raise SchemaLoadError(f"Invalid JSON in {definitions_path}: {exc}") from exc
        except ValueError as exc:
            raise SchemaLoadError(f"Invalid schema document {definitions_path}: {exc}") from exc

    def _store(
        self,
        source: SchemaSource,
        cache_key: str,
        document: SchemaDocument,
        definitions_path: str,
    ) -> None:
        self._raw_cache.store(
            cache_key,
            RawSchemaCacheEntry(
                source=source.id, document=document, origin_location=definitions_path
            ),
        )
        logger.debug(
            "Stored %s with %d definitions", cache_key, len(document.definitions)
        )
        self._resource_index.extract_resources(document, source_id=source.id, cache_key=cache_key)
