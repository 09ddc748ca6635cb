"""CRD-to-schema conversion service.

A CRD's OpenAPI v3 validation schema is wrapped into a definitions document
shaped like a vanilla one: the resource definition (keyed by kind) holds fixed
`apiVersion`, `kind`, `metadata` and `status` properties around the CRD's
`spec` schema, next to a shared ObjectMeta definition for `metadata` to
reference.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from kube_schema_catalog.resource_index.resource_index import ResourceIndex
from kube_schema_catalog.resource_index.resource_models import FlattenedResource
from kube_schema_catalog.schema_management.schema_models import (
    REFERENCE_PREFIX,
    parse_schema_document,
)
from kube_schema_catalog.schema_sources.cache_keys import (
    crd_api_version,
    crd_cache_key,
    crd_resource_key,
    group_from_api_version,
)
from kube_schema_catalog.schema_sources.raw_schema_cache import RawSchemaCache
from kube_schema_catalog.schema_sources.source_models import RawSchemaCacheEntry

from .crd_models import CLUSTER_CRD_SOURCE_ID, CRDDescriptor

logger = logging.getLogger(__name__)

OBJECT_META_DEFINITION_KEY = "io.k8s.apimachinery.pkg.apis.meta.v1.ObjectMeta"

_STRING_MAP = {"type": "object", "additionalProperties": {"type": "string"}}

OBJECT_META_DEFINITION: dict[str, Any] = {
    "type": "object",
    "description": "Standard object metadata.",
    "properties": {
        "name": {"type": "string", "description": "Name must be unique within a namespace."},
        "generateName": {
            "type": "string",
            "description": "Optional prefix used by the server to generate a unique name.",
        },
        "namespace": {"type": "string", "description": "Namespace the object belongs to."},
        "labels": {**_STRING_MAP, "description": "Map of string keys and values."},
        "annotations": {**_STRING_MAP, "description": "Unstructured key value map."},
        "finalizers": {"type": "array", "items": {"type": "string"}},
    },
}


class CRDConversionError(Exception):
    """Raised when a CRD descriptor cannot be turned into a schema document."""


class CRDSchemaConverter:
    """Stores converted CRDs in the shared raw cache and resource index."""

    def __init__(
        self,
        *,
        raw_cache: RawSchemaCache,
        resource_index: ResourceIndex,
        source_id: str = CLUSTER_CRD_SOURCE_ID,
    ) -> None:
        self._raw_cache = raw_cache
        self._resource_index = resource_index
        self._source_id = source_id

    def convert(self, crd: CRDDescriptor) -> FlattenedResource | None:
        """Convert and store `crd`; malformed descriptors are logged and skipped."""
        try:
            validate_descriptor(crd)
            cache_key = crd_cache_key(crd.group, crd.version, crd.kind)
            document = parse_schema_document(synthesize_crd_document(crd))
            resource = build_crd_resource(crd, source_id=self._source_id, cache_key=cache_key)
        except CRDConversionError as exc:
            logger.error("Skipping CRD from %s: %s", crd.origin, exc)
            return None
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.error("Skipping malformed CRD %s from %s: %s", crd.kind, crd.origin, exc)
            return None

        # Nothing is stored unless the whole descriptor converted.
        self._raw_cache.store(
            cache_key,
            RawSchemaCacheEntry(
                source=self._source_id, document=document, origin_location=crd.origin
            ),
        )
        self._resource_index.add(resource)
        logger.debug("Converted CRD %s into %s", resource.key, cache_key)
        return resource


def validate_descriptor(crd: CRDDescriptor) -> None:
    missing = [
        name
        for name in ("group", "version", "kind")
        if not isinstance(getattr(crd, name), str) or not getattr(crd, name).strip()
    ]
    if missing:
        raise CRDConversionError(f"CRD descriptor is missing {', '.join(missing)}")


def synthesize_crd_document(crd: CRDDescriptor) -> dict[str, Any]:
    """Return the definitions document wrapping `crd`'s validation schema."""
    validation = crd.open_api_validation_schema or {}
    spec_schema, status_schema = _split_validation_schema(validation)
    api_version = crd_api_version(crd.group, crd.version)

    required = ["apiVersion", "kind", "metadata"]
    declared_required = validation.get("required")
    if isinstance(declared_required, list) and "spec" in declared_required:
        required.append("spec")

    resource_definition: dict[str, Any] = {
        "type": "object",
        "required": required,
        "properties": {
            "apiVersion": {"type": "string", "enum": [api_version]},
            "kind": {"type": "string", "enum": [crd.kind]},
            "metadata": {"$ref": f"{REFERENCE_PREFIX}{OBJECT_META_DEFINITION_KEY}"},
            "spec": spec_schema,
            "status": status_schema,
        },
        "x-kubernetes-group-version-kind": [
            {"group": crd.group, "version": crd.version, "kind": crd.kind}
        ],
    }
    description = validation.get("description")
    if isinstance(description, str) and description:
        resource_definition["description"] = description

    return {
        "definitions": {
            crd.kind: resource_definition,
            OBJECT_META_DEFINITION_KEY: OBJECT_META_DEFINITION,
        }
    }


def build_crd_resource(
    crd: CRDDescriptor, *, source_id: str, cache_key: str
) -> FlattenedResource:
    api_version = crd_api_version(crd.group, crd.version)
    validation = crd.open_api_validation_schema or {}
    description = validation.get("description")
    required = validation.get("required")
    return FlattenedResource(
        key=crd_resource_key(crd.group, crd.version, crd.kind),
        kind=crd.kind,
        api_version=api_version,
        group=group_from_api_version(api_version),
        description=(
            description
            if isinstance(description, str) and description
            else f"Custom resource {crd.kind} ({crd.group})"
        ),
        required_top_level_fields=(
            tuple(item for item in required if isinstance(item, str))
            if isinstance(required, list)
            else ()
        ),
        source=source_id,
        original_definition_key=crd.kind,
        cache_key=cache_key,
    )


def _split_validation_schema(
    validation: Mapping[str, Any],
) -> tuple[Mapping[str, Any], Mapping[str, Any]]:
    """Return the (spec, status) schemas to place on the wrapper.

    Whole-object validation schemas already declare `spec`; wrapping them as
    `spec` again would nest `spec.spec`, so their own `spec`/`status` are used.
    """
    open_status: Mapping[str, Any] = {
        "type": "object",
        "description": "Most recently observed status, populated by the controller.",
        "x-kubernetes-preserve-unknown-fields": True,
    }
    properties = validation.get("properties")
    if isinstance(properties, Mapping) and isinstance(properties.get("spec"), Mapping):
        status = properties.get("status")
        return properties["spec"], status if isinstance(status, Mapping) else open_status
    if validation:
        return validation, open_status
    return {"type": "object", "x-kubernetes-preserve-unknown-fields": True}, open_status
