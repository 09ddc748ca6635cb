"""CustomResourceDefinition manifest parsing."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import yaml

from .crd_models import CRDDescriptor

logger = logging.getLogger(__name__)

CRD_KIND = "CustomResourceDefinition"


class CRDManifestError(Exception):
    """Raised when manifest text cannot be parsed."""


def parse_manifest_documents(text: str) -> list[Any]:
    """Parse JSON or (multi-document) YAML manifest text."""
    try:
        return [document for document in yaml.safe_load_all(text) if document is not None]
    except yaml.YAMLError as exc:
        raise CRDManifestError(f"Failed to parse CRD manifest: {exc}") from exc


def validate_crd_manifest(manifest: Any) -> list[str]:
    """Return the validation errors of one CRD manifest, empty when it is usable."""
    if not isinstance(manifest, Mapping):
        return ["Manifest root must be a mapping."]

    errors: list[str] = []
    if not manifest.get("apiVersion") or not manifest.get("kind"):
        errors.append("Missing required fields: apiVersion and kind")
    if manifest.get("kind") != CRD_KIND:
        errors.append(f"Expected kind to be {CRD_KIND}")

    spec = manifest.get("spec")
    spec = spec if isinstance(spec, Mapping) else {}
    names = spec.get("names")
    names = names if isinstance(names, Mapping) else {}
    if not spec.get("group") or not names.get("kind"):
        errors.append("Missing required spec fields: group and names.kind")
    if not isinstance(spec.get("versions"), list):
        errors.append("Missing or invalid versions array")
    return errors


def descriptors_from_crd_manifest(
    manifest: Mapping[str, Any], *, origin: str
) -> list[CRDDescriptor]:
    """Return one descriptor per served version of a validated CRD manifest."""
    spec = manifest["spec"]
    names = spec["names"]
    descriptors: list[CRDDescriptor] = []
    for version in spec.get("versions") or []:
        if not isinstance(version, Mapping) or version.get("served") is False:
            continue
        schema = version.get("schema")
        validation = schema.get("openAPIV3Schema") if isinstance(schema, Mapping) else None
        descriptors.append(
            CRDDescriptor(
                group=spec.get("group") or "",
                version=version.get("name") or "",
                kind=names.get("kind") or "",
                plural_name=names.get("plural"),
                scope=spec.get("scope"),
                open_api_validation_schema=(
                    validation if isinstance(validation, Mapping) else None
                ),
                origin=origin,
            )
        )
    return descriptors


def descriptors_from_manifest_text(text: str, *, origin: str) -> list[CRDDescriptor]:
    """Parse `text` and return the descriptors of every valid CRD document in it."""
    descriptors: list[CRDDescriptor] = []
    for index, document in enumerate(parse_manifest_documents(text)):
        errors = validate_crd_manifest(document)
        if errors:
            logger.error("Invalid CRD in %s (document %d): %s", origin, index, ", ".join(errors))
            continue
        descriptors.extend(descriptors_from_crd_manifest(document, origin=origin))
    return descriptors
