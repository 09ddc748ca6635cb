"""Cluster CRD exports."""

from .cluster_crd_provider import (
    ClusterCRDProvider,
    CompositeCRDProvider,
    CRDDiscoveryError,
    KubernetesCRDProvider,
    ManifestCRDProvider,
)
from .crd_manifests import (
    CRDManifestError,
    descriptors_from_crd_manifest,
    descriptors_from_manifest_text,
    validate_crd_manifest,
)
from .crd_models import CLUSTER_CRD_SOURCE_ID, CLUSTER_CRD_SOURCE_NAME, CRDDescriptor
from .crd_schema_converter import (
    OBJECT_META_DEFINITION_KEY,
    CRDConversionError,
    CRDSchemaConverter,
    synthesize_crd_document,
)

__all__ = [
    "ClusterCRDProvider",
    "CompositeCRDProvider",
    "CRDDiscoveryError",
    "KubernetesCRDProvider",
    "ManifestCRDProvider",
    "CRDManifestError",
    "descriptors_from_crd_manifest",
    "descriptors_from_manifest_text",
    "validate_crd_manifest",
    "CLUSTER_CRD_SOURCE_ID",
    "CLUSTER_CRD_SOURCE_NAME",
    "CRDDescriptor",
    "OBJECT_META_DEFINITION_KEY",
    "CRDConversionError",
    "CRDSchemaConverter",
    "synthesize_crd_document",
]
