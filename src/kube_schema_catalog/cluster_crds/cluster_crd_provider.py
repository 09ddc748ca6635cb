"""CRD discovery providers."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any, Protocol

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException

from .crd_manifests import (
    CRD_KIND,
    CRDManifestError,
    descriptors_from_crd_manifest,
    descriptors_from_manifest_text,
    validate_crd_manifest,
)
from .crd_models import CRDDescriptor

logger = logging.getLogger(__name__)

ApiFactory = Callable[[str | None], Any]

_CRD_API_VERSION = "apiextensions.k8s.io/v1"


class CRDDiscoveryError(Exception):
    """Raised when CRDs cannot be discovered."""


class ClusterCRDProvider(Protocol):
    """Source of CRD descriptors; may raise on connectivity failure."""

    def discover_crds(self, connection_hint: str | None = None) -> list[CRDDescriptor]: ...


class KubernetesCRDProvider:
    """Lists CustomResourceDefinitions through the Kubernetes API.

    `connection_hint` selects the kubeconfig context; None uses the current one.
    """

    def __init__(
        self,
        *,
        kubeconfig_path: str | None = None,
        api_factory: ApiFactory | None = None,
    ) -> None:
        self._kubeconfig_path = kubeconfig_path
        self._api_factory = api_factory or self._default_api_factory

    def discover_crds(self, connection_hint: str | None = None) -> list[CRDDescriptor]:
        try:
            api = self._api_factory(connection_hint)
            response = api.list_custom_resource_definition()
        except (ApiException, ConfigException) as exc:
            raise CRDDiscoveryError(f"Failed to list cluster CRDs: {exc}") from exc

        items = response.items or []
        logger.info("Found %d CRDs in cluster", len(items))
        descriptors: list[CRDDescriptor] = []
        for item in items:
            manifest = _to_manifest(api, item)
            name = (manifest.get("metadata") or {}).get("name", "<unnamed>")
            # List items come back without apiVersion/kind set.
            errors = validate_crd_manifest(
                {
                    **manifest,
                    "apiVersion": manifest.get("apiVersion") or _CRD_API_VERSION,
                    "kind": manifest.get("kind") or CRD_KIND,
                }
            )
            if errors:
                logger.warning("Skipping cluster CRD %s: %s", name, ", ".join(errors))
                continue
            descriptors.extend(descriptors_from_crd_manifest(manifest, origin=f"cluster:{name}"))
        return descriptors

    def _default_api_factory(self, context: str | None) -> Any:
        api_client = config.new_client_from_config(
            config_file=self._kubeconfig_path, context=context
        )
        return client.ApiextensionsV1Api(api_client)


class ManifestCRDProvider:
    """Reads CRDs from manifest files on disk."""

    def __init__(self, manifest_paths: Sequence[Path | str]) -> None:
        self._manifest_paths = tuple(Path(path) for path in manifest_paths)

    def discover_crds(self, connection_hint: str | None = None) -> list[CRDDescriptor]:
        descriptors: list[CRDDescriptor] = []
        for path in self._manifest_paths:
            try:
                text = path.read_text(encoding="utf-8")
                descriptors.extend(descriptors_from_manifest_text(text, origin=str(path)))
            except (OSError, CRDManifestError) as exc:
                logger.error("Skipping CRD manifest %s: %s", path, exc)
        return descriptors


class CompositeCRDProvider:
    """Concatenates the descriptors of several providers."""

    def __init__(self, providers: Sequence[ClusterCRDProvider]) -> None:
        self._providers = tuple(providers)

    def discover_crds(self, connection_hint: str | None = None) -> list[CRDDescriptor]:
        descriptors: list[CRDDescriptor] = []
        for provider in self._providers:
            try:
                descriptors.extend(provider.discover_crds(connection_hint))
            except Exception as exc:  # pylint: disable=broad-exception-caught
                logger.error("CRD provider %s failed: %s", type(provider).__name__, exc)
        return descriptors


def _to_manifest(api: Any, item: Any) -> Mapping[str, Any]:
    if isinstance(item, Mapping):
        return item
    return api.api_client.sanitize_for_serialization(item)
