"""Group/version/kind inference for vanilla definition keys.

Vanilla definitions are keyed by dotted Java-style names such as
``io.k8s.api.apps.v1.Deployment``: the last segment is the kind and the two
segments before it are the group and version. This is a heuristic; keys that
do not end in ``{group}.{version}.{kind}`` fall back to apiVersion ``v1``.
An ``x-kubernetes-group-version-kind`` annotation on the definition, when
present, takes precedence over the key.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from kube_schema_catalog.schema_sources.cache_keys import CORE_GROUP

DEFAULT_API_VERSION = "v1"
GVK_EXTENSION_KEY = "x-kubernetes-group-version-kind"

_VERSION_PATTERN = re.compile(r"^v\d+(?:(?:alpha|beta)\d+)?$")


def kind_from_definition_key(definition_key: str) -> str | None:
    """Return the last dotted segment of `definition_key`, or None when it is empty."""
    kind = definition_key.rsplit(".", 1)[-1]
    return kind or None


def api_version_from_definition_key(definition_key: str) -> str:
    """Infer ``{group}/{version}`` from the two segments preceding the kind."""
    segments = definition_key.split(".")
    if len(segments) < 3:
        return DEFAULT_API_VERSION
    group, version = segments[-3], segments[-2]
    if not group or not _VERSION_PATTERN.match(version):
        return DEFAULT_API_VERSION
    return join_api_version(group, version)


def api_version_from_metadata(definition: Any) -> str | None:
    """Return the apiVersion declared by the definition's GVK annotation, if any."""
    if not isinstance(definition, Mapping):
        return None
    entries = definition.get(GVK_EXTENSION_KEY)
    if not isinstance(entries, list):
        return None
    for entry in entries:
        if not isinstance(entry, Mapping):
            continue
        version = entry.get("version")
        if isinstance(version, str) and version:
            group = entry.get("group")
            return join_api_version(group if isinstance(group, str) else "", version)
    return None


def infer_api_version(definition_key: str, definition: Any = None) -> str:
    """Return the apiVersion for a definition, preferring its GVK annotation."""
    return api_version_from_metadata(definition) or api_version_from_definition_key(
        definition_key
    )


def join_api_version(group: str, version: str) -> str:
    """Join group and version; the legacy core group has a bare version."""
    if not group or group == CORE_GROUP:
        return version
    return f"{group}/{version}"
