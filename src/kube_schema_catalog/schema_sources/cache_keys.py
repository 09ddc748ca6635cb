"""Cache and resource key construction.

Every cache key and index key used by the catalog is built here:

- legacy source document: ``{sourceId}``
- versioned source document: ``{sourceId}-{version}``
- CRD document: ``crd-{group}-{version}-{kind}``
- index key: ``{apiVersion}/{kind}`` or bare ``{kind}``
"""

from __future__ import annotations

CORE_GROUP = "core"


def source_cache_key(source_id: str, version: str | None = None) -> str:
    if version is None:
        return source_id
    return f"{source_id}-{version}"


def versioned_cache_prefix(source_id: str) -> str:
    return f"{source_id}-"


def crd_cache_key(group: str, version: str, kind: str) -> str:
    return f"crd-{group}-{version}-{kind}"


def crd_api_version(group: str, version: str) -> str:
    return f"{group}/{version}"


def resource_index_key(kind: str, api_version: str | None = None) -> str:
    if api_version:
        return f"{api_version}/{kind}"
    return kind


def crd_resource_key(group: str, version: str, kind: str) -> str:
    return resource_index_key(kind, crd_api_version(group, version))


def group_from_api_version(api_version: str | None) -> str:
    """Return the API group of `api_version`, `core` when it has no group part."""
    if not api_version or "/" not in api_version:
        return CORE_GROUP
    return api_version.rsplit("/", 1)[0]
