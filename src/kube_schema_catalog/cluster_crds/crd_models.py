"""Custom resource definition entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

CLUSTER_CRD_SOURCE_ID = "cluster-crds"
CLUSTER_CRD_SOURCE_NAME = "Cluster CRDs"


@dataclass(frozen=True)
class CRDDescriptor:
    """One served version of a custom resource definition."""

    group: str
    version: str
    kind: str
    plural_name: str | None = None
    scope: str | None = None
    open_api_validation_schema: Mapping[str, Any] | None = None
    origin: str = "cluster"
