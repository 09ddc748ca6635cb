"""CRD manifest parsing and validation tests."""

from __future__ import annotations

from typing import Any

import pytest
from kube_schema_catalog.cluster_crds import (
    CRDManifestError,
    descriptors_from_crd_manifest,
    descriptors_from_manifest_text,
    validate_crd_manifest,
)


def _manifest(**spec_overrides: Any) -> dict[str, Any]:
    spec: dict[str, Any] = {
        "group": "example.com",
        "names": {"kind": "Widget", "plural": "widgets"},
        "scope": "Namespaced",
        "versions": [
            {
                "name": "v1",
                "served": True,
                "schema": {"openAPIV3Schema": {"type": "object", "description": "A widget."}},
            },
            {"name": "v1beta1", "served": False},
            {"name": "v2", "served": True},
        ],
    }
    spec.update(spec_overrides)
    return {
        "apiVersion": "apiextensions.k8s.io/v1",
        "kind": "CustomResourceDefinition",
        "metadata": {"name": "widgets.example.com"},
        "spec": spec,
    }


def test_valid_manifest_has_no_errors() -> None:
    assert validate_crd_manifest(_manifest()) == []


def test_validation_reports_each_problem() -> None:
    errors = validate_crd_manifest(
        {"apiVersion": "v1", "kind": "ConfigMap", "spec": {"names": {}, "versions": "v1"}}
    )

    assert "Expected kind to be CustomResourceDefinition" in errors
    assert "Missing required spec fields: group and names.kind" in errors
    assert "Missing or invalid versions array" in errors
    assert validate_crd_manifest({}) == [
        "Missing required fields: apiVersion and kind",
        "Expected kind to be CustomResourceDefinition",
        "Missing required spec fields: group and names.kind",
        "Missing or invalid versions array",
    ]
    assert validate_crd_manifest("nope") == ["Manifest root must be a mapping."]


def test_one_descriptor_per_served_version() -> None:
    descriptors = descriptors_from_crd_manifest(_manifest(), origin="widgets.yaml")

    assert [descriptor.version for descriptor in descriptors] == ["v1", "v2"]
    first, second = descriptors
    assert first.kind == "Widget"
    assert first.plural_name == "widgets"
    assert first.scope == "Namespaced"
    assert first.open_api_validation_schema == {"type": "object", "description": "A widget."}
    assert first.origin == "widgets.yaml"
    assert second.open_api_validation_schema is None


def test_manifest_text_skips_invalid_documents() -> None:
    text = """
apiVersion: apiextensions.k8s.io/v1
kind: CustomResourceDefinition
spec:
  group: example.com
  names: {kind: Gadget}
  versions:
    - name: v1
      served: true
---
apiVersion: v1
kind: ConfigMap
metadata: {name: other}
---
"""

    descriptors = descriptors_from_manifest_text(text, origin="mixed.yaml")

    assert [(d.group, d.version, d.kind) for d in descriptors] == [("example.com", "v1", "Gadget")]


def test_json_manifest_text_is_accepted() -> None:
    descriptors = descriptors_from_manifest_text(
        '{"apiVersion": "apiextensions.k8s.io/v1", "kind": "CustomResourceDefinition",'
        ' "spec": {"group": "example.com", "names": {"kind": "Gizmo"},'
        ' "versions": [{"name": "v1"}]}}',
        origin="gizmo.json",
    )

    assert [d.kind for d in descriptors] == ["Gizmo"]


def test_unparseable_manifest_text_raises() -> None:
    with pytest.raises(CRDManifestError):
        descriptors_from_manifest_text("key: [unclosed", origin="broken.yaml")
