"""Schema tree builder tests."""

from __future__ import annotations

from typing import Any

from kube_schema_catalog.schema_management import (
    CIRCULAR_REFERENCE_TYPE,
    UNRESOLVED_REFERENCE_TYPE,
    SchemaTreeNode,
    build_schema_tree,
    parse_schema_document,
)


def _tree(raw_definitions: dict[str, Any], key: str) -> list[SchemaTreeNode]:
    document = parse_schema_document({"definitions": raw_definitions})
    return build_schema_tree(
        document.definitions[key], document.definitions, name=key, path="", parent_required=()
    )


def _by_path(nodes: list[SchemaTreeNode]) -> dict[str, SchemaTreeNode]:
    return {node.path: node for root in nodes for node in root.iter_nodes()}


def _deployment_definitions() -> dict[str, Any]:
    return {
        "io.k8s.api.apps.v1.Deployment": {
            "type": "object",
            "description": "Deployment enables declarative updates.",
            "properties": {
                "apiVersion": {"type": "string"},
                "kind": {"type": "string"},
                "metadata": {"$ref": "#/definitions/io.k8s.apimachinery.pkg.apis.meta.v1.ObjectMeta"},
                "spec": {
                    "$ref": "#/definitions/io.k8s.api.apps.v1.DeploymentSpec",
                    "description": "Desired behavior.",
                },
            },
        },
        "io.k8s.api.apps.v1.DeploymentSpec": {
            "type": "object",
            "required": ["selector"],
            "properties": {
                "replicas": {"type": "integer"},
                "selector": {"type": "object", "properties": {"matchLabels": {"type": "object"}}},
            },
        },
        "io.k8s.apimachinery.pkg.apis.meta.v1.ObjectMeta": {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "selfLink": {"type": "string"},
            },
        },
    }


def test_paths_join_resource_key_and_field_names_once() -> None:
    key = "io.k8s.api.apps.v1.Deployment"

    nodes = _by_path(_tree(_deployment_definitions(), key))

    assert f"{key}.spec.replicas" in nodes
    assert nodes[f"{key}.spec.replicas"].type == "integer"
    assert f"{key}.spec.spec.replicas" not in nodes
    assert nodes[key].type == "object"
    assert nodes[f"{key}.metadata.name"].type == "string"


def test_every_child_path_extends_its_parent_path() -> None:
    roots = _tree(_deployment_definitions(), "io.k8s.api.apps.v1.Deployment")

    def check(node: SchemaTreeNode) -> None:
        for child in node.children:
            assert child.path in (f"{node.path}.{child.name}", f"{node.path}[]")
            check(child)

    for root in roots:
        check(root)


def test_required_flag_comes_from_parent_required_list() -> None:
    key = "io.k8s.api.apps.v1.Deployment"

    nodes = _by_path(_tree(_deployment_definitions(), key))

    assert nodes[f"{key}.spec.selector"].required is True
    assert nodes[f"{key}.spec.replicas"].required is False
    assert nodes[key].required is False


def test_root_required_uses_parent_required_argument() -> None:
    document = parse_schema_document({"definitions": {"A": {"type": "string"}}})

    nodes = build_schema_tree(
        document.definitions["A"], document.definitions, name="A", path="", parent_required=["A"]
    )

    assert nodes[0].required is True


def test_self_link_is_filtered_everywhere() -> None:
    nodes = _by_path(_tree(_deployment_definitions(), "io.k8s.api.apps.v1.Deployment"))

    assert not any(node.name == "selfLink" for node in nodes.values())


def test_self_link_root_returns_empty_list() -> None:
    document = parse_schema_document({"definitions": {"A": {"type": "string"}}})

    assert (
        build_schema_tree(
            document.definitions["A"],
            document.definitions,
            name="selfLink",
            path="x",
            parent_required=(),
        )
        == []
    )


def test_target_description_wins_over_reference_site_description() -> None:
    definitions = _deployment_definitions()
    key = "io.k8s.api.apps.v1.Deployment"

    fallback = _by_path(_tree(definitions, key))
    assert fallback[f"{key}.spec"].description == "Desired behavior."

    definitions["io.k8s.api.apps.v1.DeploymentSpec"]["description"] = "Spec of a Deployment."
    preferred = _by_path(_tree(definitions, key))
    assert preferred[f"{key}.spec"].description == "Spec of a Deployment."


def test_dangling_reference_becomes_unresolved_leaf() -> None:
    nodes = _by_path(
        _tree(
            {
                "Widget": {
                    "type": "object",
                    "properties": {"part": {"$ref": "#/definitions/Missing"}},
                }
            },
            "Widget",
        )
    )

    leaf = nodes["Widget.part"]
    assert leaf.type == UNRESOLVED_REFERENCE_TYPE
    assert leaf.children == ()
    assert "#/definitions/Missing" in (leaf.description or "")


def test_self_referencing_definition_terminates_with_circular_leaf() -> None:
    nodes = _by_path(
        _tree(
            {
                "Props": {
                    "type": "object",
                    "properties": {
                        "title": {"type": "string"},
                        "not": {"$ref": "#/definitions/Props"},
                    },
                }
            },
            "Props",
        )
    )

    assert nodes["Props.title"].type == "string"
    assert nodes["Props.not"].type == "object"
    assert nodes["Props.not.title"].type == "string"
    assert nodes["Props.not.not"].type == CIRCULAR_REFERENCE_TYPE
    assert nodes["Props.not.not"].children == ()


def test_shared_reference_is_expanded_at_every_use_site() -> None:
    nodes = _by_path(
        _tree(
            {
                "Pair": {
                    "type": "object",
                    "properties": {
                        "left": {"$ref": "#/definitions/Leaf"},
                        "right": {"$ref": "#/definitions/Leaf"},
                    },
                },
                "Leaf": {"type": "object", "properties": {"value": {"type": "string"}}},
            },
            "Pair",
        )
    )

    assert nodes["Pair.left.value"].type == "string"
    assert nodes["Pair.right.value"].type == "string"


def test_array_items_are_appended_with_brackets() -> None:
    nodes = _by_path(
        _tree(
            {
                "PodSpec": {
                    "type": "object",
                    "properties": {
                        "containers": {
                            "type": "array",
                            "items": {"$ref": "#/definitions/Container"},
                        },
                        "args": {"type": "array", "items": {"type": "string"}},
                    },
                },
                "Container": {
                    "type": "object",
                    "required": ["name"],
                    "properties": {"name": {"type": "string"}},
                },
            },
            "PodSpec",
        )
    )

    assert nodes["PodSpec.containers"].type == "array"
    assert nodes["PodSpec.containers[]"].name == "[]"
    assert nodes["PodSpec.containers[]"].type == "object"
    assert nodes["PodSpec.containers[].name"].required is True
    assert nodes["PodSpec.args[]"].type == "string"


def test_open_map_values_use_wildcard_child() -> None:
    nodes = _by_path(
        _tree(
            {
                "Meta": {
                    "type": "object",
                    "properties": {
                        "labels": {"type": "object", "additionalProperties": {"type": "string"}}
                    },
                }
            },
            "Meta",
        )
    )

    assert nodes["Meta.labels"].type == "object"
    assert nodes["Meta.labels.*"].type == "string"


def test_literal_wildcard_property_is_skipped() -> None:
    nodes = _by_path(
        _tree(
            {
                "Odd": {
                    "type": "object",
                    "properties": {"*": {"type": "string"}, "ok": {"type": "string"}},
                }
            },
            "Odd",
        )
    )

    assert "Odd.ok" in nodes
    assert "Odd.*" not in nodes


def test_enum_values_are_carried_on_leaves() -> None:
    nodes = _by_path(
        _tree(
            {
                "Strategy": {
                    "type": "object",
                    "properties": {"type": {"type": "string", "enum": ["Recreate", "RollingUpdate"]}},
                }
            },
            "Strategy",
        )
    )

    assert nodes["Strategy.type"].enum == ("Recreate", "RollingUpdate")
    assert nodes["Strategy.type"].to_dict()["enum"] == ["Recreate", "RollingUpdate"]


def test_untyped_leaf_reports_unknown_type() -> None:
    nodes = _by_path(
        _tree({"Loose": {"type": "object", "properties": {"anything": {}}}}, "Loose")
    )

    assert nodes["Loose.anything"].type == "unknown"
