"""
Node type schema and registry.

Node types are declared as nested configuration, usually loaded from YAML:

    "Vendor:Page":
      superTypes:
        "Neos.Neos:Document": true
      childNodes:
        main:
          type: "Neos.Neos:ContentCollection"
      properties:
        title:
          type: string
        layout:
          type: string
          defaultValue: default
          ui:
            inspector:
              editor: "Neos.Neos/Inspector/Editors/SelectBoxEditor"
              editorOptions:
                values:
                  default: {label: Default}
                  wide: {label: Wide}
      options:
        template:
          properties:
            title: "${data.title}"

Super type configuration is merged into the declaring type, later
declarations win.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from nodetemplates.exceptions import NodeTypeNotFoundError


class PropertyKind(Enum):
    """How a declared property is written to a node."""

    REFERENCE = "reference"
    REFERENCES = "references"
    OTHER = "other"


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge two nested mappings, values of `override` win."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


@dataclass
class NodeType:
    """Resolved node type with inherited configuration already merged in."""

    name: str
    properties: dict[str, dict[str, Any]] = field(default_factory=dict)
    super_types: tuple["NodeType", ...] = ()
    abstract: bool = False
    child_nodes: dict[str, dict[str, Any]] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.name

    def has_property(self, property_name: str) -> bool:
        return property_name in self.properties

    def declared_properties(self) -> dict[str, dict[str, Any]]:
        return self.properties

    def get_property_type(self, property_name: str) -> str:
        configuration = self.properties.get(property_name) or {}
        return configuration.get("type") or "string"

    def property_kind(self, property_name: str) -> PropertyKind:
        property_type = (self.properties.get(property_name) or {}).get("type")
        if property_type == "reference":
            return PropertyKind.REFERENCE
        if property_type == "references":
            return PropertyKind.REFERENCES
        return PropertyKind.OTHER

    def default_values(self) -> dict[str, Any]:
        """Return the non-null default values of all declared properties."""
        return {
            property_name: configuration["defaultValue"]
            for property_name, configuration in self.properties.items()
            if configuration and configuration.get("defaultValue") is not None
        }

    def is_of_type(self, node_type_name: str) -> bool:
        if self.name == node_type_name:
            return True
        return any(super_type.is_of_type(node_type_name) for super_type in self.super_types)

    def template_configuration(self) -> dict[str, Any] | None:
        return self.options.get("template")


class NodeTypeManager:
    """Registry resolving node type declarations into NodeType objects."""

    def __init__(self, declarations: Mapping[str, Any] | None = None):
        self._declarations: dict[str, dict[str, Any]] = {
            name: dict(declaration or {}) for name, declaration in (declarations or {}).items()
        }
        self._resolved: dict[str, NodeType] = {}

    @classmethod
    def from_yaml(cls, *yaml_paths: str | Path) -> "NodeTypeManager":
        """
        Load node type declarations from one or more YAML files.

        Later files override earlier ones key by key.

        Params:
            yaml_paths: YAML files mapping node type names to declarations

        Returns:
            NodeTypeManager holding all declarations
        """
        declarations: dict[str, Any] = {}
        for yaml_path in yaml_paths:
            with Path(yaml_path).open() as f:
                declarations = deep_merge(declarations, yaml.safe_load(f) or {})
        return cls(declarations)

    def has_node_type(self, node_type_name: str) -> bool:
        return node_type_name in self._declarations

    def get_node_type(self, node_type_name: str) -> NodeType:
        """
        Get a resolved node type by name.

        Raises:
            NodeTypeNotFoundError: If the node type is not declared
        """
        return self._resolve(node_type_name, ())

    def _resolve(self, node_type_name: str, resolving: tuple[str, ...]) -> NodeType:
        if node_type_name in self._resolved:
            return self._resolved[node_type_name]
        if node_type_name not in self._declarations:
            raise NodeTypeNotFoundError(node_type_name)
        if node_type_name in resolving:
            raise ValueError(
                f"Node type '{node_type_name}' inherits from itself: {' -> '.join(resolving)}"
            )

        declaration = self._declarations[node_type_name]
        super_types = tuple(
            self._resolve(super_type_name, (*resolving, node_type_name))
            for super_type_name in self._super_type_names(declaration)
        )
        merged: dict[str, Any] = {}
        for super_type in super_types:
            merged = deep_merge(
                merged,
                {
                    "properties": super_type.properties,
                    "childNodes": super_type.child_nodes,
                    "options": super_type.options,
                },
            )
        merged = deep_merge(
            merged,
            {
                key: declaration[key]
                for key in ("properties", "childNodes", "options")
                if declaration.get(key)
            },
        )

        node_type = NodeType(
            name=node_type_name,
            properties=merged.get("properties", {}),
            super_types=super_types,
            abstract=bool(declaration.get("abstract", False)),
            child_nodes=merged.get("childNodes", {}),
            options=merged.get("options", {}),
        )
        self._resolved[node_type_name] = node_type
        return node_type

    @staticmethod
    def _super_type_names(declaration: Mapping[str, Any]) -> list[str]:
        super_types = declaration.get("superTypes") or {}
        if isinstance(super_types, Mapping):
            return [name for name, enabled in super_types.items() if enabled]
        return list(super_types)
