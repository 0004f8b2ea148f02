"""
Validation gate for property and reference values.

Before anything is written to a node, the evaluated property map of a
template is split into plain properties and references using the node type
schema, and each part is validated. Rejected entries are recorded in the
CaughtExceptions sink of the invocation.
"""

from collections.abc import Mapping
from typing import Any

from nodetemplates.content_repository.node_store import NodeStore
from nodetemplates.content_repository.node_type import NodeType, PropertyKind
from nodetemplates.content_repository.property_type import PropertyType
from nodetemplates.content_repository.reference_type import ReferenceType
from nodetemplates.core.utils import json_dump
from nodetemplates.domain.caught_exceptions import CaughtException, CaughtExceptions
from nodetemplates.exceptions import (
    InvalidPropertyNameError,
    PropertyIgnoredError,
    ReferenceResolutionError,
)

DEFAULT_SELECT_BOX_EDITOR = "Neos.Neos/Inspector/Editors/SelectBoxEditor"

LEGACY_PROPERTY_PREFIX = "_"

# Internal node attributes that older templates used to set via `_name` syntax
LEGACY_INTERNAL_PROPERTIES = (
    "_accessRoles",
    "_contentObject",
    "_hidden",
    "_hiddenAfterDateTime",
    "_hiddenBeforeDateTime",
    "_hiddenInIndex",
    "_index",
    "_name",
    "_nodeType",
    "_removed",
    "_workspace",
)


class PropertiesAndReferences:
    """Properties and references of one node, split by the node type schema."""

    def __init__(self, properties: dict[str, Any], references: dict[str, Any]):
        self.properties = properties
        self.references = references

    @classmethod
    def create_from_mapping_and_type_declarations(
        cls, properties_and_references: Mapping[str, Any], node_type: NodeType
    ) -> "PropertiesAndReferences":
        properties = {}
        references = {}
        for property_name, value in properties_and_references.items():
            if node_type.property_kind(property_name) in (
                PropertyKind.REFERENCE,
                PropertyKind.REFERENCES,
            ):
                references[property_name] = value
            else:
                properties[property_name] = value
        return cls(properties, references)

    def require_valid_properties(
        self,
        node_type: NodeType,
        caught_exceptions: CaughtExceptions,
        select_box_editor: str = DEFAULT_SELECT_BOX_EDITOR,
    ) -> dict[str, Any]:
        """
        Return the properties that may be written to a node of `node_type`.

        A property is dropped and recorded when:

        1. It is not declared in the node type.
        2. Its value is `None` while the node type declares a default value;
           writing `None` would silently replace the default.
        3. Its value does not match the declared property type.
        4. It is edited with a select box and the value is not one of the
           declared options.

        Params:
            node_type: Node type the properties are meant for
            caught_exceptions: Sink for rejected properties
            select_box_editor: Editor identifier marking select-box properties

        Returns:
            The surviving property map

        Raises:
            InvalidPropertyNameError: For empty or legacy `_`-prefixed names
        """
        valid_properties = {}
        default_values = node_type.default_values()
        for property_name, value in self.properties.items():
            self.assert_valid_property_name(property_name)
            try:
                self._check_property(
                    property_name, value, node_type, default_values, select_box_editor
                )
            except PropertyIgnoredError as exception:
                caught_exceptions.add(
                    CaughtException.from_exception(exception).with_origin(
                        f'Property "{property_name}" in NodeType "{node_type.name}"'
                    )
                )
                continue
            valid_properties[property_name] = value
        return valid_properties

    def require_valid_references(
        self,
        node_type: NodeType,
        subgraph: NodeStore,
        caught_exceptions: CaughtExceptions,
        keep_unresolvable: bool = False,
    ) -> dict[str, Any]:
        """
        Return the references that may be written to a node of `node_type`.

        Every reference whose node(s) cannot be found in `subgraph` is
        recorded. By default it is also dropped; with `keep_unresolvable` the
        attempted value is returned anyway and the caller decides.

        Params:
            node_type: Node type the references are meant for
            subgraph: Store used to resolve node identifiers
            caught_exceptions: Sink for unresolvable references
            keep_unresolvable: Return unresolvable references as well

        Returns:
            The reference map to write
        """
        valid_references = {}
        for reference_name, value in self.references.items():
            reference_type = ReferenceType.from_property_of_node_type(reference_name, node_type)
            if not reference_type.is_matched_by(value, subgraph):
                caught_exceptions.add(
                    CaughtException.from_exception(
                        ReferenceResolutionError(reference_name, node_type.name, value)
                    ).with_origin(f'Reference "{reference_name}" in NodeType "{node_type.name}"')
                )
                if not keep_unresolvable:
                    continue
            valid_references[reference_name] = value
        return valid_references

    @staticmethod
    def assert_valid_property_name(property_name: Any) -> None:
        """
        Reject property names that cannot be set from a template.

        Raises:
            InvalidPropertyNameError: For empty names and `_`-prefixed legacy names
        """
        if not isinstance(property_name, str) or property_name == "":
            raise InvalidPropertyNameError(
                property_name,
                f'Property name must be a non empty string. Got "{property_name}".',
            )
        if not property_name.startswith(LEGACY_PROPERTY_PREFIX):
            return
        lower_property_name = property_name.lower()
        if lower_property_name == "_hidden":
            raise InvalidPropertyNameError(
                property_name,
                'Using "_hidden" as property declaration was removed. Please use "hidden" instead.',
            )
        for legacy_property in LEGACY_INTERNAL_PROPERTIES:
            if lower_property_name == legacy_property.lower():
                raise InvalidPropertyNameError(
                    property_name, f'Internal legacy property "{property_name}" is not implemented.'
                )
        raise InvalidPropertyNameError(
            property_name,
            f'Property "{property_name}" uses the reserved prefix "{LEGACY_PROPERTY_PREFIX}".',
        )

    @staticmethod
    def _check_property(
        property_name: str,
        value: Any,
        node_type: NodeType,
        default_values: dict[str, Any],
        select_box_editor: str,
    ) -> None:
        if not node_type.has_property(property_name):
            raise PropertyIgnoredError(
                property_name,
                node_type.name,
                f"Because property is not declared in NodeType. Got value `{json_dump(value)}`.",
            )
        if value is None and property_name in default_values:
            raise PropertyIgnoredError(
                property_name,
                node_type.name,
                "Because property is `null` and would override the default value "
                f"`{json_dump(default_values[property_name])}`.",
            )
        property_type = PropertyType.from_property_of_node_type(property_name, node_type)
        if not property_type.is_matched_by(value):
            raise PropertyIgnoredError(
                property_name,
                node_type.name,
                f'Because value `{json_dump(value)}` is not assignable to property type "{property_type.value}".',
            )

        configuration = node_type.declared_properties()[property_name] or {}
        inspector = (configuration.get("ui") or {}).get("inspector") or {}
        select_box_values = (inspector.get("editorOptions") or {}).get("values")
        if (
            value is not None
            and inspector.get("editor") == select_box_editor
            and select_box_values
            and property_type.value in ("string", "array")
        ):
            selected_values = [value] if property_type.value == "string" else list(value)
            option_keys = list(select_box_values)
            difference = [
                selected for selected in selected_values if selected not in option_keys
            ]
            if difference:
                raise PropertyIgnoredError(
                    property_name,
                    node_type.name,
                    "Because property has illegal select-box value(s): "
                    f"({', '.join(str(item) for item in difference)})",
                )
