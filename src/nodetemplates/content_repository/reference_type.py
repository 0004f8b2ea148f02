"""Structural checks for reference values."""

from enum import Enum
from typing import Any

from nodetemplates.content_repository.node import Node
from nodetemplates.content_repository.node_type import NodeType, PropertyKind


class ReferenceType(Enum):
    """Declared type of a reference property: a single node or a list of nodes."""

    REFERENCE = "reference"
    REFERENCES = "references"

    @classmethod
    def from_property_of_node_type(cls, reference_name: str, node_type: NodeType) -> "ReferenceType":
        kind = node_type.property_kind(reference_name)
        if kind == PropertyKind.OTHER:
            raise ValueError(
                f"Property '{reference_name}' of node type '{node_type.name}' is not a reference"
            )
        return cls(kind.value)

    def is_matched_by(self, value: Any, subgraph: Any) -> bool:
        """
        Check that every referenced node exists in the subgraph.

        Params:
            value: A node, a node identifier, a list of those, or None
            subgraph: NodeStore used to look identifiers up

        Returns:
            True if all referenced nodes resolve
        """
        if value is None:
            return True
        if self == ReferenceType.REFERENCES:
            return isinstance(value, (list, tuple)) and all(
                self._resolves(item, subgraph) for item in value
            )
        return self._resolves(value, subgraph)

    @staticmethod
    def _resolves(value: Any, subgraph: Any) -> bool:
        if isinstance(value, Node):
            return subgraph.find_node_by_identifier(value.identifier) is not None
        if isinstance(value, str) and value:
            return subgraph.find_node_by_identifier(value) is not None
        return False
