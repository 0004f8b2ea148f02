"""
Content repository collaborators of the template engine.

This package provides the node type schema, nodes, the NodeStore interface
with its in-memory implementation, and the validation gate deciding which
property and reference values are written to a node.
"""

from nodetemplates.content_repository.node import Node
from nodetemplates.content_repository.node_store import InMemoryNodeStore, NodeStore
from nodetemplates.content_repository.node_type import NodeType, NodeTypeManager, PropertyKind
from nodetemplates.content_repository.node_utility import render_valid_node_name
from nodetemplates.content_repository.properties_and_references import (
    PropertiesAndReferences,
)
from nodetemplates.content_repository.property_type import PropertyType
from nodetemplates.content_repository.reference_type import ReferenceType

__all__ = [
    "Node",
    "NodeStore",
    "InMemoryNodeStore",
    "NodeType",
    "NodeTypeManager",
    "PropertyKind",
    "PropertiesAndReferences",
    "PropertyType",
    "ReferenceType",
    "render_valid_node_name",
]
