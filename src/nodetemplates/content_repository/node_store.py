"""
Node store interface and the in-memory implementation.

The template engine only talks to the node tree through NodeStore, so any
storage can be plugged in. InMemoryNodeStore keeps the whole tree in Python
objects and is used by default and in tests.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any
from uuid import uuid4

from nodetemplates.content_repository.node import Node
from nodetemplates.content_repository.node_type import NodeType, NodeTypeManager, PropertyKind
from nodetemplates.exceptions import NodeCreationError

logger = logging.getLogger(__name__)


class NodeStore(ABC):
    """Access to a node tree and its node type schema."""

    @abstractmethod
    def get_node_type(self, node_type_name: str) -> NodeType:
        """Get a node type by name, raising NodeTypeNotFoundError if unknown."""
        pass

    @abstractmethod
    def find_child(self, parent: Node, name_or_path: str) -> Node | None:
        """Find a descendant of `parent` by name or relative `a/b` path."""
        pass

    @abstractmethod
    def create_child(self, parent: Node, node_type_name: str | None, name: str | None) -> Node:
        """Create a child node below `parent`, raising NodeCreationError on failure."""
        pass

    @abstractmethod
    def set_property(self, node: Node, property_name: str, value: Any) -> None:
        pass

    @abstractmethod
    def set_reference(self, node: Node, reference_name: str, value: Any) -> None:
        pass

    @abstractmethod
    def set_hidden(self, node: Node, hidden: bool) -> None:
        pass

    @abstractmethod
    def find_node_by_identifier(self, identifier: str) -> Node | None:
        pass


class InMemoryNodeStore(NodeStore):
    """NodeStore keeping nodes in memory.

    New nodes get the default values of their node type and their tethered
    child nodes (the `childNodes` of the node type) created right away.
    """

    def __init__(self, node_type_manager: NodeTypeManager):
        self.node_type_manager = node_type_manager
        self._nodes: dict[str, Node] = {}

    def create_root(self, node_type_name: str, name: str = "root") -> Node:
        """Create a parentless node; abstract node types are accepted here."""
        node_type = self.get_node_type(node_type_name)
        node = Node(name=name, node_type=node_type, properties=dict(node_type.default_values()))
        self._register(node)
        self._create_tethered_nodes(node)
        return node

    def get_node_type(self, node_type_name: str) -> NodeType:
        return self.node_type_manager.get_node_type(node_type_name)

    def find_child(self, parent: Node, name_or_path: str) -> Node | None:
        current = parent
        for segment in str(name_or_path).strip("/").split("/"):
            if segment in ("", "."):
                continue
            current = current.get_child(segment)
            if current is None:
                return None
        return current if current is not parent else None

    def create_child(self, parent: Node, node_type_name: str | None, name: str | None) -> Node:
        if not node_type_name:
            raise NodeCreationError(node_type_name, "no node type given")
        node_type = self.get_node_type(node_type_name)
        if node_type.abstract:
            raise NodeCreationError(node_type_name, "node type is abstract")
        if name is not None and parent.get_child(name) is not None:
            raise NodeCreationError(
                node_type_name, f"node '{parent.path}' already has a child named '{name}'"
            )

        node = Node(
            name=name or f"node-{uuid4().hex}",
            node_type=node_type,
            properties=dict(node_type.default_values()),
            parent=parent,
        )
        parent.children.append(node)
        self._register(node)
        self._create_tethered_nodes(node)
        logger.debug("Created node %s of type %s", node.path, node_type.name)
        return node

    def set_property(self, node: Node, property_name: str, value: Any) -> None:
        node.properties[property_name] = value

    def set_reference(self, node: Node, reference_name: str, value: Any) -> None:
        if node.node_type.property_kind(reference_name) == PropertyKind.REFERENCES:
            node.references[reference_name] = [self._identifier(item) for item in value or []]
        else:
            node.references[reference_name] = None if value is None else self._identifier(value)

    def set_hidden(self, node: Node, hidden: bool) -> None:
        node.hidden = hidden

    def find_node_by_identifier(self, identifier: str) -> Node | None:
        return self._nodes.get(identifier)

    def get_referenced_nodes(self, node: Node, reference_name: str) -> list[Node]:
        value = node.references.get(reference_name)
        identifiers = value if isinstance(value, list) else [value]
        return [self._nodes[identifier] for identifier in identifiers if identifier in self._nodes]

    def _register(self, node: Node) -> None:
        self._nodes[node.identifier] = node

    def _create_tethered_nodes(self, node: Node) -> None:
        for child_name, configuration in node.node_type.child_nodes.items():
            if configuration and configuration.get("type"):
                self.create_child(node, configuration["type"], child_name)

    @staticmethod
    def _identifier(value: Any) -> str:
        return value.identifier if isinstance(value, Node) else str(value)
