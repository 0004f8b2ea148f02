"""In-memory node of a content tree."""

from dataclasses import dataclass, field
from typing import Any, Optional
from uuid import uuid4

from nodetemplates.content_repository.node_type import NodeType


@dataclass(eq=False)
class Node:
    """Node in a content tree with properties, references and ordered children."""

    name: str
    node_type: NodeType
    identifier: str = field(default_factory=lambda: uuid4().hex)
    properties: dict[str, Any] = field(default_factory=dict)
    references: dict[str, str | list[str] | None] = field(default_factory=dict)
    hidden: bool = False
    parent: Optional["Node"] = field(default=None, repr=False)
    children: list["Node"] = field(default_factory=list, repr=False)

    @property
    def path(self) -> str:
        if self.parent is None:
            return f"/{self.name}"
        return f"{self.parent.path}/{self.name}"

    def get_property(self, property_name: str, default: Any = None) -> Any:
        return self.properties.get(property_name, default)

    def get_child(self, name: str) -> Optional["Node"]:
        for child in self.children:
            if child.name == name:
                return child
        return None
