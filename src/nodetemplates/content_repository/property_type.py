"""
Structural type checks for property values.

Checks whether a raw value may be assigned to a declared property type.
`None` is assignable to every type; whether `None` is acceptable for a
property is decided by the validation gate.
"""

import re
from datetime import date
from typing import Any

from nodetemplates.content_repository.node_type import NodeType

TYPE_ALIASES = {
    "bool": "boolean",
    "int": "integer",
    "double": "float",
}

ARRAY_OF_PATTERN = re.compile(r"^array\s*<\s*(?P<item_type>[^>]+?)\s*>$")


class PropertyType:
    """Declared type of a node property such as `string` or `array<integer>`."""

    def __init__(self, value: str):
        if value in ("reference", "references"):
            raise ValueError(f"Type '{value}' is a reference type, not a property type")
        self.value = TYPE_ALIASES.get(value, value)

    def __repr__(self) -> str:
        return f"PropertyType({self.value!r})"

    @classmethod
    def from_property_of_node_type(cls, property_name: str, node_type: NodeType) -> "PropertyType":
        return cls(node_type.get_property_type(property_name))

    @property
    def array_of_type(self) -> "PropertyType | None":
        match = ARRAY_OF_PATTERN.match(self.value)
        if match is None:
            return None
        return PropertyType(match.group("item_type"))

    def is_matched_by(self, value: Any) -> bool:
        """
        Check if a value is structurally assignable to this type.

        Params:
            value: Raw property value

        Returns:
            True if the value matches the declared type
        """
        if value is None:
            return True
        item_type = self.array_of_type
        if item_type is not None:
            return isinstance(value, (list, tuple)) and all(
                item is not None and item_type.is_matched_by(item) for item in value
            )
        if self.value == "boolean":
            return isinstance(value, bool)
        if self.value == "integer":
            return isinstance(value, int) and not isinstance(value, bool)
        if self.value == "float":
            return isinstance(value, (int, float)) and not isinstance(value, bool)
        if self.value == "string":
            return isinstance(value, str)
        if self.value == "array":
            return isinstance(value, (list, tuple, dict))
        if self.value == "DateTime":
            return isinstance(value, date)
        return self._is_instance_of_declared_class(value)

    def _is_instance_of_declared_class(self, value: Any) -> bool:
        declared = self.value.lstrip("\\")
        short_name = re.split(r"[\\.]", declared)[-1]
        for cls in type(value).__mro__:
            if cls.__name__ == short_name or f"{cls.__module__}.{cls.__qualname__}" == declared:
                return True
        return False
