"""
Evaluated templates.

A Template is the immutable output of a build step: the node type to create,
the node name to find or create, the already evaluated properties and the
ordered child templates. A Template with neither type nor name operates on a
node that is already resolved (the root template).
"""

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    SerializationInfo,
    field_serializer,
    field_validator,
)
from pydantic_core import to_jsonable_python

from nodetemplates.content_repository.node import Node


def _serialize_value(value: Any) -> Any:
    if isinstance(value, Node):
        return value.identifier
    if isinstance(value, (list, tuple)):
        return [_serialize_value(item) for item in value]
    if isinstance(value, Mapping):
        return {key: _serialize_value(item) for key, item in value.items()}
    return value


class Template(BaseModel):
    """Evaluated template of one node plus its child templates."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: str | None = None
    name: str | None = None
    properties: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)
    child_nodes: "Templates" = Field(default_factory=lambda: Templates(), alias="childNodes")

    @classmethod
    def empty(cls) -> "Template":
        return cls()

    @field_validator("properties", mode="after")
    @classmethod
    def _freeze_properties(cls, properties: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(properties))

    @field_serializer("properties")
    def _serialize_properties(
        self, properties: Mapping[str, Any], info: SerializationInfo
    ) -> dict[str, Any]:
        serialized = {key: _serialize_value(value) for key, value in properties.items()}
        if info.mode_is_json():
            # objects without a JSON form (e.g. class-typed property values) fall back to str()
            return to_jsonable_python(serialized, fallback=str)
        return serialized

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON compatible shape {type, name, properties, childNodes}."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class Templates(RootModel[list[Template]]):
    """Ordered sequence of templates; order defines sibling application order."""

    model_config = ConfigDict(frozen=True)

    root: list[Template] = Field(default_factory=list)

    def with_added(self, template: Template) -> "Templates":
        return Templates([*self.root, template])

    def merge(self, other: "Templates") -> "Templates":
        return Templates([*self.root, *other.root])

    def to_list(self) -> list[dict[str, Any]]:
        return self.model_dump(mode="json", by_alias=True)

    def __iter__(self) -> Iterator[Template]:
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> Template:
        return self.root[index]

    def __bool__(self) -> bool:
        return bool(self.root)


Template.model_rebuild()
