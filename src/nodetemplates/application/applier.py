"""
Application of templates to a live node tree.

Every template part goes through these states:

    SKIPPED                       `when` did not hold (terminal)
    RESOLVED_EXISTING | CREATED   target node found by name, or created
    APPLIED                       validated properties and references written
    CHILDREN_APPLIED              every child reached a terminal state (terminal)

After CHILDREN_APPLIED the registered listeners are notified with the node,
the evaluation context and the pass-through options.

Two modes exist. `apply` walks an already built Template tree. In
`build_and_apply` each part is evaluated right before its node is
materialized, so expressions can read `node` (the node being filled) and
`parentNode`.
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from nodetemplates.content_repository.node import Node
from nodetemplates.content_repository.node_store import NodeStore
from nodetemplates.content_repository.node_utility import render_valid_node_name
from nodetemplates.content_repository.properties_and_references import (
    PropertiesAndReferences,
)
from nodetemplates.core.types import Context, NodeTemplateAppliedListener
from nodetemplates.domain.caught_exceptions import CaughtException, CaughtExceptions
from nodetemplates.domain.results import Aborted, Evaluated, Evaluation
from nodetemplates.domain.template import Template, Templates
from nodetemplates.domain.template_builder import TemplateBuilder
from nodetemplates.domain.template_factory import TemplateFactory, property_origin
from nodetemplates.exceptions import NodeCreationError, PropertyIgnoredError
from nodetemplates.settings import NodeTemplatesSettings

logger = logging.getLogger(__name__)


class ApplicationState(Enum):
    """Lifecycle of one template part during application."""

    SKIPPED = "skipped"
    RESOLVED_EXISTING = "resolved_existing"
    CREATED = "created"
    APPLIED = "applied"
    CHILDREN_APPLIED = "children_applied"


class NodeTemplateApplier:
    """Materializes templates: finds or creates nodes, writes validated values."""

    def __init__(
        self,
        store: NodeStore,
        settings: NodeTemplatesSettings | None = None,
        factory: TemplateFactory | None = None,
    ):
        self.store = store
        self.settings = settings or NodeTemplatesSettings()
        self.factory = factory or TemplateFactory()
        self._listeners: list[NodeTemplateAppliedListener] = []
        # closed set of node attributes a template may set besides declared properties
        self._meta_property_setters: dict[str, Callable[[Node, Any, CaughtExceptions], None]] = {
            "hidden": self._set_hidden,
        }

    def on_node_template_applied(self, listener: NodeTemplateAppliedListener) -> None:
        self._listeners.append(listener)

    def apply(
        self,
        template: Template,
        node: Node,
        caught_exceptions: CaughtExceptions,
        context: Context | None = None,
        options: dict[str, Any] | None = None,
    ) -> None:
        """
        Apply an evaluated template to `node` and its (new or existing) children.

        Params:
            template: Evaluated template; its type and name are not used for `node` itself
            node: Node receiving the template properties
            caught_exceptions: Sink for recoverable errors
            context: Context passed on to listeners
            options: Pass-through options for listeners
        """
        self._apply_on_node(
            template, node, caught_exceptions, {**(context or {}), "node": node}, options or {}, False
        )

    def build_and_apply(
        self,
        builder: TemplateBuilder,
        node: Node,
        options: dict[str, Any] | None = None,
    ) -> Template:
        """
        Evaluate a root template part by part and apply it to `node`.

        Params:
            builder: Root builder; its sink receives all recoverable errors
            node: Node the root template is applied to
            options: Pass-through options for listeners

        Returns:
            Template tree of everything that was actually applied
        """
        options = options or {}
        builder = builder.with_merged_evaluation_context({"node": node})
        scoped = self.factory.resolve_with_context(builder)
        if isinstance(scoped, Aborted):
            return Template.empty()
        condition = self.factory.resolve_condition(scoped)
        if isinstance(condition, Aborted) or not condition.value:
            self._transition(node, ApplicationState.SKIPPED)
            return Template.empty()

        properties = self.factory.resolve_properties(scoped, node.node_type.name)
        self._apply_properties(node, properties, builder.caught_exceptions, False)
        child_nodes = self._build_and_apply_children(scoped, node, options)
        self._finish(node, scoped.evaluation_context, options)
        return Template(properties=properties, child_nodes=child_nodes)

    def _apply_on_node(
        self,
        template: Template,
        node: Node,
        caught_exceptions: CaughtExceptions,
        context: Context,
        options: dict[str, Any],
        created: bool,
    ) -> None:
        self._apply_properties(node, template.properties, caught_exceptions, created)
        for child_template in template.child_nodes:
            child_node, child_created = self._find_or_create(
                node,
                child_template.name,
                lambda: Evaluated(child_template.type),
                caught_exceptions,
            )
            if child_node is None:
                continue
            self._apply_on_node(
                child_template,
                child_node,
                caught_exceptions,
                {**context, "parentNode": node, "node": child_node},
                options,
                child_created,
            )
        self._finish(node, context, options)

    def _build_and_apply_children(
        self, builder: TemplateBuilder, parent: Node, options: dict[str, Any]
    ) -> Templates:
        templates = Templates()
        for child_builder in self.factory.child_builders(builder):
            child_builder = child_builder.with_merged_evaluation_context({"parentNode": parent})
            templates = templates.merge(self._build_and_apply_child(child_builder, parent, options))
        return templates

    def _build_and_apply_child(
        self, builder: TemplateBuilder, parent: Node, options: dict[str, Any]
    ) -> Templates:
        scoped = self.factory.resolve_with_context(builder)
        if isinstance(scoped, Aborted):
            return Templates()
        condition = self.factory.resolve_condition(scoped)
        if isinstance(condition, Aborted):
            return Templates()
        if not condition.value:
            self._transition(parent, ApplicationState.SKIPPED)
            return Templates()
        item_builders = self.factory.expand_items(scoped)
        if isinstance(item_builders, Aborted):
            return Templates()

        templates = Templates()
        for item_builder in item_builders:
            name = self.factory.resolve_name(item_builder)
            if isinstance(name, Aborted):
                continue
            node, created = self._find_or_create(
                parent,
                name.value,
                lambda: self.factory.resolve_type(item_builder),
                item_builder.caught_exceptions,
            )
            if node is None:
                continue

            node_builder = item_builder.with_merged_evaluation_context({"node": node})
            properties = self.factory.resolve_properties(node_builder, node.node_type.name)
            self._apply_properties(node, properties, node_builder.caught_exceptions, created)
            child_nodes = self._build_and_apply_children(node_builder, node, options)
            self._finish(node, node_builder.evaluation_context, options)
            templates = templates.with_added(
                Template(
                    type=node.node_type.name,
                    name=name.value,
                    properties=properties,
                    child_nodes=child_nodes,
                )
            )
        return templates

    def _find_or_create(
        self,
        parent: Node,
        name: str | None,
        resolve_type: Callable[[], Evaluation],
        caught_exceptions: CaughtExceptions,
    ) -> tuple[Node | None, bool]:
        if name is not None:
            existing = self.store.find_child(parent, name)
            if existing is not None:
                self._transition(existing, ApplicationState.RESOLVED_EXISTING)
                return existing, False

        node_type = resolve_type()
        if isinstance(node_type, Aborted):
            return None, False
        try:
            node = self.store.create_child(parent, node_type.value, name)
        except NodeCreationError as exception:
            caught_exceptions.add(
                CaughtException.from_exception(exception).with_origin(
                    f'Child node "{name or "(anonymous)"}" of "{parent.path}"'
                )
            )
            return None, False
        logger.info("Created node %s of type %s from template", node.path, node_type.value)
        self._transition(node, ApplicationState.CREATED)
        return node, True

    def _apply_properties(
        self,
        node: Node,
        properties: dict[str, Any],
        caught_exceptions: CaughtExceptions,
        created: bool,
    ) -> None:
        node_type = node.node_type
        if created:
            self._derive_uri_path_segment(node, properties)

        regular_properties = {}
        for property_name, value in properties.items():
            setter = self._meta_property_setters.get(property_name)
            if setter is not None:
                setter(node, value, caught_exceptions)
            else:
                regular_properties[property_name] = value

        properties_and_references = (
            PropertiesAndReferences.create_from_mapping_and_type_declarations(
                regular_properties, node_type
            )
        )
        valid_properties = properties_and_references.require_valid_properties(
            node_type, caught_exceptions, self.settings.select_box_editor
        )
        for property_name, value in valid_properties.items():
            self.store.set_property(node, property_name, value)

        valid_references = properties_and_references.require_valid_references(
            node_type,
            self.store,
            caught_exceptions,
            keep_unresolvable=self.settings.keep_unresolvable_references,
        )
        for reference_name, value in valid_references.items():
            self.store.set_reference(node, reference_name, value)
        self._transition(node, ApplicationState.APPLIED)

    def _derive_uri_path_segment(self, node: Node, properties: dict[str, Any]) -> None:
        if (
            node.node_type.is_of_type(self.settings.document_node_type)
            and properties.get("title") is not None
            and "uriPathSegment" not in properties
        ):
            self.store.set_property(
                node, "uriPathSegment", render_valid_node_name(properties["title"])
            )

    def _set_hidden(self, node: Node, value: Any, caught_exceptions: CaughtExceptions) -> None:
        if not isinstance(value, bool):
            caught_exceptions.add(
                CaughtException.from_exception(
                    PropertyIgnoredError(
                        "hidden",
                        node.node_type.name,
                        f"Because `hidden` must be a boolean, got `{value!r}`.",
                    )
                ).with_origin(property_origin("hidden", node.node_type.name))
            )
            return
        self.store.set_hidden(node, value)

    def _finish(self, node: Node, context: Context, options: dict[str, Any]) -> None:
        self._transition(node, ApplicationState.CHILDREN_APPLIED)
        for listener in self._listeners:
            listener(node, context, options)

    @staticmethod
    def _transition(node: Node, state: ApplicationState) -> None:
        logger.debug("Template part at %s: %s", node.path, state.value)
