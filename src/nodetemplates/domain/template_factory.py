"""
Recursive construction of Template trees from a TemplateBuilder.

Evaluation order per template part:

1. `withContext` is evaluated against the incoming context only (sibling
   entries do not see each other) and merged into the context of the part.
2. `when` decides whether the part is built at all; a false condition
   short-circuits before `withItems` is evaluated.
3. `withItems` fans the part out into one builder per item, each with `item`
   and `key` in its context.
4. `type` and `name` are resolved.
5. Every property is evaluated independently; a failing property is dropped.
6. Every child part is built recursively; a failing child is dropped.

The individual steps are public so that the application engine can evaluate
a part just before it materializes the matching node.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from nodetemplates.core.types import ConfigurationValueProcessor, Context, RawConfiguration
from nodetemplates.domain.caught_exceptions import CaughtException, CaughtExceptions
from nodetemplates.domain.results import (
    Aborted,
    Built,
    BuildResult,
    Evaluated,
    Evaluation,
    Skipped,
)
from nodetemplates.domain.template import Template, Templates
from nodetemplates.domain.template_builder import (
    TemplateBuilder,
    iterate_child_configurations,
)
from nodetemplates.exceptions import NotIterableError
from nodetemplates.expressions.recognizer import is_expression


ANONYMOUS_NODE_NAME = "(anonymous)"


def property_origin(
    property_name: str, node_type_name: str | None, node_name: str | None = None
) -> str:
    """
    Label a property for error records.

    Params:
        property_name: The property
        node_type_name: Node type of the owning template part, if known
        node_name: Name of the owning child template part; None for the root

    Returns:
        'Property "x" in NodeType "T"', 'Property "x" in child node "n"' or
        'Property "x" in root template'
    """
    if node_type_name is not None:
        return f'Property "{property_name}" in NodeType "{node_type_name}"'
    if node_name is not None:
        return f'Property "{property_name}" in child node "{node_name}"'
    return f'Property "{property_name}" in root template'


class TemplateFactory:
    """Turns TemplateBuilder cursors into evaluated Template trees."""

    def create_from_configuration(
        self,
        configuration: RawConfiguration,
        evaluation_context: Context,
        configuration_value_processor: ConfigurationValueProcessor,
        caught_exceptions: CaughtExceptions,
    ) -> Template:
        """
        Build the root Template of a template configuration.

        Params:
            configuration: Raw root template configuration
            evaluation_context: Initial context for expressions
            configuration_value_processor: `(value, context) -> value` callable
            caught_exceptions: Error sink for this invocation

        Returns:
            The evaluated root template, empty if the root was skipped or aborted

        Raises:
            TemplateConfigurationError: If the configuration holds illegal keys
        """
        builder = TemplateBuilder.create_for_root(
            configuration,
            evaluation_context,
            configuration_value_processor,
            caught_exceptions,
        )
        return self.create_root_template(builder)

    def create_root_template(self, builder: TemplateBuilder) -> Template:
        result = self.build_root(builder)
        if isinstance(result, Built):
            return result.template
        return Template.empty()

    def build_root(self, builder: TemplateBuilder) -> BuildResult:
        scoped = self.resolve_with_context(builder)
        if isinstance(scoped, Aborted):
            return scoped
        condition = self.resolve_condition(scoped)
        if isinstance(condition, Aborted):
            return condition
        if not condition.value:
            return Skipped()
        return Built(
            Template(
                type=None,
                name=None,
                properties=self.resolve_properties(scoped, None),
                child_nodes=self.create_child_templates_of(scoped),
            )
        )

    def create_child_templates_of(self, builder: TemplateBuilder) -> Templates:
        templates = Templates()
        for child_builder in self.child_builders(builder):
            templates = templates.merge(self.create_child_templates(child_builder))
        return templates

    def create_child_templates(self, builder: TemplateBuilder) -> Templates:
        """
        Build the templates of one `childNodes` entry.

        Params:
            builder: Builder narrowed to the child configuration

        Returns:
            Zero templates if the entry was skipped or failed, one per item otherwise
        """
        scoped = self.resolve_with_context(builder)
        if isinstance(scoped, Aborted):
            return Templates()
        condition = self.resolve_condition(scoped)
        if isinstance(condition, Aborted) or not condition.value:
            return Templates()
        item_builders = self.expand_items(scoped)
        if isinstance(item_builders, Aborted):
            return Templates()

        templates = Templates()
        for item_builder in item_builders:
            result = self.build_part(item_builder)
            if isinstance(result, Built):
                templates = templates.with_added(result.template)
        return templates

    def build_part(self, builder: TemplateBuilder) -> BuildResult:
        node_type = self.resolve_type(builder)
        if isinstance(node_type, Aborted):
            return node_type
        name = self.resolve_name(builder)
        if isinstance(name, Aborted):
            return name
        return Built(
            Template(
                type=node_type.value,
                name=name.value,
                properties=self.resolve_properties(
                    builder, node_type.value, name.value or ANONYMOUS_NODE_NAME
                ),
                child_nodes=self.create_child_templates_of(builder),
            )
        )

    def resolve_with_context(self, builder: TemplateBuilder) -> TemplateBuilder | Aborted:
        with_context = builder.get_raw_configuration("withContext")
        if not with_context:
            return builder
        merged = {}
        for key in with_context:
            evaluation = builder.process_configuration(("withContext", str(key)), None)
            if isinstance(evaluation, Aborted):
                return evaluation
            merged[str(key)] = evaluation.value
        return builder.with_merged_evaluation_context(merged)

    def resolve_condition(self, builder: TemplateBuilder) -> Evaluation:
        evaluation = builder.process_configuration("when", True)
        if isinstance(evaluation, Aborted):
            return evaluation
        return Evaluated(bool(evaluation.value))

    def expand_items(self, builder: TemplateBuilder) -> list[TemplateBuilder] | Aborted:
        """
        Fan a template part out over its `withItems` collection.

        Without `withItems`, or with an empty one, the builder is returned
        unchanged, so an `item` or `key` of an ancestor stays visible. A
        literal scalar is split at commas; literal lists and mappings are
        used as they are; an expression must evaluate to a list or a mapping.

        Returns:
            One builder per item, or Aborted if `withItems` could not be used
        """
        raw_items = builder.get_raw_configuration("withItems")
        if raw_items is None or (isinstance(raw_items, (str, list, Mapping)) and not raw_items):
            return [builder]

        if not is_expression(raw_items) and not isinstance(raw_items, (list, tuple, Mapping)):
            pairs = list(enumerate(item.strip() for item in str(raw_items).split(",")))
        else:
            evaluation = builder.process_configuration("withItems", [])
            if isinstance(evaluation, Aborted):
                return evaluation
            pairs = self._item_pairs(evaluation.value)
            if pairs is None:
                caught_exception = CaughtException.from_exception(
                    NotIterableError(evaluation.value)
                ).with_origin(f'Expression "{raw_items}" in "withItems"')
                builder.caught_exceptions.add(caught_exception)
                return Aborted(caught_exception)

        return [
            builder.with_merged_evaluation_context({"item": item, "key": key})
            for key, item in pairs
        ]

    def resolve_type(self, builder: TemplateBuilder) -> Evaluation:
        return self._resolve_string(builder, "type")

    def resolve_name(self, builder: TemplateBuilder) -> Evaluation:
        return self._resolve_string(builder, "name")

    def resolve_properties(
        self,
        builder: TemplateBuilder,
        node_type_name: str | None,
        node_name: str | None = None,
    ) -> dict[str, Any]:
        raw_properties = builder.get_raw_configuration("properties") or {}
        properties = {}
        for property_name in raw_properties:
            evaluation = builder.process_configuration(
                ("properties", str(property_name)),
                None,
                origin=property_origin(str(property_name), node_type_name, node_name),
            )
            if isinstance(evaluation, Evaluated):
                properties[str(property_name)] = evaluation.value
        return properties

    def child_builders(self, builder: TemplateBuilder) -> list[TemplateBuilder]:
        return [
            builder.with_configuration(child_configuration)
            for _, child_configuration in iterate_child_configurations(
                builder.configuration
            )
        ]

    @staticmethod
    def _resolve_string(builder: TemplateBuilder, key: str) -> Evaluation:
        evaluation = builder.process_configuration(key, None)
        if isinstance(evaluation, Aborted) or evaluation.value is None:
            return evaluation
        return Evaluated(str(evaluation.value))

    @staticmethod
    def _item_pairs(items: Any) -> list[tuple[Any, Any]] | None:
        if isinstance(items, Mapping):
            return list(items.items())
        if isinstance(items, (str, bytes)) or not isinstance(items, Iterable):
            return None
        return list(enumerate(items))
