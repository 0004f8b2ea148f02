"""
Entry points for building and applying node templates.

NodeTemplateService wires the expression processor, the template factory and
the applier together for one node store. Recoverable errors never escape:
each call returns the CaughtExceptions sink of the invocation alongside
whatever was built or applied.
"""

import logging
from typing import Any

from nodetemplates.application.applier import NodeTemplateApplier
from nodetemplates.content_repository.node import Node
from nodetemplates.content_repository.node_store import NodeStore
from nodetemplates.core.types import Context, NodeTemplateAppliedListener, RawConfiguration
from nodetemplates.domain.caught_exceptions import CaughtExceptions
from nodetemplates.domain.template import Template
from nodetemplates.domain.template_builder import TemplateBuilder
from nodetemplates.domain.template_factory import TemplateFactory
from nodetemplates.expressions.evaluator import ExpressionEvaluator
from nodetemplates.expressions.processor import ExpressionValueProcessor
from nodetemplates.settings import NodeTemplatesSettings

logger = logging.getLogger(__name__)


class NodeTemplateService:
    """Builds templates from configuration and applies them to nodes of one store."""

    def __init__(
        self,
        store: NodeStore,
        settings: NodeTemplatesSettings | None = None,
        evaluator: ExpressionEvaluator | None = None,
    ):
        self.store = store
        self.settings = settings or NodeTemplatesSettings()
        self.processor = ExpressionValueProcessor(evaluator)
        self.factory = TemplateFactory()
        self.applier = NodeTemplateApplier(store, self.settings, self.factory)

    def on_node_template_applied(self, listener: NodeTemplateAppliedListener) -> None:
        self.applier.on_node_template_applied(listener)

    def build(
        self, configuration: RawConfiguration, context: Context | None = None
    ) -> tuple[Template, CaughtExceptions]:
        """
        Build the evaluated Template tree without touching any node.

        Raises:
            TemplateConfigurationError: If the configuration holds illegal keys
        """
        caught_exceptions = CaughtExceptions()
        template = self.factory.create_from_configuration(
            configuration, dict(context or {}), self.processor, caught_exceptions
        )
        return template, caught_exceptions

    def apply(
        self,
        template: Template,
        node: Node,
        context: Context | None = None,
        options: dict[str, Any] | None = None,
    ) -> CaughtExceptions:
        """
        Apply an already built Template tree to `node`.

        Raises:
            InvalidPropertyNameError: If a property uses a reserved legacy name
        """
        caught_exceptions = CaughtExceptions()
        self.applier.apply(template, node, caught_exceptions, context, options)
        self._log_caught_exceptions(node, caught_exceptions)
        return caught_exceptions

    def build_and_apply(
        self,
        configuration: RawConfiguration,
        node: Node,
        context: Context | None = None,
        options: dict[str, Any] | None = None,
    ) -> tuple[Template, CaughtExceptions]:
        """
        Evaluate a root template configuration and apply it to `node`.

        Each part is evaluated right before its node is materialized, so
        expressions can refer to `node` and `parentNode`.

        Params:
            configuration: Raw root template configuration
            node: Node the root template is applied to
            context: Initial evaluation context
            options: Pass-through options for listeners

        Returns:
            Tuple of (Template tree of what was applied, caught exceptions)

        Raises:
            TemplateConfigurationError: If the configuration holds illegal keys
            InvalidPropertyNameError: If a property uses a reserved legacy name
        """
        caught_exceptions = CaughtExceptions()
        builder = TemplateBuilder.create_for_root(
            configuration, dict(context or {}), self.processor, caught_exceptions
        )
        template = self.applier.build_and_apply(builder, node, options)
        self._log_caught_exceptions(node, caught_exceptions)
        return template, caught_exceptions

    def apply_node_type_template(
        self,
        node: Node,
        data: dict[str, Any] | None = None,
        options: dict[str, Any] | None = None,
    ) -> tuple[Template, CaughtExceptions]:
        """
        Apply the template declared in `options.template` of the node's type.

        The template sees `data` (e.g. values entered when creating the node)
        and `triggeringNode` in its context.

        Returns:
            Tuple of (applied Template tree, caught exceptions); empty if the
            node type declares no template
        """
        configuration = node.node_type.template_configuration()
        if not configuration:
            return Template.empty(), CaughtExceptions()
        return self.build_and_apply(
            configuration, node, {"data": data or {}, "triggeringNode": node}, options
        )

    def create_node_with_template(
        self,
        parent: Node,
        node_type_name: str,
        name: str | None = None,
        data: dict[str, Any] | None = None,
        options: dict[str, Any] | None = None,
    ) -> tuple[Node, Template, CaughtExceptions]:
        """
        Create a node and apply the template of its node type.

        Raises:
            NodeCreationError: If the node itself cannot be created
        """
        node = self.store.create_child(parent, node_type_name, name)
        template, caught_exceptions = self.apply_node_type_template(node, data, options)
        return node, template, caught_exceptions

    def _log_caught_exceptions(self, node: Node, caught_exceptions: CaughtExceptions) -> None:
        if not self.settings.log_caught_exceptions:
            return
        for caught_exception in caught_exceptions:
            logger.warning(
                "Template for %s was not applied completely: %s",
                node.path,
                caught_exception.to_message(),
            )


def build_and_apply(
    configuration: RawConfiguration,
    node: Node,
    store: NodeStore,
    context: Context | None = None,
    options: dict[str, Any] | None = None,
    settings: NodeTemplatesSettings | None = None,
) -> tuple[Template, CaughtExceptions]:
    """Build and apply a template configuration with a one-off NodeTemplateService."""
    return NodeTemplateService(store, settings).build_and_apply(
        configuration, node, context, options
    )
