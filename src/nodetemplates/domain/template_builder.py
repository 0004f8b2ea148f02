"""
Scoped, lazily evaluating configuration cursor.

A TemplateBuilder holds one part of the raw template configuration together
with the evaluation context that is valid for it, the value processor that
evaluates expressions and the shared CaughtExceptions sink. Builders are
immutable; navigating into the configuration or extending the context
returns a new builder that shares processor and sink.
"""

from collections.abc import Mapping
from typing import Any

from nodetemplates.core.path_utils import format_path, get_value_by_path
from nodetemplates.core.types import (
    ConfigurationPath,
    ConfigurationValueProcessor,
    Context,
    RawConfiguration,
)
from nodetemplates.domain.caught_exceptions import CaughtException, CaughtExceptions
from nodetemplates.domain.results import Aborted, Evaluated, Evaluation
from nodetemplates.exceptions import TemplateConfigurationError

ROOT_LEVEL_KEYS = frozenset({"properties", "childNodes", "when", "withContext"})

NESTED_LEVEL_KEYS = frozenset(
    {"type", "name", "properties", "childNodes", "when", "withItems", "withContext"}
)


def iterate_child_configurations(
    configuration: Mapping[str, Any],
) -> list[tuple[str, Any]]:
    """
    List the entries of a `childNodes` section in declaration order.

    `childNodes` is usually a mapping of arbitrary identifiers to child
    configuration, a list is accepted as well (keys become indices).

    Returns:
        (key, child configuration) pairs, empty if the section is absent
    """
    child_nodes = configuration.get("childNodes")
    if child_nodes is None:
        return []
    if isinstance(child_nodes, Mapping):
        return [(str(key), value) for key, value in child_nodes.items()]
    if isinstance(child_nodes, list):
        return [(str(index), value) for index, value in enumerate(child_nodes)]
    raise TemplateConfigurationError("childNodes", "nested", "childNodes")


def validate_configuration_tree(
    configuration: Any, allowed_keys: frozenset[str], level: str, path: str = ""
) -> None:
    """
    Check the allowed keys of a configuration part and all of its child parts.

    Params:
        configuration: Raw configuration of one template part
        allowed_keys: Keys accepted on this level
        level: "root" or "nested", used in the error message
        path: Configuration path of this part

    Raises:
        TemplateConfigurationError: On the first illegal key or malformed part
    """
    if not isinstance(configuration, Mapping):
        raise TemplateConfigurationError(
            type(configuration).__name__, level, path or "<root>"
        )
    for key in configuration:
        if key not in allowed_keys:
            raise TemplateConfigurationError(str(key), level, path)
    for key, child_configuration in iterate_child_configurations(configuration):
        child_path = f"{path}.childNodes.{key}" if path else f"childNodes.{key}"
        validate_configuration_tree(
            child_configuration, NESTED_LEVEL_KEYS, "nested", child_path
        )


class TemplateBuilder:
    """Configuration cursor with an evaluation context and a shared error sink.

    Responsibilities:
      - Validate allowed keys of the configuration part it wraps.
      - Narrow to sub configuration and extend the evaluation context.
      - Evaluate single configuration values on demand, turning processor
        failures into a recorded CaughtException plus an `Aborted` result.
    """

    def __init__(
        self,
        configuration: RawConfiguration,
        evaluation_context: Context,
        configuration_value_processor: ConfigurationValueProcessor,
        caught_exceptions: CaughtExceptions,
    ):
        self._configuration = configuration
        self._evaluation_context = evaluation_context
        self._configuration_value_processor = configuration_value_processor
        self._caught_exceptions = caught_exceptions
        self._validate_nested_level_configuration_keys()

    @classmethod
    def create_for_root(
        cls,
        configuration: RawConfiguration,
        evaluation_context: Context,
        configuration_value_processor: ConfigurationValueProcessor,
        caught_exceptions: CaughtExceptions,
    ) -> "TemplateBuilder":
        """
        Create the builder for a root template.

        The whole configuration tree is validated up front so that an
        authoring error is reported before anything is evaluated.

        Params:
            configuration: Raw root template configuration
            evaluation_context: Initial context for expressions
            configuration_value_processor: `(value, context) -> value` callable
            caught_exceptions: Error sink for this invocation

        Raises:
            TemplateConfigurationError: If any level holds an illegal key
        """
        validate_configuration_tree(configuration, ROOT_LEVEL_KEYS, "root")
        return cls(
            configuration,
            evaluation_context,
            configuration_value_processor,
            caught_exceptions,
        )

    @property
    def caught_exceptions(self) -> CaughtExceptions:
        return self._caught_exceptions

    @property
    def evaluation_context(self) -> Context:
        return dict(self._evaluation_context)

    @property
    def configuration(self) -> RawConfiguration:
        return self._configuration

    def with_configuration(self, configuration: RawConfiguration) -> "TemplateBuilder":
        return TemplateBuilder(
            configuration,
            self._evaluation_context,
            self._configuration_value_processor,
            self._caught_exceptions,
        )

    def with_merged_evaluation_context(self, evaluation_context: Context) -> "TemplateBuilder":
        if not evaluation_context:
            return self
        return TemplateBuilder(
            self._configuration,
            {**self._evaluation_context, **evaluation_context},
            self._configuration_value_processor,
            self._caught_exceptions,
        )

    def process_configuration(
        self,
        configuration_path: ConfigurationPath,
        fallback: Any,
        origin: str | None = None,
    ) -> Evaluation:
        """
        Evaluate the configuration value at the given path.

        Params:
            configuration_path: Dotted path or segment sequence into the configuration
            fallback: Returned unevaluated when the value is absent
            origin: Origin label for a recorded failure, defaults to the path

        Returns:
            Evaluated with the processed value, or Aborted when the processor
            failed; the failure is recorded in the shared sink.
        """
        value = self.get_raw_configuration(configuration_path)
        if value is None:
            return Evaluated(fallback)
        try:
            return Evaluated(
                self._configuration_value_processor(value, self._evaluation_context)
            )
        except Exception as exception:
            path = format_path(configuration_path)
            caught_exception = CaughtException.from_exception(exception).with_cause(
                f'Expression "{value}" in "{path}"'
            )
            caught_exception = caught_exception.with_origin(
                origin or f'Configuration "{path}"'
            )
            self._caught_exceptions.add(caught_exception)
            return Aborted(caught_exception)

    def get_raw_configuration(self, configuration_path: ConfigurationPath) -> Any:
        return get_value_by_path(self._configuration, configuration_path)

    def _validate_nested_level_configuration_keys(self) -> None:
        if not isinstance(self._configuration, Mapping):
            raise TemplateConfigurationError(
                type(self._configuration).__name__, "nested"
            )
        for key in self._configuration:
            if key not in NESTED_LEVEL_KEYS:
                raise TemplateConfigurationError(str(key), "nested")
