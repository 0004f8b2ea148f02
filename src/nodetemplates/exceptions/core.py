"""
Exception classes for node template processing.

This module defines the exception types raised while building templates from
configuration and applying them to nodes. Two families exist:

- Fatal configuration-authoring errors (TemplateConfigurationError,
  InvalidPropertyNameError) are raised immediately and abort the whole build.
- Recoverable errors (everything else) are never raised out of the engine;
  they are wrapped into a CaughtException and collected per invocation.
"""

from typing import Any

from nodetemplates.core.utils import json_dump


class NodeTemplatesError(Exception):
    """Base exception for all node template errors."""

    pass


class TemplateConfigurationError(NodeTemplatesError, ValueError):
    """Raised when template configuration contains a key that is not allowed."""

    def __init__(self, key: str, level: str, path: str = ""):
        """
        Initialize the exception.

        Params:
            key: The illegal configuration key
            level: Either "root" or "nested", the level the key was found on
            path: Configuration path of the template part holding the key
        """
        self.key = key
        self.level = level
        self.path = path
        prefix = "Root template" if level == "root" else "Template"
        location = f" at '{path}'" if path else ""
        super().__init__(f'{prefix} configuration has illegal key "{key}"{location}')


class InvalidPropertyNameError(NodeTemplatesError, ValueError):
    """Raised when a property name uses a reserved legacy prefix or is empty."""

    def __init__(self, property_name: Any, reason: str):
        """
        Initialize the exception.

        Params:
            property_name: The offending property name
            reason: Why the name is not accepted
        """
        self.property_name = property_name
        self.reason = reason
        super().__init__(reason)


class EvaluationError(NodeTemplatesError):
    """Raised by an expression evaluator when an expression cannot be evaluated."""

    def __init__(self, expression: str, reason: str):
        """
        Initialize the exception.

        Params:
            expression: The expression text that failed
            reason: The underlying reason for the failure
        """
        self.expression = expression
        self.reason = reason
        super().__init__(f'Expression "{expression}" could not be evaluated: {reason}')


class NotIterableError(NodeTemplatesError):
    """Raised when `withItems` does not evaluate to a collection."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Type {type(value).__name__} is not iterable.")


class PropertyIgnoredError(NodeTemplatesError):
    """Raised when a property value is rejected by the validation gate."""

    def __init__(self, property_name: str, node_type: str, reason: str):
        """
        Initialize the exception.

        Params:
            property_name: The rejected property
            node_type: The node type the property was meant for
            reason: Why the property was not set
        """
        self.property_name = property_name
        self.node_type = node_type
        self.reason = reason
        super().__init__(reason)


class ReferenceResolutionError(NodeTemplatesError):
    """Raised when referenced node identifiers cannot be resolved."""

    def __init__(self, reference_name: str, node_type: str, value: Any):
        """
        Initialize the exception.

        Params:
            reference_name: The reference property
            node_type: The node type the reference was meant for
            value: The attempted reference value
        """
        self.reference_name = reference_name
        self.node_type = node_type
        self.value = value
        super().__init__(
            f"Reference could not be set, because node reference(s) {json_dump(value)} cannot be resolved."
        )


class NodeCreationError(NodeTemplatesError):
    """Raised by a node store when a child node cannot be created."""

    def __init__(self, node_type: str | None, reason: str):
        """
        Initialize the exception.

        Params:
            node_type: The node type that was requested
            reason: Why the node could not be created
        """
        self.node_type = node_type
        self.reason = reason
        super().__init__(f"Node of type '{node_type}' could not be created: {reason}")


class NodeTypeNotFoundError(NodeCreationError):
    """Raised when a node type name is not registered."""

    def __init__(self, node_type: str | None):
        super().__init__(node_type, "node type is not declared")
