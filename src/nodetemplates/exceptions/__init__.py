"""
Node template exception classes.

This package provides all exception types used throughout the node templates
engine for consistent error handling and reporting.
"""

from nodetemplates.exceptions.core import (
    EvaluationError,
    InvalidPropertyNameError,
    NodeCreationError,
    NodeTemplatesError,
    NodeTypeNotFoundError,
    NotIterableError,
    PropertyIgnoredError,
    ReferenceResolutionError,
    TemplateConfigurationError,
)

__all__ = [
    "NodeTemplatesError",
    "TemplateConfigurationError",
    "InvalidPropertyNameError",
    "EvaluationError",
    "NotIterableError",
    "PropertyIgnoredError",
    "ReferenceResolutionError",
    "NodeCreationError",
    "NodeTypeNotFoundError",
]
