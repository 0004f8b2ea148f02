"""
Core building blocks for the node templates engine.

This package provides the shared type aliases and configuration path helpers.
"""

from nodetemplates.core.path_utils import (
    PathComponents,
    format_path,
    get_value_by_path,
    path_segments,
)
from nodetemplates.core.types import (
    ConfigurationPath,
    ConfigurationValueProcessor,
    Context,
    NodeTemplateAppliedListener,
    RawConfiguration,
)
from nodetemplates.core.utils import json_dump

__all__ = [
    "ConfigurationPath",
    "ConfigurationValueProcessor",
    "Context",
    "NodeTemplateAppliedListener",
    "RawConfiguration",
    "PathComponents",
    "format_path",
    "get_value_by_path",
    "path_segments",
    "json_dump",
]
