"""
Core type definitions for the node templates engine.

This module contains the type aliases shared by the configuration cursor,
the template factory and the application engine.
"""

from collections.abc import Callable, Sequence
from typing import Any

Context = dict[str, Any]

RawConfiguration = dict[str, Any]

ConfigurationPath = str | Sequence[str]

ConfigurationValueProcessor = Callable[[Any, Context], Any]

NodeTemplateAppliedListener = Callable[[Any, Context, dict[str, Any]], None]
