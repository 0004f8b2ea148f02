"""
nodetemplates - declarative node templates for content trees

Evaluates nested template configuration against a context and materializes
the resulting node tree, collecting recoverable errors instead of failing.
"""

import logging
from importlib.metadata import version

from nodetemplates.application import NodeTemplateService, build_and_apply
from nodetemplates.content_repository import InMemoryNodeStore, Node, NodeTypeManager
from nodetemplates.domain import CaughtException, CaughtExceptions, Template, Templates
from nodetemplates.settings import NodeTemplatesSettings

__version__ = version("nodetemplates")

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "NodeTemplateService",
    "build_and_apply",
    "InMemoryNodeStore",
    "Node",
    "NodeTypeManager",
    "CaughtException",
    "CaughtExceptions",
    "Template",
    "Templates",
    "NodeTemplatesSettings",
]
