"""
Template application.

This package materializes templates on a node tree and provides the
service entry points.
"""

from nodetemplates.application.applier import ApplicationState, NodeTemplateApplier
from nodetemplates.application.service import NodeTemplateService, build_and_apply

__all__ = [
    "ApplicationState",
    "NodeTemplateApplier",
    "NodeTemplateService",
    "build_and_apply",
]
