"""
Template domain model.

This package provides the error records, the evaluated Template model, the
configuration cursor and the factory that builds Template trees.
"""

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
from nodetemplates.domain.template_builder import TemplateBuilder
from nodetemplates.domain.template_factory import TemplateFactory

__all__ = [
    "CaughtException",
    "CaughtExceptions",
    "Aborted",
    "Built",
    "BuildResult",
    "Evaluated",
    "Evaluation",
    "Skipped",
    "Template",
    "Templates",
    "TemplateBuilder",
    "TemplateFactory",
]
