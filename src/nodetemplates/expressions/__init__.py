"""
Expression support for template configuration.

This package recognizes expression-shaped values and evaluates them against
the evaluation context of a template part.
"""

from nodetemplates.expressions.evaluator import ExpressionEvaluator, JinjaExpressionEvaluator
from nodetemplates.expressions.processor import ExpressionValueProcessor
from nodetemplates.expressions.recognizer import extract_expression, is_expression

__all__ = [
    "ExpressionEvaluator",
    "JinjaExpressionEvaluator",
    "ExpressionValueProcessor",
    "extract_expression",
    "is_expression",
]
