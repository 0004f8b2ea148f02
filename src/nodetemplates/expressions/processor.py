"""Configuration value processor used by TemplateBuilder."""

from typing import Any

from nodetemplates.core.types import Context
from nodetemplates.expressions.evaluator import ExpressionEvaluator, JinjaExpressionEvaluator
from nodetemplates.expressions.recognizer import extract_expression, is_expression


class ExpressionValueProcessor:
    """`(value, context) -> value` callable evaluating expression-shaped strings.

    Literal values, including lists and mappings, are returned unchanged.
    """

    def __init__(self, evaluator: ExpressionEvaluator | None = None):
        self.evaluator = evaluator or JinjaExpressionEvaluator()

    def __call__(self, value: Any, context: Context) -> Any:
        if is_expression(value):
            return self.evaluator.evaluate(extract_expression(value), context)
        return value
