"""Expression evaluation against an evaluation context."""

from abc import ABC, abstractmethod
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateError, Undefined, UndefinedError

from nodetemplates.core.types import Context
from nodetemplates.exceptions import EvaluationError


class ExpressionEvaluator(ABC):
    """Evaluates the body of an expression (without `${` `}`) against a context."""

    @abstractmethod
    def evaluate(self, expression: str, context: Context) -> Any:
        """
        Evaluate an expression.

        Raises:
            EvaluationError: If the expression is malformed or fails
        """
        pass


class JinjaExpressionEvaluator(ExpressionEvaluator):
    """Evaluates expressions with the Jinja2 expression language.

    Unknown names are errors, not empty values. Compiled expressions are
    cached per evaluator instance.
    """

    def __init__(self, environment: Environment | None = None):
        self._environment = environment or Environment(
            undefined=StrictUndefined, autoescape=False
        )
        self._compiled = {}

    def evaluate(self, expression: str, context: Context) -> Any:
        try:
            compiled = self._compiled.get(expression)
            if compiled is None:
                compiled = self._environment.compile_expression(
                    expression, undefined_to_none=False
                )
                self._compiled[expression] = compiled
            result = compiled(**context)
        except EvaluationError:
            raise
        except TemplateError as exception:
            raise EvaluationError(expression, exception.message or str(exception)) from exception
        except Exception as exception:
            raise EvaluationError(expression, f"{type(exception).__name__}: {exception}") from exception

        if isinstance(result, Undefined):
            try:
                str(result)
            except UndefinedError as exception:
                raise EvaluationError(expression, exception.message or "undefined") from exception
            raise EvaluationError(expression, "expression evaluated to an undefined value")
        return result
