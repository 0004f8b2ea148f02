"""
Recognition of expression-shaped configuration values.

An expression is a string wrapped in `${` and `}` whose curly braces are
balanced outside of quoted string literals, e.g. `${item.title}` or
`${"{" ~ key ~ "}"}`. Everything else is a literal.
"""

import re

EXPRESSION_PATTERN = re.compile(r"^\$\{(?P<expression>.*)\}$", re.DOTALL)


def _has_balanced_braces(text: str) -> bool:
    depth = 0
    quote = None
    escaped = False
    for char in text:
        if quote:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
            continue
        if char in ("'", '"'):
            quote = char
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0 and quote is None


def is_expression(value: object) -> bool:
    """
    Check if a configuration value is expression-shaped.

    Params:
        value: Any configuration value

    Returns:
        True for strings like "${...}" with balanced braces, False otherwise
    """
    if not isinstance(value, str):
        return False
    match = EXPRESSION_PATTERN.match(value)
    return match is not None and _has_balanced_braces(match.group("expression"))


def extract_expression(value: str) -> str:
    """Return the expression body of an expression-shaped string."""
    match = EXPRESSION_PATTERN.match(value)
    if match is None or not _has_balanced_braces(match.group("expression")):
        raise ValueError(f"Value '{value}' is not an expression")
    return match.group("expression").strip()
