"""Placeholder resolution engine.

This module finds placeholders (like !name! or !=price*qty!) in document
text and computes their values: literals come from the user, formulas are
evaluated as expressions, and names a formula needs are asked for on demand.
"""

from .models import (
    Placeholder,
    PlaceholderType,
    FillResult,
    DocTemplateError,
    UnresolvedNameError,
    EvaluationError,
    InputExhaustedError,
    LeftoverPlaceholderError,
)
from .parser import PlaceholderParser
from .environment import ExpressionEnvironment
from .resolver import PlaceholderResolver
from .sources import ValueSource, ConsoleValueSource, MappingValueSource

__all__ = [
    "Placeholder",
    "PlaceholderType",
    "FillResult",
    "DocTemplateError",
    "UnresolvedNameError",
    "EvaluationError",
    "InputExhaustedError",
    "LeftoverPlaceholderError",
    "PlaceholderParser",
    "ExpressionEnvironment",
    "PlaceholderResolver",
    "ValueSource",
    "ConsoleValueSource",
    "MappingValueSource",
]
