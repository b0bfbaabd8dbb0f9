"""Expression environment holding the bindings formulas are evaluated against."""

import ast
import logging
import re
import unicodedata
from typing import Any, Optional

from ..config import settings
from .builtins import build_builtins
from .models import EvaluationError, UnresolvedNameError

logger = logging.getLogger(__name__)

INTEGER_PATTERN = re.compile(r"-?\d+")
FLOAT_PATTERN = re.compile(r"-?\d+\.\d+")


def coerce_value(value: str) -> Any:
    """
    Expose a bound string to formulas.

    Strings that are the exact text of an int or float become that number so
    entered values can take part in arithmetic. Anything whose text would
    change on conversion (``007``, ``1e5``, ``10.50``) stays a string.
    """
    if INTEGER_PATTERN.fullmatch(value) and str(int(value)) == value:
        return int(value)
    if FLOAT_PATTERN.fullmatch(value) and str(float(value)) == value:
        return float(value)
    return value


def normalize_name(name: str) -> str:
    """Normalize a binding name the way Python normalizes identifiers (NFKC)."""
    return unicodedata.normalize("NFKC", name)


def format_value(value: Any) -> str:
    """Render an evaluation result as document text."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class ExpressionEnvironment:
    """
    Named bindings plus an evaluator for formula expressions.

    Formulas are Python expressions. Names resolve against the bindings
    first, then against the formula built-ins (today, currency, ...).
    Evaluation never changes the bindings; bind() is the only mutation.
    """

    def __init__(self, locale: Optional[str] = None, date_format: Optional[str] = None):
        self.locale = locale or settings.locale
        self.date_format = date_format or settings.date_format
        self._bindings: dict[str, str] = {}
        self._builtins = build_builtins(self.locale, self.date_format)

    def __contains__(self, name: str) -> bool:
        return normalize_name(name) in self._bindings

    @property
    def bindings(self) -> dict[str, str]:
        return dict(self._bindings)

    def bind(self, name: str, value: str):
        """
        Bind ``name`` to ``value``, replacing any previous binding.

        Names are stored NFKC-normalized, which is how the formula parser
        sees identifiers, so ``ﬁrma`` and ``firma`` share one binding.
        """
        name = normalize_name(name)
        self._bindings[name] = value
        logger.debug(f"Bound '{name}'")

    def parse(self, expression: str) -> ast.Expression:
        """
        Parse and check a formula expression.

        Raises:
            EvaluationError: If the expression is not a valid expression or
                touches dunder names or attributes
        """
        try:
            tree = ast.parse(expression.strip(), mode="eval")
        except SyntaxError as e:
            raise EvaluationError(f"Invalid formula '{expression}': {e.msg}", expression) from e

        for node in ast.walk(tree):
            if isinstance(node, ast.Attribute) and node.attr.startswith("__"):
                raise EvaluationError(
                    f"Access to '{node.attr}' is not allowed in formulas", expression
                )
            if isinstance(node, ast.Name) and node.id.startswith("__"):
                raise EvaluationError(f"Access to '{node.id}' is not allowed in formulas", expression)

        return tree

    def referenced_names(self, expression: str) -> set[str]:
        """Names an expression reads, built-ins included."""
        tree = self.parse(expression)
        return {
            node.id
            for node in ast.walk(tree)
            if isinstance(node, ast.Name) and isinstance(node.ctx, ast.Load)
        }

    def evaluate(self, expression: str) -> Any:
        """
        Evaluate an expression against the current bindings.

        Args:
            expression: The formula expression (without the leading '=')

        Returns:
            The value the expression evaluates to

        Raises:
            UnresolvedNameError: If a referenced name has no binding
            EvaluationError: For every other failure
        """
        tree = self.parse(expression)
        code = compile(tree, "<formula>", "eval")

        # Bindings live in the globals so comprehensions can see them too.
        # The namespace is rebuilt per call, so the expression cannot rebind.
        namespace: dict[str, Any] = {"__builtins__": self._builtins}
        namespace.update({name: coerce_value(value) for name, value in self._bindings.items()})

        try:
            return eval(code, namespace)
        except NameError as e:
            name = getattr(e, "name", None)
            if not name:
                raise EvaluationError(f"NameError: {e}", expression) from e
            if name in _called_names(tree):
                raise EvaluationError(f"'{name}' is not a known function", expression) from e
            raise UnresolvedNameError(name, expression) from e
        except Exception as e:
            raise EvaluationError(f"{type(e).__name__}: {e}", expression) from e


def _called_names(tree: ast.AST) -> set[str]:
    """Names used directly as the callee of a call expression."""
    return {
        node.func.id
        for node in ast.walk(tree)
        if isinstance(node, ast.Call) and isinstance(node.func, ast.Name)
    }
