"""Data models for the placeholder resolution engine."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PlaceholderType(str, Enum):
    """Type of placeholder."""

    LITERAL = "literal"  # !name! - value supplied directly
    FORMULA = "formula"  # !=price*qty! - value computed from an expression


class Placeholder(BaseModel):
    """A placeholder token found in document text."""

    model_config = ConfigDict(frozen=True)

    raw: str  # Text between the markers (e.g. "=amount*2")
    type: PlaceholderType
    syntax: str  # Full delimited token (e.g. "!=amount*2!")

    @property
    def is_formula(self) -> bool:
        return self.type == PlaceholderType.FORMULA

    @property
    def expression(self) -> str:
        """Expression to evaluate; the raw text without the leading '='."""
        if self.is_formula:
            return self.raw[1:]
        return self.raw


class FillResult(BaseModel):
    """Result of filling the placeholders of one document."""

    text: str
    placeholders: list[Placeholder] = Field(default_factory=list)
    # Values typed in during this run, in the order they were entered
    entered_values: dict[str, str] = Field(default_factory=dict)
    # Values taken from the persisted cache
    cached_values: dict[str, str] = Field(default_factory=dict)


class DocTemplateError(Exception):
    """Base class for errors that abort processing of a template."""

    pass


class UnresolvedNameError(DocTemplateError):
    """Raised when an expression references a name that has no binding."""

    def __init__(self, name: str, expression: Optional[str] = None):
        self.name = name
        self.expression = expression
        super().__init__(f"{name} is not defined")


class EvaluationError(DocTemplateError):
    """Raised for any expression failure that prompting cannot fix."""

    def __init__(self, message: str, expression: Optional[str] = None):
        self.expression = expression
        super().__init__(message)


class InputExhaustedError(DocTemplateError):
    """Raised when input ends before a required value was supplied."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Input ended before a value for '{name}' was supplied")


class LeftoverPlaceholderError(DocTemplateError):
    """Raised when placeholders remain in the text after filling."""

    def __init__(self, leftovers: list[str]):
        self.leftovers = leftovers
        super().__init__(f"Placeholders left unresolved in document: {', '.join(leftovers)}")
