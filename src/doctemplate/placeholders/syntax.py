"""Placeholder syntax definitions and patterns."""

import keyword
import re
from functools import lru_cache
from typing import Pattern

# Leading character that turns a placeholder into a formula (!=price*qty!)
FORMULA_PREFIX = "="

# Characters that may never appear inside a placeholder besides the marker.
# Angle brackets keep matches from spanning the markup of a document body.
EXCLUDED_CHARACTERS = "<>"


@lru_cache(maxsize=None)
def placeholder_pattern(marker: str = "!") -> Pattern:
    """
    Build the pattern matching a placeholder delimited by ``marker``.

    The inner text must be non-empty and contain neither the marker nor an
    angle bracket, so ``!name!`` matches but ``!a<b>c!`` does not.
    """
    escaped = re.escape(marker)
    excluded = re.escape(marker + EXCLUDED_CHARACTERS)
    return re.compile(rf"{escaped}([^{excluded}]+){escaped}")


def format_token(raw: str, marker: str = "!") -> str:
    """Wrap raw placeholder text in its delimiters."""
    return f"{marker}{raw}{marker}"


def is_formula(raw: str) -> bool:
    return raw.startswith(FORMULA_PREFIX)


def is_valid_binding_name(name: str) -> bool:
    """
    Check if a name can be referenced from a formula.

    Literal placeholders with other names (e.g. "first name") are still
    bound and substituted, they are just not reachable from expressions.
    """
    return name.isidentifier() and not keyword.iskeyword(name)
