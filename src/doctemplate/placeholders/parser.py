"""Scanner for extracting placeholders from document text."""

import logging
from typing import Optional

from ..config import settings
from .models import Placeholder, PlaceholderType
from .syntax import format_token, is_formula, is_valid_binding_name, placeholder_pattern

logger = logging.getLogger(__name__)


class PlaceholderParser:
    """Find and classify placeholders in document text."""

    def __init__(self, marker: Optional[str] = None):
        self.marker = marker or settings.placeholder_marker
        self.pattern = placeholder_pattern(self.marker)

    def scan(self, text: str) -> list[Placeholder]:
        """
        Extract the distinct placeholders of a text.

        Placeholders are deduplicated by their raw content and returned in
        the order they were first found.

        Args:
            text: The document text to scan

        Returns:
            List of Placeholder objects, one per distinct raw token
        """
        placeholders: dict[str, Placeholder] = {}

        for match in self.pattern.finditer(text):
            raw = match.group(1)
            if raw in placeholders:
                continue

            placeholder = Placeholder(
                raw=raw,
                type=PlaceholderType.FORMULA if is_formula(raw) else PlaceholderType.LITERAL,
                syntax=format_token(raw, self.marker),
            )
            placeholders[raw] = placeholder
            logger.debug(f"Found placeholder: {placeholder.syntax} (type: {placeholder.type.value})")

            if not placeholder.is_formula and not is_valid_binding_name(raw):
                logger.warning(
                    f"Placeholder '{raw}' is not a valid identifier and cannot be used in formulas"
                )

        return list(placeholders.values())

    def partition(self, placeholders: list[Placeholder]) -> tuple[list[Placeholder], list[Placeholder]]:
        """Split placeholders into (literals, formulas), keeping their order."""
        literals = [p for p in placeholders if not p.is_formula]
        formulas = [p for p in placeholders if p.is_formula]
        return literals, formulas

    def replace(self, text: str, values: dict[str, str]) -> str:
        """
        Replace every placeholder whose raw content has a value.

        Only exact delimited tokens found by the scanner are replaced, never
        bare substrings, and inserted values are not scanned again.
        Placeholders without a value are left untouched.

        Args:
            text: The document text
            values: Mapping of raw placeholder content to replacement text

        Returns:
            The text with the placeholders replaced
        """
        return self.render(text, values)[0]

    def render(self, text: str, values: dict[str, str]) -> tuple[str, list[tuple[int, int]]]:
        """
        Replace placeholders like replace() and report where values went.

        Returns:
            Tuple of (new text, list of (start, end) spans of inserted values)
        """
        pieces: list[str] = []
        inserted: list[tuple[int, int]] = []
        size = 0
        last = 0

        for match in self.pattern.finditer(text):
            value = values.get(match.group(1))
            if value is None:
                continue

            before = text[last : match.start()]
            pieces.append(before)
            size += len(before)
            pieces.append(value)
            inserted.append((size, size + len(value)))
            size += len(value)
            last = match.end()

        pieces.append(text[last:])
        return "".join(pieces), inserted

    def find_leftovers(self, text: str, inserted: Optional[list[tuple[int, int]]] = None) -> list[str]:
        """
        Return the delimited tokens still present in a filled text.

        Tokens lying entirely inside one inserted value are not counted:
        values may contain the marker and are never treated as placeholders.

        Args:
            text: The filled text
            inserted: (start, end) spans of inserted values, as returned by render()

        Returns:
            Distinct leftover tokens in the order they appear
        """
        inserted = inserted or []
        leftovers: list[str] = []

        for match in self.pattern.finditer(text):
            start, end = match.span()
            if any(low <= start and end <= high for low, high in inserted):
                continue
            if match.group(0) not in leftovers:
                leftovers.append(match.group(0))

        return leftovers
