"""Substitution driver: fills every placeholder of one document text."""

import logging
from pathlib import Path
from typing import Callable, Optional, Union

from ..memory import ValueCache
from ..placeholders import (
    ExpressionEnvironment,
    FillResult,
    LeftoverPlaceholderError,
    Placeholder,
    PlaceholderParser,
    PlaceholderResolver,
    ValueSource,
)

logger = logging.getLogger(__name__)


class DocumentText:
    """
    Document text plus the values found for its placeholders so far.

    Substitution always targets the exact delimited tokens of the original
    text, so values containing the marker character are never rescanned.
    An optional ``escape`` callable turns values into the document's own
    notation (XML escaping for Word bodies) before they are inserted.
    """

    def __init__(
        self,
        text: str,
        parser: PlaceholderParser,
        escape: Optional[Callable[[str], str]] = None,
    ):
        self.original = text
        self.parser = parser
        self.escape = escape
        self.values: dict[str, str] = {}

    def substitute(self, placeholder: Placeholder, value: str):
        """Replace every occurrence of ``placeholder`` with ``value``."""
        self.values[placeholder.raw] = self.escape(value) if self.escape else value

    def is_substituted(self, placeholder: Placeholder) -> bool:
        return placeholder.raw in self.values

    def render(self) -> tuple[str, list[tuple[int, int]]]:
        """Return the filled text and the spans of the inserted values."""
        return self.parser.render(self.original, self.values)

    @property
    def text(self) -> str:
        return self.render()[0]


class SubstitutionDriver:
    """
    Fills the placeholders of a document text.

    This is the main entry point of the engine. It coordinates the parser,
    the value cache, the expression environment and the resolver:

    1. Scan the text and split placeholders into literals and formulas
    2. Bind saved values and substitute the literals they cover
    3. Ask for the remaining literals, bind and substitute them
    4. Resolve the formulas, asking for any names they still need
    5. Check nothing is left and return the text with the entered values
    """

    def __init__(
        self,
        value_source: ValueSource,
        cache: Optional[ValueCache] = None,
        parser: Optional[PlaceholderParser] = None,
        environment_factory: Callable[[], ExpressionEnvironment] = ExpressionEnvironment,
    ):
        """
        Initialize the driver.

        Args:
            value_source: Where values for unknown names come from
            cache: Optional ValueCache to pre-seed values from
            parser: Optional PlaceholderParser (created if not provided)
            environment_factory: Builds a fresh environment for every run
        """
        self.value_source = value_source
        self.cache = cache
        self.parser = parser or PlaceholderParser()
        self.environment_factory = environment_factory

    def fill(
        self,
        text: str,
        template_path: Optional[Union[str, Path]] = None,
        escape: Optional[Callable[[str], str]] = None,
    ) -> FillResult:
        """
        Fill every placeholder in ``text``.

        Args:
            text: The document text
            template_path: Template the text came from, used to find saved values
            escape: Converts values to the document notation before insertion

        Returns:
            FillResult with the filled text and the values entered in this run

        Raises:
            CacheLoadError: If the saved values are malformed
            EvaluationError: If a formula fails for a reason other than an unbound name
            InputExhaustedError: If input ends before a required value was given
            LeftoverPlaceholderError: If a placeholder could not be filled
        """
        cached_values = {}
        if self.cache is not None and template_path is not None:
            cached_values = self.cache.load(template_path)

        placeholders = self.parser.scan(text)
        if not placeholders:
            logger.info("No placeholders found, text left unchanged")
            return FillResult(text=text, cached_values=cached_values)

        literals, formulas = self.parser.partition(placeholders)
        logger.info(f"Found {len(literals)} literal and {len(formulas)} formula placeholders")

        environment = self.environment_factory()
        document = DocumentText(text, self.parser, escape)
        entered_values: dict[str, str] = {}

        for name, value in cached_values.items():
            environment.bind(name, value)

        pending = []
        for placeholder in literals:
            if placeholder.raw in cached_values:
                document.substitute(placeholder, cached_values[placeholder.raw])
            else:
                pending.append(placeholder)

        for placeholder in pending:
            value = self.value_source.request(placeholder.raw)
            environment.bind(placeholder.raw, value)
            entered_values[placeholder.raw] = value
            document.substitute(placeholder, value)

        resolver = PlaceholderResolver(environment, self.value_source)
        resolved = resolver.resolve_all(formulas, entered_values)
        for placeholder in formulas:
            document.substitute(placeholder, resolved[placeholder.raw])

        # Tokens straddling the original text and an inserted value count too
        filled, inserted = document.render()
        leftovers = self.parser.find_leftovers(filled, inserted)
        if leftovers:
            raise LeftoverPlaceholderError(leftovers)

        logger.info(
            f"Filled {len(placeholders)} placeholders "
            f"({len(cached_values)} saved, {len(entered_values)} entered)"
        )
        return FillResult(
            text=filled,
            placeholders=placeholders,
            entered_values=entered_values,
            cached_values=cached_values,
        )
