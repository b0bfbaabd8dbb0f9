"""Resolver that evaluates formula placeholders, asking for missing names."""

import logging

from .environment import ExpressionEnvironment, format_value
from .models import EvaluationError, Placeholder, UnresolvedNameError
from .sources import ValueSource

logger = logging.getLogger(__name__)


class PlaceholderResolver:
    """Evaluate formula placeholders, supplying unbound names on demand."""

    def __init__(self, environment: ExpressionEnvironment, value_source: ValueSource):
        """
        Initialize the resolver.

        Args:
            environment: Environment shared with the rest of the run
            value_source: Where values for unbound names come from
        """
        self.environment = environment
        self.value_source = value_source

    def resolve(self, placeholder: Placeholder, entered_values: dict[str, str]) -> str:
        """
        Compute the text of a single formula placeholder.

        Evaluation is retried after each unbound name is supplied, bound and
        recorded in ``entered_values``. Each attempt either succeeds or binds
        one new name, so the number of retries is capped by the number of
        distinct names the expression references.

        Args:
            placeholder: The formula placeholder to resolve
            entered_values: Values entered during this run (updated in place)

        Returns:
            The rendered result of the expression

        Raises:
            EvaluationError: If the expression fails for any reason other
                than an unbound name
            InputExhaustedError: If the value source runs out of input
        """
        expression = placeholder.expression
        budget = len(self.environment.referenced_names(expression))
        supplied: set[str] = set()

        while True:
            try:
                value = self.environment.evaluate(expression)
            except UnresolvedNameError as e:
                if e.name in supplied or e.name in self.environment:
                    raise EvaluationError(
                        f"'{e.name}' is still unresolved after a value was supplied", expression
                    ) from e
                if len(supplied) >= budget:
                    raise EvaluationError(
                        f"Gave up on formula '{expression}' after {budget} supplied values",
                        expression,
                    ) from e

                logger.debug(f"Formula {placeholder.syntax} needs a value for '{e.name}'")
                entered = self.value_source.request(e.name)
                self.environment.bind(e.name, entered)
                entered_values[e.name] = entered
                supplied.add(e.name)
                continue

            logger.debug(f"Resolved {placeholder.syntax}")
            return format_value(value)

    def resolve_all(
        self, placeholders: list[Placeholder], entered_values: dict[str, str]
    ) -> dict[str, str]:
        """
        Resolve formula placeholders in order.

        Names bound while resolving one formula stay bound for the next.

        Returns:
            Dict mapping raw placeholder content to its computed text
        """
        resolved = {}
        for placeholder in placeholders:
            try:
                resolved[placeholder.raw] = self.resolve(placeholder, entered_values)
            except EvaluationError as e:
                logger.error(f"Error resolving placeholder {placeholder.syntax}: {e}")
                raise
        return resolved
