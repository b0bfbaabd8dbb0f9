"""Value sources that supply values for unbound names."""

import logging
import sys
from abc import ABC, abstractmethod
from typing import Callable, Optional, TextIO

from .models import InputExhaustedError

logger = logging.getLogger(__name__)


class ValueSource(ABC):
    """Supplies the value of a name the document needs."""

    @abstractmethod
    def request(self, name: str) -> str:
        """
        Return the value for ``name``.

        Raises:
            InputExhaustedError: If no value can be supplied
        """


class ConsoleValueSource(ValueSource):
    """Asks the user on the console with a ``name=`` prompt."""

    header = "Enter template values:"

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        stream: Optional[TextIO] = None,
    ):
        self.input_func = input_func
        self.stream = stream
        self._announced = False

    def request(self, name: str) -> str:
        if not self._announced:
            print(self.header, file=self.stream or sys.stdout)
            self._announced = True

        try:
            return self.input_func(f"{name}=")
        except EOFError:
            raise InputExhaustedError(name) from None


class MappingValueSource(ValueSource):
    """
    Supplies values from a pre-filled mapping.

    Names missing from the mapping go to ``fallback`` when given, otherwise
    the request fails with InputExhaustedError. Every requested name is
    recorded in ``requested``.
    """

    def __init__(self, values: dict[str, str], fallback: Optional[ValueSource] = None):
        self.values = dict(values)
        self.fallback = fallback
        self.requested: list[str] = []

    def request(self, name: str) -> str:
        self.requested.append(name)
        if name in self.values:
            logger.debug(f"Using pre-supplied value for '{name}'")
            return self.values[name]
        if self.fallback is not None:
            return self.fallback.request(name)
        raise InputExhaustedError(name)
