"""Functions available to every formula without binding."""

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Callable

from babel.dates import format_date
from babel.numbers import format_decimal

# Always exactly two fractional digits, with the locale's grouping
CURRENCY_PATTERN = "#,##0.00"
CURRENCY_STEP = Decimal("0.01")

# Plain Python built-ins that formulas may call
SAFE_BUILTINS: dict[str, Any] = {
    "abs": abs,
    "float": float,
    "int": int,
    "len": len,
    "max": max,
    "min": min,
    "round": round,
    "str": str,
    "sum": sum,
    "True": True,
    "False": False,
    "None": None,
}


def _day_offset(days: Any) -> int:
    """Interpret a day offset, falling back to 0 for non-numeric input."""
    try:
        return int(float(days))
    except (TypeError, ValueError, OverflowError):
        return 0


def make_today(locale: str, date_format: str = "medium") -> Callable[..., str]:
    """Build today(days=0): the locale-formatted date ``days`` days from now."""

    def today(days: Any = 0) -> str:
        day = date.today() + timedelta(days=_day_offset(days))
        return format_date(day, format=date_format, locale=locale)

    return today


def make_currency(locale: str) -> Callable[[Any], str]:
    """Build currency(amount): ``amount`` with two decimals in the locale's notation."""

    def currency(amount: Any) -> str:
        try:
            value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
        except InvalidOperation:
            raise ValueError(f"cannot format {amount!r} as a currency amount") from None
        if not value.is_finite():
            raise ValueError(f"cannot format {amount!r} as a currency amount")
        # Halves round away from zero
        value = value.quantize(CURRENCY_STEP, rounding=ROUND_HALF_UP)
        return format_decimal(value, format=CURRENCY_PATTERN, locale=locale)

    return currency


def build_builtins(locale: str, date_format: str = "medium") -> dict[str, Any]:
    """Return the built-in namespace for formulas formatted for ``locale``."""
    currency = make_currency(locale)
    namespace = dict(SAFE_BUILTINS)
    namespace.update(
        {
            "today": make_today(locale, date_format),
            "currency": currency,
            "eur": currency,
        }
    )
    return namespace
