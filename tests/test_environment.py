"""Tests for the expression environment and formula built-ins."""

from datetime import date, timedelta

import pytest
from babel.dates import format_date

from doctemplate.placeholders import EvaluationError, ExpressionEnvironment, UnresolvedNameError
from doctemplate.placeholders.builtins import make_currency, make_today
from doctemplate.placeholders.environment import coerce_value, format_value


@pytest.fixture
def environment() -> ExpressionEnvironment:
    return ExpressionEnvironment(locale="de_DE", date_format="medium")


class TestValueConversion:
    """Test how bound strings are exposed and results rendered."""

    def test_coerce_integers(self):
        assert coerce_value("10") == 10
        assert coerce_value("-3") == -3

    def test_coerce_floats(self):
        assert coerce_value("2.5") == 2.5
        assert coerce_value("-0.25") == -0.25

    @pytest.mark.parametrize("value", ["007", "1e5", ".5", "+3", " -3 ", "10.50", "1_000"])
    def test_coerce_keeps_text_that_would_change(self, value):
        """Test values are only converted when the number prints back as the same text."""
        assert coerce_value(value) == value

    def test_coerce_keeps_text(self):
        assert coerce_value("Alice") == "Alice"
        assert coerce_value("10,5") == "10,5"
        assert coerce_value("") == ""

    def test_format_value(self):
        assert format_value(30) == "30"
        assert format_value(30.0) == "30"
        assert format_value(2.5) == "2.5"
        assert format_value("text") == "text"
        assert format_value(None) == ""


class TestExpressionEnvironment:
    """Test binding and evaluation."""

    def test_evaluate_with_bindings(self, environment):
        environment.bind("price", "10")
        environment.bind("qty", "3")

        assert environment.evaluate("price*qty") == 30

    def test_rebinding_overwrites(self, environment):
        environment.bind("a", "1")
        environment.bind("a", "2")

        assert environment.evaluate("a") == 2
        assert environment.bindings == {"a": "2"}

    def test_contains(self, environment):
        environment.bind("a", "1")
        assert "a" in environment
        assert "b" not in environment

    def test_text_values_stay_strings(self, environment):
        environment.bind("first", "Ada")
        environment.bind("last", "Lovelace")

        assert environment.evaluate("first + ' ' + last") == "Ada Lovelace"

    def test_unresolved_name_carries_name(self, environment):
        """Test an unbound name is reported with the name itself."""
        environment.bind("price", "10")

        with pytest.raises(UnresolvedNameError) as exc_info:
            environment.evaluate("price * qty")

        assert exc_info.value.name == "qty"
        assert exc_info.value.expression == "price * qty"

    def test_only_first_unresolved_name_reported(self, environment):
        with pytest.raises(UnresolvedNameError) as exc_info:
            environment.evaluate("a + b")

        assert exc_info.value.name == "a"

    def test_unknown_function_is_evaluation_error(self, environment):
        """Test a missing callee cannot be supplied by prompting."""
        with pytest.raises(EvaluationError) as exc_info:
            environment.evaluate("unknownFn()")

        assert not isinstance(exc_info.value, UnresolvedNameError)
        assert "unknownFn" in str(exc_info.value)

    def test_syntax_error(self, environment):
        with pytest.raises(EvaluationError, match="Invalid formula"):
            environment.evaluate("price *")

    def test_statements_are_rejected(self, environment):
        with pytest.raises(EvaluationError):
            environment.evaluate("x = 1")

    def test_runtime_error(self, environment):
        environment.bind("a", "1")

        with pytest.raises(EvaluationError, match="ZeroDivisionError"):
            environment.evaluate("a / 0")

    def test_type_error(self, environment):
        environment.bind("name", "Bob")

        with pytest.raises(EvaluationError, match="TypeError"):
            environment.evaluate("name - 1")

    def test_dunder_access_rejected(self, environment):
        with pytest.raises(EvaluationError, match="not allowed"):
            environment.evaluate("().__class__")

    def test_evaluation_does_not_mutate_bindings(self, environment):
        """Test an assignment expression cannot rebind a name."""
        environment.bind("a", "1")

        assert environment.evaluate("(a := 5) + a") == 10
        assert environment.bindings == {"a": "1"}
        assert environment.evaluate("a") == 1

    def test_comprehension_sees_bindings(self, environment):
        environment.bind("n", "3")

        assert environment.evaluate("sum(i * n for i in (0, 1, 2))") == 9

    def test_referenced_names(self, environment):
        names = environment.referenced_names("currency(price * qty) + price")
        assert names == {"currency", "price", "qty"}

    def test_builtins_available_without_binding(self, environment):
        assert environment.evaluate("currency(1234.5)") == "1.234,50"
        assert environment.evaluate("round(2.345, 1)") == 2.3

    def test_currency_of_bound_value(self, environment):
        environment.bind("amount", "1234.5")

        assert environment.evaluate("eur(amount)") == "1.234,50"

    def test_binding_shadows_builtin(self, environment):
        environment.bind("today", "Monday")

        assert environment.evaluate("today") == "Monday"

    def test_leading_zeros_survive_formulas(self, environment):
        environment.bind("ref", "007")
        environment.bind("big", "1e5")

        assert environment.evaluate("ref") == "007"
        assert environment.evaluate("big") == "1e5"

    def test_names_are_normalized_like_identifiers(self, environment):
        """Test a name bound with a ligature is found by the formula parser."""
        environment.bind("\ufb01rma", "ACME")

        assert "firma" in environment
        assert "\ufb01rma" in environment
        assert environment.evaluate("\ufb01rma") == "ACME"
        assert environment.bindings == {"firma": "ACME"}


class TestBuiltins:
    """Test the locale-aware formula built-ins."""

    def test_currency_german(self):
        currency = make_currency("de_DE")
        assert currency(1234.5) == "1.234,50"
        assert currency(0) == "0,00"
        assert currency("1000000") == "1.000.000,00"

    def test_currency_english(self):
        currency = make_currency("en_US")
        assert currency(1234.5) == "1,234.50"

    def test_currency_rounds_to_two_digits(self):
        currency = make_currency("en_US")
        assert currency("2.499") == "2.50"

    def test_currency_rounds_halves_away_from_zero(self):
        currency = make_currency("de_DE")
        assert currency(0.125) == "0,13"
        assert currency("2.005") == "2,01"
        assert currency(-0.125) == "-0,13"

    def test_currency_rejects_text(self):
        currency = make_currency("de_DE")
        with pytest.raises(ValueError):
            currency("abc")

    def test_today_with_offset(self):
        today = make_today("de_DE", "medium")
        expected = format_date(date.today() + timedelta(days=14), format="medium", locale="de_DE")

        assert today(14) == expected

    def test_today_defaults_to_zero(self):
        today = make_today("de_DE", "medium")
        expected = format_date(date.today(), format="medium", locale="de_DE")

        assert today() == expected
        assert today("soon") == expected
        assert today(None) == expected

    def test_today_accepts_numeric_text(self):
        today = make_today("de_DE", "medium")
        expected = format_date(date.today() + timedelta(days=3), format="medium", locale="de_DE")

        assert today("3") == expected
