#!/usr/bin/env python3
"""Unit tests for the mana vector."""

import pytest

from goldfish.errors import ManaError
from goldfish.mana import Mana


class TestParsing:
    """Test Mana.of() notation parsing."""

    def test_generic_and_pips(self):
        """Digits are generic, letters are pips."""
        assert Mana.of("1GG") == Mana(G=2, C=1)

    def test_braces_and_case(self):
        """Brace notation and lower case are accepted."""
        assert Mana.of("{2}{g}") == Mana(G=1, C=2)

    def test_multi_digit_generic(self):
        assert Mana.of("12") == Mana(C=12)

    def test_empty_is_zero(self):
        assert Mana.of("") == Mana.zero()

    def test_invalid_notation(self):
        """Unknown symbols are rejected."""
        with pytest.raises(ValueError):
            Mana.of("1X")

    def test_negative_component_rejected(self):
        """Mana is never negative."""
        with pytest.raises(ManaError):
            Mana(G=-1)

    def test_from_dict(self):
        assert Mana.from_dict({"g": 2, "u": 1}) == Mana(U=1, G=2)

    def test_str_round_notation(self):
        assert str(Mana.of("1GG")) == "1GG"
        assert str(Mana.zero()) == "0"


class TestArithmetic:
    """Test addition, strict subtraction and payment."""

    def test_plus(self):
        assert Mana.of("G") + Mana.of("1U") == Mana(U=1, G=1, C=1)

    def test_minus_strict(self):
        """Subtraction fails when any component would go negative."""
        with pytest.raises(ManaError):
            Mana.of("G") - Mana.of("U")

    def test_minus(self):
        assert Mana.of("GGU") - Mana.of("G") == Mana(U=1, G=1)

    def test_manaerror_is_valueerror(self):
        with pytest.raises(ValueError):
            Mana.of("G").minus(Mana.of("GG"))

    def test_total_and_empty(self):
        assert Mana.of("2GG").total() == 4
        assert Mana.zero().is_empty()


class TestAffordability:
    """Test contains() and pay()."""

    def test_colored_surplus_pays_generic(self):
        """Excess colored mana satisfies generic cost."""
        assert Mana.of("GG").contains(Mana.of("1G"))

    def test_generic_needs_enough_total(self):
        assert not Mana.of("G").contains(Mana.of("1G"))

    def test_pip_needs_matching_color(self):
        """A colored pip cannot be paid by another color."""
        assert not Mana.of("GU").contains(Mana.of("GG"))
        assert Mana.of("UG").contains(Mana.of("1G"))

    def test_pay_colorless_first(self):
        """Generic is paid from colorless before colors."""
        assert Mana(G=1, C=1).pay(Mana.of("1")) == Mana(G=1)

    def test_pay_generic_from_largest_color(self):
        """Generic comes from the color with the largest surplus."""
        assert Mana(U=1, G=3).pay(Mana.of("2")) == Mana(U=1, G=1)

    def test_pay_tie_uses_wubrg_order(self):
        """Equal surpluses are spent in WUBRG order."""
        assert Mana.of("GGU").pay(Mana.of("1G")) == Mana(G=1)

    def test_pay_unaffordable(self):
        with pytest.raises(ManaError):
            Mana.of("G").pay(Mana.of("GG"))

    def test_pay_exact(self):
        assert Mana.of("GG").pay(Mana.of("1G")).is_empty()
