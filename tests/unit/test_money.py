"""Tests for lt_common.money: peso/centavo conversion and display."""

from decimal import Decimal

import pytest

from src.lt_common.money import centavos_to_display, centavos_to_pesos, pesos_to_centavos


class TestPesosToCentavos:
    def test_whole_pesos(self) -> None:
        assert pesos_to_centavos(Decimal("10")) == 1000

    def test_two_decimals(self) -> None:
        assert pesos_to_centavos(Decimal("12.34")) == 1234

    def test_int_and_str_input(self) -> None:
        assert pesos_to_centavos(5) == 500
        assert pesos_to_centavos("0.50") == 50

    def test_trailing_zeros_are_fine(self) -> None:
        assert pesos_to_centavos(Decimal("1.500")) == 150

    def test_sub_centavo_raises(self) -> None:
        with pytest.raises(ValueError, match="2 decimal"):
            pesos_to_centavos(Decimal("1.005"))

    @pytest.mark.parametrize("bad", ["abc", "", "NaN", "Infinity"])
    def test_non_numeric_raises(self, bad) -> None:
        with pytest.raises(ValueError, match="Invalid peso amount"):
            pesos_to_centavos(bad)


class TestCentavosToPesos:
    def test_basic(self) -> None:
        assert centavos_to_pesos(1234) == Decimal("12.34")

    def test_zero(self) -> None:
        assert centavos_to_pesos(0) == Decimal("0.00")


class TestCentavosToDisplay:
    def test_basic(self) -> None:
        assert centavos_to_display(450000) == "₱4,500.00"

    def test_zero(self) -> None:
        assert centavos_to_display(0) == "₱0.00"

    def test_one_centavo(self) -> None:
        assert centavos_to_display(1) == "₱0.01"

    def test_large(self) -> None:
        assert centavos_to_display(100_000_000) == "₱1,000,000.00"

    def test_negative(self) -> None:
        assert centavos_to_display(-1200) == "-₱12.00"
