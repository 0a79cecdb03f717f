"""Integer arithmetic utilities for peso amounts.

All bet amounts, balances, caps and prizes use int centavos (₱1 = 100).
Decimal is only accepted at the HTTP boundary and converted here. No float.
"""

from decimal import Decimal, InvalidOperation

CENTAVOS_PER_PESO = 100


def pesos_to_centavos(pesos: Decimal | int | str) -> int:
    """Convert a peso amount with at most 2 fractional digits to centavos.

    Raises ValueError for non-numeric input or sub-centavo precision.
    """
    try:
        value = Decimal(str(pesos))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid peso amount: {pesos!r}") from exc
    if not value.is_finite():
        raise ValueError(f"Invalid peso amount: {pesos!r}")
    centavos = value * CENTAVOS_PER_PESO
    if centavos != centavos.to_integral_value():
        raise ValueError(f"Peso amount has more than 2 decimal places: {pesos}")
    return int(centavos)


def centavos_to_pesos(centavos: int) -> Decimal:
    """1234 -> Decimal('12.34')."""
    return (Decimal(centavos) / CENTAVOS_PER_PESO).quantize(Decimal("0.01"))


def centavos_to_display(centavos: int) -> str:
    """Convert centavos to display string: 450000 -> '₱4,500.00', -1200 -> '-₱12.00'."""
    if centavos < 0:
        abs_centavos = -centavos
        return f"-₱{abs_centavos // 100:,}.{abs_centavos % 100:02d}"
    return f"₱{centavos // 100:,}.{centavos % 100:02d}"
