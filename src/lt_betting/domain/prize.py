"""Prize multipliers.

The prize_configurations table is authoritative. A category with no active
row falls back to the default multiplier below.
"""

from collections.abc import Mapping
from decimal import ROUND_DOWN, Decimal

from src.lt_betting.domain.rules import prize_category
from src.lt_common.enums import PrizeCategory

DEFAULT_MULTIPLIERS: dict[PrizeCategory, Decimal] = {
    PrizeCategory.STANDARD: Decimal("450"),
    PrizeCategory.RAMBOLITO_DOUBLE: Decimal("150"),
    PrizeCategory.RAMBOLITO: Decimal("75"),
}


class PrizeTable:
    """Immutable multiplier lookup built from the active configuration rows."""

    def __init__(self, configured: Mapping[str, Decimal] | None = None) -> None:
        self._multipliers: dict[PrizeCategory, Decimal] = dict(DEFAULT_MULTIPLIERS)
        for key, multiplier in (configured or {}).items():
            try:
                category = PrizeCategory(key)
            except ValueError:
                continue
            self._multipliers[category] = Decimal(multiplier)

    def multiplier(self, bet_type: str, combination: str) -> Decimal:
        category = prize_category(bet_type, combination)
        if category is None:
            return Decimal(0)
        return self._multipliers[category]

    def prize_for(self, bet_type: str, combination: str, bet_amount: int) -> int:
        """Prize in centavos for a winning bet, rounded down to the centavo."""
        raw = Decimal(bet_amount) * self.multiplier(bet_type, combination)
        return int(raw.to_integral_value(rounding=ROUND_DOWN))
