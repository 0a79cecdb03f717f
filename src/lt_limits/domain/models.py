"""Domain models for lt_limits: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass


@dataclass
class CurrentBetTotal:
    draw_id: int
    bet_combination: str
    bet_type: str
    total_amount: int = 0   # centavos
    ticket_count: int = 0


@dataclass
class TotalWithCap:
    """A running total joined with its effective cap (None when unconfigured)."""

    bet_combination: str
    bet_type: str
    total_amount: int
    ticket_count: int
    cap: int | None

    @property
    def remaining(self) -> int:
        if self.cap is None:
            return 0
        return max(self.cap - self.total_amount, 0)

    @property
    def is_sold_out(self) -> bool:
        return self.cap is not None and self.total_amount >= self.cap

    @property
    def utilization_pct(self) -> float:
        if not self.cap:
            return 0.0
        return round(self.total_amount * 100 / self.cap, 2)


@dataclass(frozen=True)
class LimitStatus:
    current_amount: int
    limit_amount: int
    remaining_amount: int
    is_sold_out: bool

    @classmethod
    def of(cls, current: int, cap: int) -> "LimitStatus":
        return cls(
            current_amount=current,
            limit_amount=cap,
            remaining_amount=max(cap - current, 0),
            is_sold_out=current >= cap,
        )
