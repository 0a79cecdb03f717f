"""Pydantic response schemas for lt_limits API."""

from pydantic import BaseModel

from src.lt_limits.domain.models import LimitStatus, TotalWithCap


class LimitCheckResponse(BaseModel):
    draw_id: int
    bet_combination: str
    bet_type: str
    current_amount_centavos: int
    limit_amount_centavos: int
    remaining_amount_centavos: int
    is_sold_out: bool

    @classmethod
    def from_status(
        cls, draw_id: int, combination: str, bet_type: str, status: LimitStatus
    ) -> "LimitCheckResponse":
        return cls(
            draw_id=draw_id,
            bet_combination=combination,
            bet_type=bet_type,
            current_amount_centavos=status.current_amount,
            limit_amount_centavos=status.limit_amount,
            remaining_amount_centavos=status.remaining_amount,
            is_sold_out=status.is_sold_out,
        )


class TotalItem(BaseModel):
    bet_combination: str
    bet_type: str
    total_amount_centavos: int
    ticket_count: int
    limit_amount_centavos: int | None
    remaining_amount_centavos: int
    utilization_pct: float
    is_sold_out: bool

    @classmethod
    def from_domain(cls, total: TotalWithCap) -> "TotalItem":
        return cls(
            bet_combination=total.bet_combination,
            bet_type=total.bet_type,
            total_amount_centavos=total.total_amount,
            ticket_count=total.ticket_count,
            limit_amount_centavos=total.cap,
            remaining_amount_centavos=total.remaining,
            utilization_pct=total.utilization_pct,
            is_sold_out=total.is_sold_out,
        )


class TotalsResponse(BaseModel):
    draw_id: int
    items: list[TotalItem]
