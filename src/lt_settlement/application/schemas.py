"""Pydantic schemas for lt_settlement API."""

from pydantic import BaseModel, Field

from src.lt_common.money import centavos_to_display
from src.lt_settlement.domain.evaluation import TicketEvaluation


class SettleRequest(BaseModel):
    winning_number: str = Field(..., description="Official 3-digit result, e.g. '042'")


class WinningBetItem(BaseModel):
    sequence: str
    bet_type: str
    bet_combination: str
    bet_amount_centavos: int
    prize_amount_centavos: int


class WinnerItem(BaseModel):
    ticket_id: str
    ticket_number: str
    user_id: int
    prize_amount_centavos: int
    prize_amount_display: str
    winning_bets: list[WinningBetItem]

    @classmethod
    def from_evaluation(cls, evaluation: TicketEvaluation) -> "WinnerItem":
        ticket = evaluation.ticket
        return cls(
            ticket_id=ticket.id,
            ticket_number=ticket.ticket_number,
            user_id=ticket.user_id,
            prize_amount_centavos=evaluation.prize_amount,
            prize_amount_display=centavos_to_display(evaluation.prize_amount),
            winning_bets=[
                WinningBetItem(
                    sequence=b.sequence,
                    bet_type=b.bet_type,
                    bet_combination=b.bet_combination,
                    bet_amount_centavos=b.bet_amount,
                    prize_amount_centavos=b.prize_amount,
                )
                for b in evaluation.winning_bets
            ],
        )


class SettlementResponse(BaseModel):
    draw_id: int
    winning_number: str
    tickets_processed: int
    winners_count: int
    total_prize_centavos: int
    total_prize_display: str
    winners: list[WinnerItem]


class DrawResultWinner(BaseModel):
    ticket_id: str
    ticket_number: str
    user_id: int
    prize_amount_centavos: int


class DrawResultResponse(BaseModel):
    draw_id: int
    draw_date: str
    time_slot: str
    winning_number: str
    settled_at: str | None
    winners_count: int
    total_payout_centavos: int
    total_payout_display: str
    winners: list[DrawResultWinner]
