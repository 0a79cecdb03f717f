"""Pydantic schemas for lt_ticket API.

Amounts arrive as peso decimals and are converted to centavos here; every
layer below the router works in integer centavos.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from config.settings import settings
from src.lt_common.errors import InvalidBetError, TooManyBetsError
from src.lt_common.money import centavos_to_display, pesos_to_centavos
from src.lt_ticket.domain.models import Bet, BetRequest, Ticket, TicketReceipt

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class BetItem(BaseModel):
    bet_type: str = Field(..., description="standard or rambolito")
    bet_combination: str | int = Field(..., description="1-3 digits, left-padded to 3")
    bet_amount: Decimal = Field(..., description="Amount in pesos, at most 2 decimals")


class PurchaseRequest(BaseModel):
    draw_id: int = Field(..., gt=0)
    # Parsing bound only; anything over MAX_BETS_PER_TICKET is rejected as TooManyBets.
    bets: list[BetItem] = Field(..., max_length=settings.MAX_BETS_PER_TICKET * 2)

    def to_bet_requests(self) -> list[BetRequest]:
        if len(self.bets) > settings.MAX_BETS_PER_TICKET:
            raise TooManyBetsError(settings.MAX_BETS_PER_TICKET)
        requests: list[BetRequest] = []
        for index, item in enumerate(self.bets):
            try:
                amount = pesos_to_centavos(item.bet_amount)
            except ValueError as exc:
                raise InvalidBetError(index, str(exc)) from exc
            requests.append(BetRequest(item.bet_type, str(item.bet_combination), amount))
        return requests


class RefundRequest(BaseModel):
    reason: str | None = Field(None, max_length=255)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BetResponse(BaseModel):
    sequence: str
    bet_type: str
    bet_combination: str
    bet_amount_centavos: int
    bet_amount_display: str

    @classmethod
    def from_domain(cls, bet: Bet) -> "BetResponse":
        return cls(
            sequence=bet.sequence,
            bet_type=bet.bet_type,
            bet_combination=bet.bet_combination,
            bet_amount_centavos=bet.bet_amount,
            bet_amount_display=centavos_to_display(bet.bet_amount),
        )


class PurchaseResponse(BaseModel):
    ticket_id: str
    ticket_number: str
    draw_id: int
    total_amount_centavos: int
    total_amount_display: str
    remaining_balance_centavos: int
    remaining_balance_display: str
    bets: list[BetResponse]
    replayed: bool

    @classmethod
    def from_receipt(cls, receipt: TicketReceipt) -> "PurchaseResponse":
        return cls(
            ticket_id=receipt.ticket_id,
            ticket_number=receipt.ticket_number,
            draw_id=receipt.draw_id,
            total_amount_centavos=receipt.total_amount,
            total_amount_display=centavos_to_display(receipt.total_amount),
            remaining_balance_centavos=receipt.remaining_balance,
            remaining_balance_display=centavos_to_display(receipt.remaining_balance),
            bets=[BetResponse.from_domain(b) for b in receipt.bets],
            replayed=receipt.replayed,
        )


class TicketResponse(BaseModel):
    ticket_id: str
    ticket_number: str
    draw_id: int
    status: str
    total_amount_centavos: int
    total_amount_display: str
    qr_payload: str | None
    created_at: str
    bets: list[BetResponse]

    @classmethod
    def from_domain(cls, ticket: Ticket) -> "TicketResponse":
        return cls(
            ticket_id=ticket.id,
            ticket_number=ticket.ticket_number,
            draw_id=ticket.draw_id,
            status=ticket.status,
            total_amount_centavos=ticket.total_amount,
            total_amount_display=centavos_to_display(ticket.total_amount),
            qr_payload=ticket.qr_payload,
            created_at=ticket.created_at.isoformat() if ticket.created_at else "",
            bets=[BetResponse.from_domain(b) for b in ticket.bets],
        )


class RefundResponse(BaseModel):
    ticket_id: str
    refunded_centavos: int
    refunded_display: str
    current_balance_centavos: int
    current_balance_display: str

    @classmethod
    def from_result(cls, ticket_id: str, refunded: int, balance: int) -> "RefundResponse":
        return cls(
            ticket_id=ticket_id,
            refunded_centavos=refunded,
            refunded_display=centavos_to_display(refunded),
            current_balance_centavos=balance,
            current_balance_display=centavos_to_display(balance),
        )
