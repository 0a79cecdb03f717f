"""Ticket domain models: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime

from src.lt_common.enums import TicketStatus

# Bet rows on a slip are lettered A..J in submission order.
BET_SEQUENCE_LETTERS = "ABCDEFGHIJ"


@dataclass(frozen=True)
class BetRequest:
    bet_type: str
    bet_combination: str
    bet_amount: int  # centavos


@dataclass
class Bet:
    sequence: str
    bet_type: str
    bet_combination: str
    bet_amount: int  # centavos
    id: int | None = None
    ticket_id: str | None = None


@dataclass
class Ticket:
    id: str                  # snowflake
    ticket_number: str       # 17 digits, printed on the slip
    user_id: int
    draw_id: int
    total_amount: int        # centavos
    status: str = TicketStatus.PENDING.value
    bets: list[Bet] = field(default_factory=list)
    idempotency_key: str | None = None
    qr_payload: str | None = None
    created_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == TicketStatus.PENDING


@dataclass(frozen=True)
class TicketReceipt:
    ticket_id: str
    ticket_number: str
    draw_id: int
    total_amount: int
    remaining_balance: int
    bets: tuple[Bet, ...]
    replayed: bool = False


@dataclass
class WinningTicketView:
    ticket_id: str
    ticket_number: str
    user_id: int
    draw_id: int
    prize_amount: int
