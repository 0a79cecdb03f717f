"""Pure ticket evaluation against an official number."""

from dataclasses import dataclass, field

from src.lt_betting.domain.prize import PrizeTable
from src.lt_betting.domain.rules import is_winner
from src.lt_ticket.domain.models import Ticket


@dataclass(frozen=True)
class WinningBet:
    sequence: str
    bet_type: str
    bet_combination: str
    bet_amount: int
    prize_amount: int


@dataclass
class TicketEvaluation:
    ticket: Ticket
    winning_bets: list[WinningBet] = field(default_factory=list)

    @property
    def prize_amount(self) -> int:
        return sum(b.prize_amount for b in self.winning_bets)

    @property
    def is_winner(self) -> bool:
        return bool(self.winning_bets)


def evaluate_ticket(ticket: Ticket, official_number: str, prizes: PrizeTable) -> TicketEvaluation:
    evaluation = TicketEvaluation(ticket=ticket)
    for bet in ticket.bets:
        if not is_winner(bet.bet_type, bet.bet_combination, official_number):
            continue
        evaluation.winning_bets.append(
            WinningBet(
                sequence=bet.sequence,
                bet_type=bet.bet_type,
                bet_combination=bet.bet_combination,
                bet_amount=bet.bet_amount,
                prize_amount=prizes.prize_for(bet.bet_type, bet.bet_combination, bet.bet_amount),
            )
        )
    return evaluation
