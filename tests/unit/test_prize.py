"""Tests for lt_betting.domain.prize and lt_settlement.domain.evaluation."""

from decimal import Decimal

from src.lt_betting.domain.prize import DEFAULT_MULTIPLIERS, PrizeTable
from src.lt_common.enums import PrizeCategory
from src.lt_settlement.domain.evaluation import evaluate_ticket
from src.lt_ticket.domain.models import Bet, Ticket


class TestPrizeTable:
    def test_defaults(self) -> None:
        table = PrizeTable()
        assert table.multiplier("standard", "123") == Decimal("450")
        assert table.multiplier("rambolito", "112") == Decimal("150")
        assert table.multiplier("rambolito", "123") == Decimal("75")

    def test_configured_rows_override_defaults(self) -> None:
        table = PrizeTable({"standard": Decimal("500")})
        assert table.multiplier("standard", "123") == Decimal("500")
        assert table.multiplier("rambolito", "123") == DEFAULT_MULTIPLIERS[PrizeCategory.RAMBOLITO]

    def test_unknown_configured_key_is_ignored(self) -> None:
        table = PrizeTable({"pick4": Decimal("5000")})
        assert table.multiplier("standard", "123") == Decimal("450")

    def test_rambolito_triple_pays_nothing(self) -> None:
        assert PrizeTable().prize_for("rambolito", "111", 1000) == 0

    def test_prize_in_centavos(self) -> None:
        # ₱10 standard bet pays ₱4,500.
        assert PrizeTable().prize_for("standard", "123", 1000) == 450_000

    def test_fractional_multiplier_rounds_down(self) -> None:
        table = PrizeTable({"rambolito": Decimal("75.5")})
        assert table.prize_for("rambolito", "123", 101) == 7625


def _ticket(*bets: Bet) -> Ticket:
    return Ticket(
        id="T1", ticket_number="1" * 17, user_id=1, draw_id=1,
        total_amount=sum(b.bet_amount for b in bets), bets=list(bets),
    )


class TestEvaluateTicket:
    def test_sums_winning_bets(self) -> None:
        ticket = _ticket(
            Bet("A", "standard", "123", 1000),
            Bet("B", "rambolito", "321", 1000),
            Bet("C", "standard", "999", 1000),
        )

        evaluation = evaluate_ticket(ticket, "123", PrizeTable())

        assert evaluation.is_winner
        assert [b.sequence for b in evaluation.winning_bets] == ["A", "B"]
        assert evaluation.prize_amount == 450_000 + 75_000

    def test_losing_ticket(self) -> None:
        ticket = _ticket(Bet("A", "standard", "124", 1000))
        evaluation = evaluate_ticket(ticket, "123", PrizeTable())
        assert not evaluation.is_winner
        assert evaluation.prize_amount == 0
