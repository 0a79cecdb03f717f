"""SettlementProcessor: record an official number and grade the draw's tickets.

Settling is two steps:
  1. One transaction flips the draw to settled and stores the draw result.
     The conditional UPDATE admits exactly one caller per draw.
  2. Pending tickets are graded in batches, one commit per batch. Each
     ticket moves pending -> won|lost with a conditional update, so a
     crashed run can be finished by resume() without paying anyone twice.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.lt_betting.domain.prize import PrizeTable
from src.lt_betting.domain.rules import is_official_number
from src.lt_common.enums import TicketStatus
from src.lt_common.errors import (
    DrawAlreadySettledError,
    DrawNotFoundError,
    DrawNotSettledError,
    InvalidWinningNumberError,
)
from src.lt_common.money import centavos_to_display
from src.lt_draw.domain.repository import DrawRepositoryProtocol
from src.lt_draw.infrastructure.persistence import DrawRepository
from src.lt_limits.domain.repository import LimitRepositoryProtocol
from src.lt_limits.infrastructure.persistence import LimitRepository
from src.lt_settlement.application.schemas import (
    DrawResultResponse,
    DrawResultWinner,
    SettlementResponse,
    WinnerItem,
)
from src.lt_settlement.domain.evaluation import TicketEvaluation, evaluate_ticket
from src.lt_ticket.domain.repository import TicketRepositoryProtocol
from src.lt_ticket.infrastructure.persistence import TicketRepository

logger = logging.getLogger(__name__)


class SettlementProcessor:
    def __init__(
        self,
        draw_repo: DrawRepositoryProtocol | None = None,
        ticket_repo: TicketRepositoryProtocol | None = None,
        limit_repo: LimitRepositoryProtocol | None = None,
        batch_size: int | None = None,
    ) -> None:
        self._draws: DrawRepositoryProtocol = draw_repo or DrawRepository()
        self._tickets: TicketRepositoryProtocol = ticket_repo or TicketRepository()
        self._limits: LimitRepositoryProtocol = limit_repo or LimitRepository()
        self._batch_size = batch_size or settings.SETTLEMENT_BATCH_SIZE

    async def settle(
        self,
        db: AsyncSession,
        draw_id: int,
        official_number: str,
        input_by: int | None = None,
    ) -> SettlementResponse:
        if not is_official_number(official_number):
            raise InvalidWinningNumberError(official_number)

        try:
            draw = await self._draws.mark_settled(db, draw_id, official_number)
            if draw is None:
                if await self._draws.get_draw(db, draw_id) is None:
                    raise DrawNotFoundError(draw_id)
                raise DrawAlreadySettledError(draw_id)
            await self._draws.insert_result(db, draw_id, official_number, input_by)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Draw %s settled with %s by %s", draw_id, official_number, input_by)
        return await self._grade_pending(db, draw_id, official_number)

    async def resume(self, db: AsyncSession, draw_id: int) -> SettlementResponse:
        """Grade tickets left pending by an interrupted settle()."""
        draw = await self._draws.get_draw(db, draw_id)
        if draw is None:
            raise DrawNotFoundError(draw_id)
        if not draw.is_settled or draw.winning_number is None:
            raise DrawNotSettledError(draw_id)
        logger.info("Resuming settlement of draw %s", draw_id)
        return await self._grade_pending(db, draw_id, draw.winning_number)

    async def get_result(self, db: AsyncSession, draw_id: int) -> DrawResultResponse:
        draw = await self._draws.get_draw(db, draw_id)
        if draw is None:
            raise DrawNotFoundError(draw_id)
        if not draw.is_settled or draw.winning_number is None:
            raise DrawNotSettledError(draw_id)
        winners = await self._tickets.list_winning_tickets(db, draw_id)
        total = sum(w.prize_amount for w in winners)
        return DrawResultResponse(
            draw_id=draw.id,
            draw_date=draw.draw_date.isoformat(),
            time_slot=draw.time_slot,
            winning_number=draw.winning_number,
            settled_at=draw.settled_at.isoformat() if draw.settled_at else None,
            winners_count=len(winners),
            total_payout_centavos=total,
            total_payout_display=centavos_to_display(total),
            winners=[
                DrawResultWinner(
                    ticket_id=w.ticket_id,
                    ticket_number=w.ticket_number,
                    user_id=w.user_id,
                    prize_amount_centavos=w.prize_amount,
                )
                for w in winners
            ],
        )

    async def _grade_pending(
        self, db: AsyncSession, draw_id: int, official_number: str
    ) -> SettlementResponse:
        # Multipliers are read once so every ticket in this run is paid alike.
        prizes = PrizeTable(await self._limits.get_prize_multipliers(db))
        winners: list[TicketEvaluation] = []
        processed = 0

        while True:
            try:
                batch = await self._tickets.list_pending_for_draw(db, draw_id, self._batch_size)
                if not batch:
                    await db.commit()
                    break
                graded = 0
                for ticket in batch:
                    evaluation = evaluate_ticket(ticket, official_number, prizes)
                    new_status = TicketStatus.WON if evaluation.is_winner else TicketStatus.LOST
                    if not await self._tickets.transition_status(
                        db, ticket.id, TicketStatus.PENDING.value, new_status.value
                    ):
                        # Refunded or graded by a concurrent run.
                        continue
                    graded += 1
                    if evaluation.is_winner:
                        await self._tickets.insert_winning_ticket(
                            db, ticket.id, draw_id, evaluation.prize_amount
                        )
                        winners.append(evaluation)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
            processed += graded
            if graded == 0:
                break

        total_prize = sum(w.prize_amount for w in winners)
        logger.info(
            "Draw %s graded: tickets=%d winners=%d payout=%s",
            draw_id, processed, len(winners), centavos_to_display(total_prize),
        )
        return SettlementResponse(
            draw_id=draw_id,
            winning_number=official_number,
            tickets_processed=processed,
            winners_count=len(winners),
            total_prize_centavos=total_prize,
            total_prize_display=centavos_to_display(total_prize),
            winners=[WinnerItem.from_evaluation(w) for w in winners],
        )
