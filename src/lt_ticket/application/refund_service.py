"""TicketRefundService: cancel a pending ticket and give the money back.

Refunds are only allowed while the ticket's draw is open and before its
cutoff, so a stake can never come back once the result can be known.

Lock order follows the purchase: balance -> draw (share) -> ticket -> running
totals in ascending (combination, type) order. The share lock on the draw
waits out a concurrent settle, which takes the row exclusively.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.lt_common.datetime_utils import BusinessClock, Clock
from src.lt_common.enums import TicketStatus, TransactionKind
from src.lt_common.errors import (
    AccountNotFoundError,
    RefundWindowClosedError,
    TicketNotFoundError,
    TicketNotRefundableError,
)
from src.lt_common.money import centavos_to_display
from src.lt_draw.domain.repository import DrawRepositoryProtocol
from src.lt_draw.infrastructure.persistence import DrawRepository
from src.lt_ledger.domain.repository import LedgerRepositoryProtocol
from src.lt_ledger.infrastructure.persistence import LedgerRepository
from src.lt_limits.domain.repository import LimitRepositoryProtocol
from src.lt_limits.infrastructure.persistence import LimitRepository
from src.lt_ticket.application.schemas import RefundResponse
from src.lt_ticket.domain.repository import TicketRepositoryProtocol
from src.lt_ticket.infrastructure.persistence import TicketRepository

logger = logging.getLogger(__name__)


class TicketRefundService:
    def __init__(
        self,
        ledger_repo: LedgerRepositoryProtocol | None = None,
        limit_repo: LimitRepositoryProtocol | None = None,
        ticket_repo: TicketRepositoryProtocol | None = None,
        draw_repo: DrawRepositoryProtocol | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._ledger: LedgerRepositoryProtocol = ledger_repo or LedgerRepository()
        self._limits: LimitRepositoryProtocol = limit_repo or LimitRepository()
        self._tickets: TicketRepositoryProtocol = ticket_repo or TicketRepository()
        self._draws: DrawRepositoryProtocol = draw_repo or DrawRepository()
        self._clock: Clock = clock or BusinessClock(settings.BUSINESS_TIMEZONE)

    async def refund(
        self,
        db: AsyncSession,
        ticket_id: str,
        processed_by: int,
        reason: str | None = None,
    ) -> RefundResponse:
        try:
            ticket = await self._tickets.get_by_id(db, ticket_id)
            if ticket is None or ticket.user_id != processed_by:
                raise TicketNotFoundError(ticket_id)

            balance = await self._ledger.lock_balance(db, ticket.user_id)
            if balance is None:
                raise AccountNotFoundError(ticket.user_id)
            draw = await self._draws.lock_draw_shared(db, ticket.draw_id)
            if (
                draw is None
                or not draw.is_open
                or self._clock.now() >= draw.cutoff(self._clock.tz)
            ):
                raise RefundWindowClosedError(ticket_id, ticket.draw_id)
            ticket = await self._tickets.lock_ticket(db, ticket_id)
            if ticket is None:
                raise TicketNotFoundError(ticket_id)
            if not ticket.is_pending:
                raise TicketNotRefundableError(ticket_id, ticket.status)

            for bet in sorted(ticket.bets, key=lambda b: (b.bet_combination, b.bet_type)):
                await self._limits.lock_total(db, ticket.draw_id, bet.bet_combination, bet.bet_type)
                await self._limits.add_to_total(
                    db, ticket.draw_id, bet.bet_combination, bet.bet_type, -bet.bet_amount, -1
                )

            if not await self._tickets.transition_status(
                db, ticket_id, TicketStatus.PENDING.value, TicketStatus.CANCELLED.value
            ):
                raise TicketNotRefundableError(ticket_id, ticket.status)

            updated = await self._ledger.credit(db, ticket.user_id, ticket.total_amount)
            description = f"Refund of ticket {ticket.ticket_number}"
            if reason:
                description = f"{description}: {reason}"
            await self._ledger.append_transaction(
                db,
                ticket.user_id,
                ticket.total_amount,
                TransactionKind.REFUND.value,
                updated.current_balance,
                ticket.id,
                description,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Ticket refunded: ticket=%s user=%s amount=%s by=%s",
            ticket.id, ticket.user_id, centavos_to_display(ticket.total_amount), processed_by,
        )
        return RefundResponse.from_result(ticket.id, ticket.total_amount, updated.current_balance)
