"""PurchaseCoordinator: the atomic ticket purchase.

Pre-checks (no locks):
  0. idempotency replay
  1. bet count
  2. bet shape, minimum amount, repeated (combination, type) in the request
  3. draw exists, is open, cutoff not reached
  4. no prior non-cancelled ticket of this agent has the same (combination, type)

Atomic phase (one transaction, lock order balance -> draw -> totals):
  5. lock balance row, re-check idempotency and duplicates, share-lock draw
  6. balance covers the ticket total
  7. lock each running total in ascending (combination, type) order and
     compare against the effective cap
  8. increment totals
  9. debit balance, append the purchase transaction
 10. insert ticket and bets
 11. commit

Serialization failures, deadlocks and lock timeouts re-run the atomic phase
with exponential backoff. Business rejections roll back and are returned as
PurchaseError values, never raised.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.lt_betting.domain.rules import normalize_combination, validate_bet_shape
from src.lt_common.datetime_utils import BusinessClock, Clock
from src.lt_common.enums import BetType, TransactionKind
from src.lt_common.errors import TransientConflictError
from src.lt_common.id_generator import generate_id, generate_ticket_number
from src.lt_common.money import centavos_to_display
from src.lt_draw.domain.models import is_near_cutoff
from src.lt_draw.domain.repository import DrawRepositoryProtocol
from src.lt_draw.infrastructure.persistence import DrawRepository
from src.lt_ledger.domain.repository import LedgerRepositoryProtocol
from src.lt_ledger.infrastructure.persistence import LedgerRepository
from src.lt_limits.domain.repository import LimitRepositoryProtocol
from src.lt_limits.infrastructure.persistence import LimitRepository
from src.lt_ticket.application.side_effects import PostPurchaseHook, default_hooks
from src.lt_ticket.domain.errors import (
    AccountNotFound,
    CutoffPassed,
    DrawNotFound,
    DrawNotOpen,
    DuplicateBet,
    EmptyBets,
    InsufficientFunds,
    InvalidBet,
    LimitExceeded,
    PurchaseError,
    TooManyBets,
)
from src.lt_ticket.domain.models import (
    BET_SEQUENCE_LETTERS,
    Bet,
    BetRequest,
    Ticket,
    TicketReceipt,
)
from src.lt_ticket.domain.repository import TicketRepositoryProtocol
from src.lt_ticket.infrastructure.persistence import TicketRepository

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("lt.audit")

# serialization_failure, deadlock_detected, lock_not_available
TRANSIENT_SQLSTATES = frozenset({"40001", "40P01", "55P03"})


def is_transient_db_error(exc: DBAPIError) -> bool:
    for candidate in (exc.orig, getattr(exc.orig, "__cause__", None)):
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code in TRANSIENT_SQLSTATES:
            return True
    return False


class PurchaseCoordinator:
    def __init__(
        self,
        ledger_repo: LedgerRepositoryProtocol | None = None,
        limit_repo: LimitRepositoryProtocol | None = None,
        draw_repo: DrawRepositoryProtocol | None = None,
        ticket_repo: TicketRepositoryProtocol | None = None,
        clock: Clock | None = None,
        side_effects: Sequence[PostPurchaseHook] | None = None,
        max_attempts: int | None = None,
        backoff_ms: int | None = None,
        id_factory: Callable[[], str] = generate_id,
        ticket_number_factory: Callable[[], str] = generate_ticket_number,
    ) -> None:
        self._ledger: LedgerRepositoryProtocol = ledger_repo or LedgerRepository()
        self._limits: LimitRepositoryProtocol = limit_repo or LimitRepository()
        self._draws: DrawRepositoryProtocol = draw_repo or DrawRepository()
        self._tickets: TicketRepositoryProtocol = ticket_repo or TicketRepository()
        self._clock: Clock = clock or BusinessClock(settings.BUSINESS_TIMEZONE)
        self._side_effects: tuple[PostPurchaseHook, ...] = (
            default_hooks() if side_effects is None else tuple(side_effects)
        )
        self._max_attempts = max_attempts or settings.PURCHASE_MAX_ATTEMPTS
        self._backoff_ms = settings.PURCHASE_RETRY_BACKOFF_MS if backoff_ms is None else backoff_ms
        self._new_id = id_factory
        self._new_ticket_number = ticket_number_factory

    async def purchase(
        self,
        db: AsyncSession,
        user_id: int,
        draw_id: int,
        bets: Sequence[BetRequest],
        idempotency_key: str | None = None,
    ) -> TicketReceipt | PurchaseError:
        if idempotency_key:
            existing = await self._tickets.get_by_idempotency_key(db, user_id, idempotency_key)
            if existing is not None:
                logger.info(
                    "Idempotent replay: user=%s key=%s ticket=%s",
                    user_id, idempotency_key, existing.id,
                )
                return await self._receipt_for_existing(db, existing)

        normalized = self._validate_bets(bets)
        if isinstance(normalized, PurchaseError):
            return self._reject(user_id, draw_id, normalized)

        rejection = await self._check_draw(db, draw_id, user_id, normalized, locked=False)
        if rejection is None:
            rejection = await self._check_duplicates(db, user_id, draw_id, normalized)
        if rejection is not None:
            await db.rollback()
            return self._reject(user_id, draw_id, rejection)
        # Close the read-only transaction so the atomic phase starts clean.
        await db.rollback()

        ticket_id = self._new_id()
        ticket_number = self._new_ticket_number()
        total = sum(b.bet_amount for b in normalized)

        attempt = 1
        while True:
            try:
                outcome = await self._atomic_phase(
                    db, user_id, draw_id, normalized, total, ticket_id, ticket_number,
                    idempotency_key,
                )
                if isinstance(outcome, PurchaseError):
                    await db.rollback()
                    return self._reject(user_id, draw_id, outcome)
                if isinstance(outcome, TicketReceipt):
                    # Same idempotency key committed by a concurrent call.
                    await db.rollback()
                    return outcome
                await db.commit()
                break
            except DBAPIError as exc:
                await db.rollback()
                if not is_transient_db_error(exc):
                    raise
                if attempt >= self._max_attempts:
                    logger.warning(
                        "Purchase gave up after %d attempts: user=%s draw=%s",
                        attempt, user_id, draw_id,
                    )
                    raise TransientConflictError() from exc
                delay_ms = self._backoff_ms * (2 ** (attempt - 1))
                logger.warning(
                    "Transient store conflict, retrying purchase in %dms (attempt %d/%d): %s",
                    delay_ms, attempt, self._max_attempts, exc.orig,
                )
                attempt += 1
                await asyncio.sleep(delay_ms / 1000)
            except Exception:
                await db.rollback()
                raise

        ticket, remaining = outcome
        logger.info(
            "Ticket purchased: ticket=%s number=%s user=%s draw=%s total=%s bets=%d",
            ticket.id, ticket.ticket_number, user_id, draw_id,
            centavos_to_display(total), len(ticket.bets),
        )
        await self._run_side_effects(ticket, remaining)
        return TicketReceipt(
            ticket_id=ticket.id,
            ticket_number=ticket.ticket_number,
            draw_id=draw_id,
            total_amount=total,
            remaining_balance=remaining,
            bets=tuple(ticket.bets),
        )

    # ------------------------------------------------------------------
    # Pre-checks
    # ------------------------------------------------------------------

    def _validate_bets(self, bets: Sequence[BetRequest]) -> list[BetRequest] | PurchaseError:
        if not bets:
            return EmptyBets()
        if len(bets) > settings.MAX_BETS_PER_TICKET:
            return TooManyBets(settings.MAX_BETS_PER_TICKET)

        normalized: list[BetRequest] = []
        seen: set[tuple[str, str]] = set()
        for index, bet in enumerate(bets):
            reason = validate_bet_shape(bet.bet_type, bet.bet_combination)
            if reason is not None:
                return InvalidBet(index, reason)
            if bet.bet_amount < settings.MIN_BET_AMOUNT_CENTAVOS:
                minimum = centavos_to_display(settings.MIN_BET_AMOUNT_CENTAVOS)
                return InvalidBet(index, f"Minimum bet amount is {minimum}")
            combination = normalize_combination(bet.bet_combination)
            bet_type = BetType(bet.bet_type).value
            if combination is None:
                return InvalidBet(index, f"Invalid bet digits {bet.bet_combination!r}")
            if (combination, bet_type) in seen:
                return DuplicateBet(combination, bet_type)
            seen.add((combination, bet_type))
            normalized.append(BetRequest(bet_type, combination, bet.bet_amount))
        return normalized

    async def _check_draw(
        self,
        db: AsyncSession,
        draw_id: int,
        user_id: int,
        bets: list[BetRequest],
        locked: bool,
    ) -> PurchaseError | None:
        if locked:
            draw = await self._draws.lock_draw_shared(db, draw_id)
        else:
            draw = await self._draws.get_draw(db, draw_id)
        if draw is None:
            return DrawNotFound(draw_id)
        if not draw.is_open:
            return DrawNotOpen(draw_id)
        now = self._clock.now()
        cutoff = draw.cutoff(self._clock.tz)
        if now >= cutoff:
            return CutoffPassed(draw_id)
        if not locked and is_near_cutoff(now, cutoff, settings.NEAR_CUTOFF_AUDIT_MINUTES):
            audit_logger.info(
                "Near-cutoff bet: user=%s draw=%s slot=%s seconds_left=%d bets=%s",
                user_id, draw_id, draw.time_slot, int((cutoff - now).total_seconds()),
                [f"{b.bet_combination}/{b.bet_type}" for b in bets],
            )
        return None

    async def _check_duplicates(
        self, db: AsyncSession, user_id: int, draw_id: int, bets: list[BetRequest]
    ) -> PurchaseError | None:
        pairs = [(b.bet_combination, b.bet_type) for b in bets]
        duplicates = await self._tickets.find_duplicate_bets(db, user_id, draw_id, pairs)
        if duplicates:
            return DuplicateBet(*duplicates[0])
        return None

    # ------------------------------------------------------------------
    # Atomic phase
    # ------------------------------------------------------------------

    async def _atomic_phase(
        self,
        db: AsyncSession,
        user_id: int,
        draw_id: int,
        bets: list[BetRequest],
        total: int,
        ticket_id: str,
        ticket_number: str,
        idempotency_key: str | None,
    ) -> tuple[Ticket, int] | TicketReceipt | PurchaseError:
        balance = await self._ledger.lock_balance(db, user_id)
        if balance is None:
            return AccountNotFound(user_id)

        if idempotency_key:
            existing = await self._tickets.get_by_idempotency_key(db, user_id, idempotency_key)
            if existing is not None:
                return await self._receipt_for_existing(db, existing)

        rejection = await self._check_duplicates(db, user_id, draw_id, bets)
        if rejection is None:
            rejection = await self._check_draw(db, draw_id, user_id, bets, locked=True)
        if rejection is not None:
            return rejection

        if balance.current_balance < total:
            return InsufficientFunds(total, balance.current_balance)

        ordered = sorted(bets, key=lambda b: (b.bet_combination, b.bet_type))
        for bet in ordered:
            running = await self._limits.lock_total(db, draw_id, bet.bet_combination, bet.bet_type)
            cap = await self._limits.get_effective_cap(
                db, draw_id, bet.bet_combination, bet.bet_type
            )
            # No configured cap means no capacity.
            cap = cap if cap is not None else 0
            if running.total_amount + bet.bet_amount > cap:
                return LimitExceeded(
                    bet.bet_combination, bet.bet_type, max(cap - running.total_amount, 0)
                )

        for bet in ordered:
            await self._limits.add_to_total(
                db, draw_id, bet.bet_combination, bet.bet_type, bet.bet_amount, 1
            )

        updated = await self._ledger.debit(db, user_id, total)
        await self._ledger.append_transaction(
            db,
            user_id,
            -total,
            TransactionKind.PURCHASE.value,
            updated.current_balance,
            ticket_id,
            f"Ticket {ticket_number} purchase",
        )

        ticket = Ticket(
            id=ticket_id,
            ticket_number=ticket_number,
            user_id=user_id,
            draw_id=draw_id,
            total_amount=total,
            idempotency_key=idempotency_key,
            bets=[
                Bet(
                    sequence=BET_SEQUENCE_LETTERS[i],
                    bet_type=b.bet_type,
                    bet_combination=b.bet_combination,
                    bet_amount=b.bet_amount,
                    ticket_id=ticket_id,
                )
                for i, b in enumerate(bets)
            ],
        )
        await self._tickets.insert_ticket(db, ticket)
        return ticket, updated.current_balance

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _receipt_for_existing(self, db: AsyncSession, ticket: Ticket) -> TicketReceipt:
        txn = await self._ledger.get_transaction_by_reference(
            db, ticket.user_id, TransactionKind.PURCHASE.value, ticket.id
        )
        if txn is not None:
            remaining = txn.balance_after
        else:
            balance = await self._ledger.get_balance(db, ticket.user_id)
            remaining = balance.current_balance if balance else 0
        return TicketReceipt(
            ticket_id=ticket.id,
            ticket_number=ticket.ticket_number,
            draw_id=ticket.draw_id,
            total_amount=ticket.total_amount,
            remaining_balance=remaining,
            bets=tuple(ticket.bets),
            replayed=True,
        )

    def _reject(self, user_id: int, draw_id: int, error: PurchaseError) -> PurchaseError:
        logger.info("Purchase rejected: user=%s draw=%s reason=%r", user_id, draw_id, error)
        return error

    async def _run_side_effects(self, ticket: Ticket, remaining_balance: int) -> None:
        for hook in self._side_effects:
            try:
                await hook(ticket, remaining_balance)
            except Exception:
                logger.warning(
                    "Post-purchase hook %s failed for ticket %s",
                    type(hook).__name__, ticket.id, exc_info=True,
                )
