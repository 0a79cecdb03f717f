"""TicketRepository — raw SQL persistence for tickets, bets and winners."""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_common.enums import TicketStatus
from src.lt_ticket.domain.models import Bet, Ticket, WinningTicketView

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_TICKET_COLUMNS = """
    id, ticket_number, user_id, draw_id, total_amount, status,
    idempotency_key, qr_payload, created_at
"""

_INSERT_TICKET_SQL = text("""
    INSERT INTO tickets (id, ticket_number, user_id, draw_id, total_amount,
        status, idempotency_key)
    VALUES (:id, :ticket_number, :user_id, :draw_id, :total_amount,
        :status, :idempotency_key)
""")

_INSERT_BET_SQL = text("""
    INSERT INTO bets (ticket_id, sequence, bet_type, bet_combination, bet_amount)
    VALUES (:ticket_id, :sequence, :bet_type, :bet_combination, :bet_amount)
""")

_GET_TICKET_BY_ID_SQL = text(f"SELECT {_TICKET_COLUMNS} FROM tickets WHERE id = :id")

_GET_TICKET_BY_IDEMPOTENCY_KEY_SQL = text(f"""
    SELECT {_TICKET_COLUMNS}
    FROM tickets
    WHERE user_id = :user_id AND idempotency_key = :idempotency_key
""")

_LOCK_TICKET_SQL = text(f"SELECT {_TICKET_COLUMNS} FROM tickets WHERE id = :id FOR UPDATE")

_LIST_BETS_SQL = text("""
    SELECT id, ticket_id, sequence, bet_type, bet_combination, bet_amount
    FROM bets
    WHERE ticket_id = ANY(string_to_array(CAST(:ticket_ids_csv AS TEXT), ','))
    ORDER BY ticket_id, sequence
""")

# Only non-cancelled tickets block a repeat of the same (combination, type).
_FIND_DUPLICATE_BETS_SQL = text("""
    SELECT DISTINCT b.bet_combination, b.bet_type
    FROM bets b
    JOIN tickets t ON t.id = b.ticket_id
    WHERE t.user_id = :user_id
      AND t.draw_id = :draw_id
      AND t.status <> :cancelled
      AND b.bet_combination = ANY(string_to_array(CAST(:combinations_csv AS TEXT), ','))
""")

_TRANSITION_STATUS_SQL = text("""
    UPDATE tickets
    SET status = :to_status, updated_at = NOW()
    WHERE id = :id AND status = :from_status
    RETURNING id
""")

_SET_QR_PAYLOAD_SQL = text("""
    UPDATE tickets SET qr_payload = :qr_payload, updated_at = NOW() WHERE id = :id
""")

_LIST_PENDING_FOR_DRAW_SQL = text(f"""
    SELECT {_TICKET_COLUMNS}
    FROM tickets
    WHERE draw_id = :draw_id AND status = :pending
    ORDER BY created_at, id
    LIMIT :limit
""")

_INSERT_WINNING_TICKET_SQL = text("""
    INSERT INTO winning_tickets (ticket_id, draw_id, prize_amount)
    VALUES (:ticket_id, :draw_id, :prize_amount)
    ON CONFLICT (ticket_id) DO NOTHING
    RETURNING id
""")

_LIST_WINNING_TICKETS_SQL = text("""
    SELECT w.ticket_id, t.ticket_number, t.user_id, w.draw_id, w.prize_amount
    FROM winning_tickets w
    JOIN tickets t ON t.id = w.ticket_id
    WHERE w.draw_id = :draw_id
    ORDER BY w.prize_amount DESC, w.ticket_id
""")


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_ticket(row: Any) -> Ticket:
    return Ticket(
        id=row.id,
        ticket_number=row.ticket_number,
        user_id=row.user_id,
        draw_id=row.draw_id,
        total_amount=row.total_amount,
        status=row.status,
        idempotency_key=row.idempotency_key,
        qr_payload=row.qr_payload,
        created_at=row.created_at,
    )


def _row_to_bet(row: Any) -> Bet:
    return Bet(
        id=row.id,
        ticket_id=row.ticket_id,
        sequence=row.sequence,
        bet_type=row.bet_type,
        bet_combination=row.bet_combination,
        bet_amount=row.bet_amount,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class TicketRepository:
    """Concrete implementation of TicketRepositoryProtocol using raw SQL."""

    async def _attach_bets(self, db: AsyncSession, tickets: list[Ticket]) -> list[Ticket]:
        if not tickets:
            return tickets
        result = await db.execute(
            _LIST_BETS_SQL, {"ticket_ids_csv": ",".join(t.id for t in tickets)}
        )
        by_ticket: dict[str, list[Bet]] = {t.id: [] for t in tickets}
        for row in result.fetchall():
            by_ticket[row.ticket_id].append(_row_to_bet(row))
        for ticket in tickets:
            ticket.bets = by_ticket[ticket.id]
        return tickets

    async def _fetch_one(self, db: AsyncSession, sql: Any, params: dict[str, Any]) -> Ticket | None:
        result = await db.execute(sql, params)
        row = result.fetchone()
        if row is None:
            return None
        ticket = _row_to_ticket(row)
        await self._attach_bets(db, [ticket])
        return ticket

    async def get_by_id(self, db: AsyncSession, ticket_id: str) -> Ticket | None:
        return await self._fetch_one(db, _GET_TICKET_BY_ID_SQL, {"id": ticket_id})

    async def get_by_idempotency_key(
        self, db: AsyncSession, user_id: int, idempotency_key: str
    ) -> Ticket | None:
        return await self._fetch_one(
            db,
            _GET_TICKET_BY_IDEMPOTENCY_KEY_SQL,
            {"user_id": user_id, "idempotency_key": idempotency_key},
        )

    async def find_duplicate_bets(
        self,
        db: AsyncSession,
        user_id: int,
        draw_id: int,
        pairs: list[tuple[str, str]],
    ) -> list[tuple[str, str]]:
        if not pairs:
            return []
        result = await db.execute(
            _FIND_DUPLICATE_BETS_SQL,
            {
                "user_id": user_id,
                "draw_id": draw_id,
                "cancelled": TicketStatus.CANCELLED.value,
                "combinations_csv": ",".join(sorted({c for c, _ in pairs})),
            },
        )
        existing = {(row.bet_combination, row.bet_type) for row in result.fetchall()}
        return [pair for pair in pairs if pair in existing]

    async def insert_ticket(self, db: AsyncSession, ticket: Ticket) -> None:
        await db.execute(
            _INSERT_TICKET_SQL,
            {
                "id": ticket.id,
                "ticket_number": ticket.ticket_number,
                "user_id": ticket.user_id,
                "draw_id": ticket.draw_id,
                "total_amount": ticket.total_amount,
                "status": ticket.status,
                "idempotency_key": ticket.idempotency_key,
            },
        )
        await db.execute(
            _INSERT_BET_SQL,
            [
                {
                    "ticket_id": ticket.id,
                    "sequence": bet.sequence,
                    "bet_type": bet.bet_type,
                    "bet_combination": bet.bet_combination,
                    "bet_amount": bet.bet_amount,
                }
                for bet in ticket.bets
            ],
        )

    async def lock_ticket(self, db: AsyncSession, ticket_id: str) -> Ticket | None:
        return await self._fetch_one(db, _LOCK_TICKET_SQL, {"id": ticket_id})

    async def transition_status(
        self, db: AsyncSession, ticket_id: str, from_status: str, to_status: str
    ) -> bool:
        result = await db.execute(
            _TRANSITION_STATUS_SQL,
            {"id": ticket_id, "from_status": from_status, "to_status": to_status},
        )
        return result.fetchone() is not None

    async def set_qr_payload(self, db: AsyncSession, ticket_id: str, qr_payload: str) -> None:
        await db.execute(_SET_QR_PAYLOAD_SQL, {"id": ticket_id, "qr_payload": qr_payload})

    async def list_pending_for_draw(
        self, db: AsyncSession, draw_id: int, limit: int
    ) -> list[Ticket]:
        result = await db.execute(
            _LIST_PENDING_FOR_DRAW_SQL,
            {"draw_id": draw_id, "pending": TicketStatus.PENDING.value, "limit": limit},
        )
        tickets = [_row_to_ticket(row) for row in result.fetchall()]
        return await self._attach_bets(db, tickets)

    async def insert_winning_ticket(
        self, db: AsyncSession, ticket_id: str, draw_id: int, prize_amount: int
    ) -> bool:
        result = await db.execute(
            _INSERT_WINNING_TICKET_SQL,
            {"ticket_id": ticket_id, "draw_id": draw_id, "prize_amount": prize_amount},
        )
        return result.fetchone() is not None

    async def list_winning_tickets(
        self, db: AsyncSession, draw_id: int
    ) -> list[WinningTicketView]:
        result = await db.execute(_LIST_WINNING_TICKETS_SQL, {"draw_id": draw_id})
        return [
            WinningTicketView(
                ticket_id=row.ticket_id,
                ticket_number=row.ticket_number,
                user_id=row.user_id,
                draw_id=row.draw_id,
                prize_amount=row.prize_amount,
            )
            for row in result.fetchall()
        ]
