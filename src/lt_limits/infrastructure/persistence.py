"""LimitRepository — caps, running totals and prize configuration.

Running totals are guarded by a locked read-check-write: the coordinator
calls lock_total (insert-if-absent, then SELECT ... FOR UPDATE), compares
against the effective cap, and only then add_to_total. A bare upsert would
let two buyers both pass the check.
"""

from decimal import Decimal

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_common.errors import InternalError
from src.lt_limits.domain.models import CurrentBetTotal, TotalWithCap

# Per-number override wins over the active global cap for the bet type.
_EFFECTIVE_CAP_SQL = text("""
    SELECT COALESCE(
        (SELECT o.limit_amount
         FROM bet_limits_per_draw o
         WHERE o.draw_id = :draw_id
           AND o.bet_combination = :combination
           AND o.bet_type = :bet_type),
        (SELECT g.limit_amount
         FROM bet_limits g
         WHERE g.bet_type = :bet_type AND g.is_active)
    ) AS cap
""")

_TOTAL_COLUMNS = "draw_id, bet_combination, bet_type, total_amount, ticket_count"

_GET_TOTAL_SQL = text(f"""
    SELECT {_TOTAL_COLUMNS}
    FROM current_bet_totals
    WHERE draw_id = :draw_id AND bet_combination = :combination AND bet_type = :bet_type
""")

_ENSURE_TOTAL_SQL = text("""
    INSERT INTO current_bet_totals (draw_id, bet_combination, bet_type)
    VALUES (:draw_id, :combination, :bet_type)
    ON CONFLICT (draw_id, bet_combination, bet_type) DO NOTHING
""")

_LOCK_TOTAL_SQL = text(f"""
    SELECT {_TOTAL_COLUMNS}
    FROM current_bet_totals
    WHERE draw_id = :draw_id AND bet_combination = :combination AND bet_type = :bet_type
    FOR UPDATE
""")

_ADD_TO_TOTAL_SQL = text(f"""
    UPDATE current_bet_totals
    SET total_amount = GREATEST(total_amount + :amount, 0),
        ticket_count = GREATEST(ticket_count + :ticket_delta, 0),
        updated_at = NOW()
    WHERE draw_id = :draw_id AND bet_combination = :combination AND bet_type = :bet_type
    RETURNING {_TOTAL_COLUMNS}
""")

_LIST_TOTALS_SQL = text("""
    SELECT s.bet_combination, s.bet_type, s.total_amount, s.ticket_count, s.cap
    FROM (
        SELECT t.bet_combination, t.bet_type, t.total_amount, t.ticket_count,
               COALESCE(o.limit_amount, g.limit_amount) AS cap
        FROM current_bet_totals t
        LEFT JOIN bet_limits_per_draw o
               ON o.draw_id = t.draw_id
              AND o.bet_combination = t.bet_combination
              AND o.bet_type = t.bet_type
        LEFT JOIN bet_limits g
               ON g.bet_type = t.bet_type AND g.is_active
        WHERE t.draw_id = :draw_id
          AND (CAST(:bet_type AS VARCHAR) IS NULL OR t.bet_type = :bet_type)
          AND (CAST(:combination AS VARCHAR) IS NULL OR t.bet_combination = :combination)
    ) s
    WHERE NOT CAST(:sold_out_only AS BOOLEAN)
       OR (s.cap IS NOT NULL AND s.total_amount >= s.cap)
    ORDER BY s.total_amount DESC, s.bet_combination ASC, s.bet_type ASC
    LIMIT :limit
""")

_PRIZE_MULTIPLIERS_SQL = text("""
    SELECT prize_category, multiplier
    FROM prize_configurations
    WHERE is_active
""")


def _row_to_total(row: object) -> CurrentBetTotal:
    return CurrentBetTotal(
        draw_id=row.draw_id,  # type: ignore[attr-defined]
        bet_combination=row.bet_combination,  # type: ignore[attr-defined]
        bet_type=row.bet_type,  # type: ignore[attr-defined]
        total_amount=row.total_amount,  # type: ignore[attr-defined]
        ticket_count=row.ticket_count,  # type: ignore[attr-defined]
    )


class LimitRepository:
    async def get_effective_cap(
        self, db: AsyncSession, draw_id: int, combination: str, bet_type: str
    ) -> int | None:
        result = await db.execute(
            _EFFECTIVE_CAP_SQL,
            {"draw_id": draw_id, "combination": combination, "bet_type": bet_type},
        )
        row = result.fetchone()
        return row.cap if row else None

    async def get_total(
        self, db: AsyncSession, draw_id: int, combination: str, bet_type: str
    ) -> CurrentBetTotal | None:
        result = await db.execute(
            _GET_TOTAL_SQL,
            {"draw_id": draw_id, "combination": combination, "bet_type": bet_type},
        )
        row = result.fetchone()
        return _row_to_total(row) if row else None

    async def lock_total(
        self, db: AsyncSession, draw_id: int, combination: str, bet_type: str
    ) -> CurrentBetTotal:
        params = {"draw_id": draw_id, "combination": combination, "bet_type": bet_type}
        await db.execute(_ENSURE_TOTAL_SQL, params)
        result = await db.execute(_LOCK_TOTAL_SQL, params)
        row = result.fetchone()
        if row is None:
            raise InternalError(f"Running total row missing after insert: {combination}/{bet_type}")
        return _row_to_total(row)

    async def add_to_total(
        self,
        db: AsyncSession,
        draw_id: int,
        combination: str,
        bet_type: str,
        amount: int,
        ticket_delta: int,
    ) -> CurrentBetTotal:
        result = await db.execute(
            _ADD_TO_TOTAL_SQL,
            {
                "draw_id": draw_id,
                "combination": combination,
                "bet_type": bet_type,
                "amount": amount,
                "ticket_delta": ticket_delta,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError(f"Running total row missing: {combination}/{bet_type}")
        return _row_to_total(row)

    async def list_totals(
        self,
        db: AsyncSession,
        draw_id: int,
        bet_type: str | None,
        combination: str | None,
        sold_out_only: bool,
        limit: int,
    ) -> list[TotalWithCap]:
        result = await db.execute(
            _LIST_TOTALS_SQL,
            {
                "draw_id": draw_id,
                "bet_type": bet_type,
                "combination": combination,
                "sold_out_only": sold_out_only,
                "limit": limit,
            },
        )
        return [
            TotalWithCap(
                bet_combination=row.bet_combination,
                bet_type=row.bet_type,
                total_amount=row.total_amount,
                ticket_count=row.ticket_count,
                cap=row.cap,
            )
            for row in result.fetchall()
        ]

    async def get_prize_multipliers(self, db: AsyncSession) -> dict[str, Decimal]:
        result = await db.execute(_PRIZE_MULTIPLIERS_SQL)
        return {row.prize_category: Decimal(row.multiplier) for row in result.fetchall()}
