"""DrawRepository — raw SQL over draws and draw_results.

mark_settled is the single-writer gate for settlement: the conditional
UPDATE ... WHERE status <> 'settled' succeeds for exactly one caller.
"""

from datetime import date, datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_common.enums import DrawStatus
from src.lt_draw.domain.models import Draw

_DRAW_COLUMNS = "id, draw_date, time_slot, status, cutoff_at, winning_number, settled_at"

_GET_DRAW_SQL = text(f"SELECT {_DRAW_COLUMNS} FROM draws WHERE id = :draw_id")

_LOCK_DRAW_SHARED_SQL = text(f"""
    SELECT {_DRAW_COLUMNS}
    FROM draws
    WHERE id = :draw_id
    FOR SHARE
""")

_MARK_SETTLED_SQL = text(f"""
    UPDATE draws
    SET status = :settled,
        winning_number = :winning_number,
        settled_at = NOW(),
        updated_at = NOW()
    WHERE id = :draw_id AND status <> :settled
    RETURNING {_DRAW_COLUMNS}
""")

_INSERT_RESULT_SQL = text("""
    INSERT INTO draw_results (draw_id, winning_number, input_by)
    VALUES (:draw_id, :winning_number, :input_by)
""")

_CREATE_DRAW_SQL = text("""
    INSERT INTO draws (draw_date, time_slot, status, cutoff_at)
    VALUES (:draw_date, :time_slot, :status, :cutoff_at)
    ON CONFLICT (draw_date, time_slot) DO NOTHING
    RETURNING id
""")

_CLOSE_EXPIRED_SQL = text("""
    UPDATE draws
    SET status = :closed, updated_at = NOW()
    WHERE status = :open AND cutoff_at <= :now
    RETURNING id
""")


def _row_to_draw(row: object) -> Draw:
    return Draw(
        id=row.id,  # type: ignore[attr-defined]
        draw_date=row.draw_date,  # type: ignore[attr-defined]
        time_slot=row.time_slot,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        cutoff_at=row.cutoff_at,  # type: ignore[attr-defined]
        winning_number=row.winning_number,  # type: ignore[attr-defined]
        settled_at=row.settled_at,  # type: ignore[attr-defined]
    )


class DrawRepository:
    async def get_draw(self, db: AsyncSession, draw_id: int) -> Draw | None:
        result = await db.execute(_GET_DRAW_SQL, {"draw_id": draw_id})
        row = result.fetchone()
        return _row_to_draw(row) if row else None

    async def lock_draw_shared(self, db: AsyncSession, draw_id: int) -> Draw | None:
        """Share lock: blocks a concurrent close/settle until the purchase commits."""
        result = await db.execute(_LOCK_DRAW_SHARED_SQL, {"draw_id": draw_id})
        row = result.fetchone()
        return _row_to_draw(row) if row else None

    async def mark_settled(
        self, db: AsyncSession, draw_id: int, winning_number: str
    ) -> Draw | None:
        result = await db.execute(
            _MARK_SETTLED_SQL,
            {
                "draw_id": draw_id,
                "winning_number": winning_number,
                "settled": DrawStatus.SETTLED.value,
            },
        )
        row = result.fetchone()
        return _row_to_draw(row) if row else None

    async def insert_result(
        self, db: AsyncSession, draw_id: int, winning_number: str, input_by: int | None
    ) -> None:
        await db.execute(
            _INSERT_RESULT_SQL,
            {"draw_id": draw_id, "winning_number": winning_number, "input_by": input_by},
        )

    async def create_draw_if_absent(
        self, db: AsyncSession, draw_date: date, time_slot: str, cutoff_at: datetime
    ) -> bool:
        result = await db.execute(
            _CREATE_DRAW_SQL,
            {
                "draw_date": draw_date,
                "time_slot": time_slot,
                "status": DrawStatus.OPEN.value,
                "cutoff_at": cutoff_at,
            },
        )
        return result.fetchone() is not None

    async def close_expired(self, db: AsyncSession, now: datetime) -> list[int]:
        result = await db.execute(
            _CLOSE_EXPIRED_SQL,
            {"closed": DrawStatus.CLOSED.value, "open": DrawStatus.OPEN.value, "now": now},
        )
        return [row.id for row in result.fetchall()]
