"""Repository Protocol for draws and official results."""

from datetime import date, datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_draw.domain.models import Draw


class DrawRepositoryProtocol(Protocol):
    async def get_draw(self, db: AsyncSession, draw_id: int) -> Draw | None: ...

    async def lock_draw_shared(self, db: AsyncSession, draw_id: int) -> Draw | None: ...

    async def mark_settled(
        self, db: AsyncSession, draw_id: int, winning_number: str
    ) -> Draw | None: ...

    async def insert_result(
        self, db: AsyncSession, draw_id: int, winning_number: str, input_by: int | None
    ) -> None: ...

    async def create_draw_if_absent(
        self, db: AsyncSession, draw_date: date, time_slot: str, cutoff_at: datetime
    ) -> bool: ...

    async def close_expired(self, db: AsyncSession, now: datetime) -> list[int]: ...
