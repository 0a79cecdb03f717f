"""Repository Protocol for caps, running totals and prize configuration."""

from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_limits.domain.models import CurrentBetTotal, TotalWithCap


class LimitRepositoryProtocol(Protocol):
    async def get_effective_cap(
        self, db: AsyncSession, draw_id: int, combination: str, bet_type: str
    ) -> int | None: ...

    async def get_total(
        self, db: AsyncSession, draw_id: int, combination: str, bet_type: str
    ) -> CurrentBetTotal | None: ...

    async def lock_total(
        self, db: AsyncSession, draw_id: int, combination: str, bet_type: str
    ) -> CurrentBetTotal: ...

    async def add_to_total(
        self,
        db: AsyncSession,
        draw_id: int,
        combination: str,
        bet_type: str,
        amount: int,
        ticket_delta: int,
    ) -> CurrentBetTotal: ...

    async def list_totals(
        self,
        db: AsyncSession,
        draw_id: int,
        bet_type: str | None,
        combination: str | None,
        sold_out_only: bool,
        limit: int,
    ) -> list[TotalWithCap]: ...

    async def get_prize_multipliers(self, db: AsyncSession) -> dict[str, Decimal]: ...
