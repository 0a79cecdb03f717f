"""LimitApplicationService — read-only views over caps and running totals.

None of these take locks. The authoritative cap check happens inside the
purchase transaction; these answers may be stale by the time a ticket is
submitted.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_betting.domain.rules import normalize_combination, validate_bet_shape
from src.lt_common.enums import BetType
from src.lt_common.errors import BetLimitNotConfiguredError, InvalidCombinationError
from src.lt_limits.application.schemas import LimitCheckResponse, TotalItem, TotalsResponse
from src.lt_limits.domain.models import LimitStatus
from src.lt_limits.domain.repository import LimitRepositoryProtocol
from src.lt_limits.infrastructure.persistence import LimitRepository

MAX_LISTED_TOTALS = 500


class LimitApplicationService:
    def __init__(self, repo: LimitRepositoryProtocol | None = None) -> None:
        self._repo: LimitRepositoryProtocol = repo or LimitRepository()

    async def check_limit(
        self, db: AsyncSession, draw_id: int, combination: str, bet_type: BetType
    ) -> LimitCheckResponse:
        reason = validate_bet_shape(bet_type, combination)
        normalized = normalize_combination(combination)
        if reason is not None or normalized is None:
            raise InvalidCombinationError(reason or f"Invalid bet digits {combination!r}")

        cap = await self._repo.get_effective_cap(db, draw_id, normalized, bet_type.value)
        if cap is None:
            raise BetLimitNotConfiguredError(bet_type.value)
        total = await self._repo.get_total(db, draw_id, normalized, bet_type.value)
        current = total.total_amount if total else 0
        return LimitCheckResponse.from_status(
            draw_id, normalized, bet_type.value, LimitStatus.of(current, cap)
        )

    async def list_totals(
        self,
        db: AsyncSession,
        draw_id: int,
        bet_type: BetType | None = None,
        combination: str | None = None,
    ) -> TotalsResponse:
        normalized: str | None = None
        if combination is not None:
            normalized = normalize_combination(combination)
            if normalized is None:
                raise InvalidCombinationError(f"Invalid bet digits {combination!r}")
        totals = await self._repo.list_totals(
            db,
            draw_id,
            bet_type.value if bet_type else None,
            normalized,
            sold_out_only=False,
            limit=MAX_LISTED_TOTALS,
        )
        return TotalsResponse(draw_id=draw_id, items=[TotalItem.from_domain(t) for t in totals])

    async def list_sold_out(self, db: AsyncSession, draw_id: int) -> TotalsResponse:
        totals = await self._repo.list_totals(
            db, draw_id, None, None, sold_out_only=True, limit=MAX_LISTED_TOTALS
        )
        return TotalsResponse(draw_id=draw_id, items=[TotalItem.from_domain(t) for t in totals])
