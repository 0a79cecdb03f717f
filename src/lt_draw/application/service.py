"""DrawScheduleService: keeps the draw calendar populated and closes draws
whose cutoff has passed.

Three draws a day (twoPM, fivePM, ninePM) in the business zone. Both
operations are idempotent and safe to run from a cron or the maintenance
endpoint at any frequency.
"""

import logging
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.lt_common.datetime_utils import BusinessClock, Clock
from src.lt_common.enums import TimeSlot
from src.lt_draw.application.schemas import MaintenanceResponse
from src.lt_draw.domain.models import compute_cutoff
from src.lt_draw.domain.repository import DrawRepositoryProtocol
from src.lt_draw.infrastructure.persistence import DrawRepository

logger = logging.getLogger(__name__)


class DrawScheduleService:
    def __init__(
        self,
        repo: DrawRepositoryProtocol | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._repo: DrawRepositoryProtocol = repo or DrawRepository()
        self._clock: Clock = clock or BusinessClock(settings.BUSINESS_TIMEZONE)

    async def ensure_draws(self, db: AsyncSession, days: int | None = None) -> int:
        """Create missing draws for the next `days` days; returns how many were created."""
        days = days or settings.DRAW_SCHEDULE_DAYS
        today = self._clock.now().astimezone(self._clock.tz).date()
        created = 0
        try:
            for offset in range(days):
                draw_date = today + timedelta(days=offset)
                for slot in TimeSlot:
                    cutoff_at = compute_cutoff(draw_date, slot.value, self._clock.tz)
                    if await self._repo.create_draw_if_absent(db, draw_date, slot.value, cutoff_at):
                        created += 1
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        if created:
            logger.info("Scheduled %d new draws starting %s", created, today.isoformat())
        return created

    async def close_expired(self, db: AsyncSession) -> list[int]:
        try:
            closed = await self._repo.close_expired(db, self._clock.now())
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        if closed:
            logger.info("Closed %d draws past cutoff: %s", len(closed), closed)
        return closed

    async def run_maintenance(
        self, db: AsyncSession, days: int | None = None
    ) -> MaintenanceResponse:
        created = await self.ensure_draws(db, days)
        closed = await self.close_expired(db)
        return MaintenanceResponse(created_count=created, closed_draw_ids=closed)
