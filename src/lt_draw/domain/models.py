"""Draw domain: time slots, cutoffs and the Draw record."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo

from src.lt_common.enums import DrawStatus, TimeSlot

# Betting closes five minutes before each draw (14:00, 17:00, 21:00 local).
CUTOFF_TIMES: dict[TimeSlot, time] = {
    TimeSlot.TWO_PM: time(13, 55),
    TimeSlot.FIVE_PM: time(16, 55),
    TimeSlot.NINE_PM: time(20, 55),
}


def compute_cutoff(draw_date: date, time_slot: str, tz: tzinfo) -> datetime:
    """Aware cutoff instant for a draw, in the business zone."""
    return datetime.combine(draw_date, CUTOFF_TIMES[TimeSlot(time_slot)], tzinfo=tz)


def is_near_cutoff(now: datetime, cutoff: datetime, window_minutes: int) -> bool:
    return now < cutoff and cutoff - now <= timedelta(minutes=window_minutes)


@dataclass
class Draw:
    id: int
    draw_date: date
    time_slot: str                   # TimeSlot value
    status: str                      # DrawStatus value
    cutoff_at: datetime | None = None
    winning_number: str | None = None
    settled_at: datetime | None = None

    @property
    def is_open(self) -> bool:
        return self.status == DrawStatus.OPEN

    @property
    def is_settled(self) -> bool:
        return self.status == DrawStatus.SETTLED

    def cutoff(self, tz: tzinfo) -> datetime:
        return compute_cutoff(self.draw_date, self.time_slot, tz)
