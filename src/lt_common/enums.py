"""Global enums; values must match DB CHECK constraints exactly."""

from enum import Enum


class BetType(str, Enum):
    STANDARD = "standard"
    RAMBOLITO = "rambolito"


class PrizeCategory(str, Enum):
    """Prize configuration key: rambolito pays differently for doubles."""
    STANDARD = "standard"
    RAMBOLITO_DOUBLE = "rambolito_double"
    RAMBOLITO = "rambolito"


class DrawStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    SETTLED = "settled"


class TimeSlot(str, Enum):
    """Fixed daily draw slots; values match the stored draw_time codes."""
    TWO_PM = "twoPM"
    FIVE_PM = "fivePM"
    NINE_PM = "ninePM"


class TicketStatus(str, Enum):
    PENDING = "pending"
    WON = "won"
    LOST = "lost"
    PENDING_APPROVAL = "pending_approval"
    CLAIMED = "claimed"
    CANCELLED = "cancelled"


class TransactionKind(str, Enum):
    PURCHASE = "purchase"
    REFUND = "refund"
    LOAD = "load"
    ADJUSTMENT = "adjustment"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
