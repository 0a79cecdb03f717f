"""Post-commit purchase side effects.

Each hook runs after the purchase transaction has committed. A failing
hook is logged by the coordinator and never changes the purchase outcome.
"""

import hashlib
from typing import Protocol

from config.settings import settings
from src.lt_common.database import async_session_factory
from src.lt_common.redis_client import publish_json
from src.lt_ticket.domain.models import Ticket
from src.lt_ticket.infrastructure.persistence import TicketRepository


class PostPurchaseHook(Protocol):
    async def __call__(self, ticket: Ticket, remaining_balance: int) -> None: ...


def build_qr_payload(ticket: Ticket) -> str:
    """'<ticket_number>|<first 16 hex chars of sha256>', verified at claim time."""
    material = f"{ticket.ticket_number}:{ticket.id}:{ticket.draw_id}:{ticket.total_amount}"
    digest = hashlib.sha256(material.encode()).hexdigest()[:16]
    return f"{ticket.ticket_number}|{digest}"


class QrPayloadHook:
    """Stores the QR payload on the ticket in its own short transaction."""

    def __init__(self, repo: TicketRepository | None = None) -> None:
        self._repo = repo or TicketRepository()

    async def __call__(self, ticket: Ticket, remaining_balance: int) -> None:
        payload = build_qr_payload(ticket)
        async with async_session_factory() as db:
            try:
                await self._repo.set_qr_payload(db, ticket.id, payload)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        ticket.qr_payload = payload


class TicketEventPublisher:
    """Publishes ticket.purchased to Redis for supervisor dashboards."""

    def __init__(self, channel: str | None = None) -> None:
        self._channel = channel or settings.TICKET_EVENTS_CHANNEL

    async def __call__(self, ticket: Ticket, remaining_balance: int) -> None:
        event = {
            "type": "ticket.purchased",
            "ticket_id": ticket.id,
            "ticket_number": ticket.ticket_number,
            "user_id": ticket.user_id,
            "draw_id": ticket.draw_id,
            "total_amount": ticket.total_amount,
            "remaining_balance": remaining_balance,
            "bets": [
                {
                    "sequence": b.sequence,
                    "bet_type": b.bet_type,
                    "bet_combination": b.bet_combination,
                    "bet_amount": b.bet_amount,
                }
                for b in ticket.bets
            ],
        }
        await publish_json(self._channel, event)


def default_hooks() -> tuple[PostPurchaseHook, ...]:
    return (QrPayloadHook(), TicketEventPublisher())
