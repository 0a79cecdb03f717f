"""Repository Protocol for tickets, bets and winning tickets."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_ticket.domain.models import Ticket, WinningTicketView


class TicketRepositoryProtocol(Protocol):
    async def get_by_id(self, db: AsyncSession, ticket_id: str) -> Ticket | None: ...

    async def get_by_idempotency_key(
        self, db: AsyncSession, user_id: int, idempotency_key: str
    ) -> Ticket | None: ...

    async def find_duplicate_bets(
        self,
        db: AsyncSession,
        user_id: int,
        draw_id: int,
        pairs: list[tuple[str, str]],
    ) -> list[tuple[str, str]]: ...

    async def insert_ticket(self, db: AsyncSession, ticket: Ticket) -> None: ...

    async def lock_ticket(self, db: AsyncSession, ticket_id: str) -> Ticket | None: ...

    async def transition_status(
        self, db: AsyncSession, ticket_id: str, from_status: str, to_status: str
    ) -> bool: ...

    async def set_qr_payload(self, db: AsyncSession, ticket_id: str, qr_payload: str) -> None: ...

    async def list_pending_for_draw(
        self, db: AsyncSession, draw_id: int, limit: int
    ) -> list[Ticket]: ...

    async def insert_winning_ticket(
        self, db: AsyncSession, ticket_id: str, draw_id: int, prize_amount: int
    ) -> bool: ...

    async def list_winning_tickets(
        self, db: AsyncSession, draw_id: int
    ) -> list[WinningTicketView]: ...
