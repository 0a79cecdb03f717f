"""Ticket read side."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_common.errors import TicketNotFoundError
from src.lt_ticket.application.schemas import TicketResponse
from src.lt_ticket.domain.repository import TicketRepositoryProtocol
from src.lt_ticket.infrastructure.persistence import TicketRepository


class TicketQueryService:
    def __init__(self, repo: TicketRepositoryProtocol | None = None) -> None:
        self._repo: TicketRepositoryProtocol = repo or TicketRepository()

    async def get_ticket(self, db: AsyncSession, ticket_id: str, user_id: int) -> TicketResponse:
        ticket = await self._repo.get_by_id(db, ticket_id)
        # Another agent's ticket is reported as missing.
        if ticket is None or ticket.user_id != user_id:
            raise TicketNotFoundError(ticket_id)
        return TicketResponse.from_domain(ticket)
