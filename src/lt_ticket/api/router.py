"""lt_ticket REST API — purchase, ticket detail and refund."""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_common.database import get_db_session
from src.lt_common.response import ApiResponse, success_response
from src.lt_gateway.auth.dependencies import get_current_user_id
from src.lt_ticket.application.coordinator import PurchaseCoordinator
from src.lt_ticket.application.refund_service import TicketRefundService
from src.lt_ticket.application.schemas import PurchaseRequest, PurchaseResponse, RefundRequest
from src.lt_ticket.application.service import TicketQueryService
from src.lt_ticket.domain.errors import PurchaseError

router = APIRouter(prefix="/tickets", tags=["tickets"])

_coordinator = PurchaseCoordinator()
_refunds = TicketRefundService()
_queries = TicketQueryService()


@router.post("", status_code=status.HTTP_201_CREATED)
async def purchase_ticket(
    body: PurchaseRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    idempotency_key: Annotated[str | None, Header(alias="Idempotency-Key", max_length=64)] = None,
) -> ApiResponse:
    outcome = await _coordinator.purchase(
        db, user_id, body.draw_id, body.to_bet_requests(), idempotency_key
    )
    if isinstance(outcome, PurchaseError):
        raise outcome.to_app_error()
    data = PurchaseResponse.from_receipt(outcome)
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))


@router.get("/{ticket_id}")
async def get_ticket(
    ticket_id: str,
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _queries.get_ticket(db, ticket_id, user_id)
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))


@router.post("/{ticket_id}/refund")
async def refund_ticket(
    ticket_id: str,
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    body: RefundRequest | None = None,
) -> ApiResponse:
    data = await _refunds.refund(db, ticket_id, user_id, body.reason if body else None)
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))
