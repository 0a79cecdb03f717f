"""lt_ledger REST API — balance and transaction history, JWT required."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_common.database import get_db_session
from src.lt_common.enums import TransactionKind
from src.lt_common.response import ApiResponse, success_response
from src.lt_gateway.auth.dependencies import get_current_user_id
from src.lt_ledger.application.service import LedgerApplicationService

router = APIRouter(prefix="/account", tags=["account"])

_service = LedgerApplicationService()


@router.get("/balance")
async def get_balance(
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_balance(db, user_id)
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))


@router.get("/transactions")
async def list_transactions(
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    kind: TransactionKind | None = Query(None, description="Filter by transaction kind"),
) -> ApiResponse:
    data = await _service.list_transactions(
        db, user_id, cursor, limit, kind.value if kind else None
    )
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))
