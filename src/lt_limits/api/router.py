"""lt_limits REST API — cap checks and running-total listings."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_common.database import get_db_session
from src.lt_common.enums import BetType
from src.lt_common.response import ApiResponse, success_response
from src.lt_gateway.auth.dependencies import get_current_user_id
from src.lt_limits.application.service import LimitApplicationService

router = APIRouter(prefix="/bet-limits", tags=["bet-limits"])

_service = LimitApplicationService()


@router.get("/check/{draw_id}/{combination}/{bet_type}")
async def check_limit(
    draw_id: int,
    combination: str,
    bet_type: BetType,
    _user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.check_limit(db, draw_id, combination, bet_type)
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))


@router.get("/current")
async def list_totals(
    _user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    draw_id: int = Query(..., description="Draw to inspect"),
    bet_type: BetType | None = Query(None),
    combination: str | None = Query(None, description="Single combination, 1-3 digits"),
) -> ApiResponse:
    data = await _service.list_totals(db, draw_id, bet_type, combination)
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))


@router.get("/sold-out/{draw_id}")
async def list_sold_out(
    draw_id: int,
    _user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.list_sold_out(db, draw_id)
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))
