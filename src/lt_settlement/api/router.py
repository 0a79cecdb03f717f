"""lt_settlement REST API — settle a draw, resume grading, read the result."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_common.database import get_db_session
from src.lt_common.response import ApiResponse, success_response
from src.lt_gateway.auth.dependencies import get_current_user_id
from src.lt_settlement.application.schemas import SettleRequest
from src.lt_settlement.application.service import SettlementProcessor

router = APIRouter(prefix="/draws", tags=["settlement"])

_processor = SettlementProcessor()


@router.post("/{draw_id}/settle")
async def settle_draw(
    draw_id: int,
    body: SettleRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _processor.settle(db, draw_id, body.winning_number, input_by=user_id)
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))


@router.post("/{draw_id}/settle/resume")
async def resume_settlement(
    draw_id: int,
    _user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _processor.resume(db, draw_id)
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))


@router.get("/{draw_id}/result")
async def get_draw_result(
    draw_id: int,
    _user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _processor.get_result(db, draw_id)
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))
