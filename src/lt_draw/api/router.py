"""lt_draw REST API — draw calendar maintenance."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_common.database import get_db_session
from src.lt_common.response import ApiResponse, success_response
from src.lt_draw.application.schemas import MaintenanceRequest
from src.lt_draw.application.service import DrawScheduleService
from src.lt_gateway.auth.dependencies import get_current_user_id

router = APIRouter(prefix="/draws", tags=["draws"])

_service = DrawScheduleService()


@router.post("/maintenance")
async def run_maintenance(
    _user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    body: MaintenanceRequest | None = None,
) -> ApiResponse:
    data = await _service.run_maintenance(db, body.days if body else None)
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))
