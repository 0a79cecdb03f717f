"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.lt_common.database import engine
from src.lt_common.errors import AppError
from src.lt_common.redis_client import close_redis, get_redis
from src.lt_common.response import error_response
from src.lt_draw.api.router import router as draw_router
from src.lt_gateway.middleware.request_log import RequestLogMiddleware
from src.lt_ledger.api.router import router as account_router
from src.lt_limits.api.router import router as limits_router
from src.lt_settlement.api.router import router as settlement_router
from src.lt_ticket.api.router import router as ticket_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify the DB (required) and Redis (optional). Shutdown: dispose."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    try:
        await (await get_redis()).ping()
    except Exception:
        # Sales continue without Redis; only dashboard events are lost.
        logger.warning("Redis unreachable at startup; ticket events are dropped while it is down")
    yield
    # Shutdown
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, getattr(request.state, "request_id", None))
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(ticket_router, prefix="/api/v1")
app.include_router(limits_router, prefix="/api/v1")
app.include_router(draw_router, prefix="/api/v1")
app.include_router(settlement_router, prefix="/api/v1")
app.include_router(account_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
