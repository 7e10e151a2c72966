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
from src.gs_account.api.router import router as wallet_router
from src.gs_common.background import detached_tasks
from src.gs_common.database import engine
from src.gs_common.errors import AppError, PurchaseError
from src.gs_common.response import error_response
from src.gs_gateway.middleware.request_log import RequestLogMiddleware
from src.gs_library.api.router import router as library_router
from src.gs_purchase.api.router import router as store_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB connection. Shutdown: drain detached tasks, dispose."""
    # Startup
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info("%s started", settings.APP_NAME)
    yield
    # Shutdown
    await detached_tasks.drain(settings.BACKGROUND_DRAIN_SECONDS)
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    data = {"kind": exc.kind.value} if isinstance(exc, PurchaseError) else None
    resp = error_response(
        exc.code,
        exc.message,
        data=data,
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(store_router, prefix="/api/v1")
app.include_router(wallet_router, prefix="/api/v1")
app.include_router(library_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
