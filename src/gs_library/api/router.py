"""gs_library REST API — the caller's owned games."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.gs_common.database import get_db_session
from src.gs_common.response import ApiResponse, success_response
from src.gs_gateway.auth.dependencies import get_current_user_id
from src.gs_library.application.service import LibraryApplicationService

router = APIRouter(prefix="/library", tags=["library"])

_service = LibraryApplicationService()


@router.get("")
async def list_library(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
) -> ApiResponse:
    data = await _service.list_library(db, user_id, cursor, limit)
    return success_response(
        data.model_dump(), request_id=getattr(request.state, "request_id", None)
    )


@router.get("/{game_id}")
async def get_ownership(
    game_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.is_owned(db, user_id, game_id)
    return success_response(
        data.model_dump(), request_id=getattr(request.state, "request_id", None)
    )
