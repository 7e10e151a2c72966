"""gs_account REST API — wallet balance, top-up, payment history, reconciliation."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.gs_account.application.schemas import TopUpRequest
from src.gs_account.application.service import WalletApplicationService
from src.gs_common.database import get_db_session
from src.gs_common.enums import LedgerEntryType
from src.gs_common.response import ApiResponse, success_response
from src.gs_gateway.auth.dependencies import get_current_user_id

router = APIRouter(prefix="/wallet", tags=["wallet"])

_service = WalletApplicationService()


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


@router.get("/balance")
async def get_balance(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_balance(db, user_id)
    return success_response(data.model_dump(), request_id=_request_id(request))


@router.post("/top-up")
async def top_up(
    body: TopUpRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.top_up(db, user_id, body.amount_cents, body.description)
    return success_response(data.model_dump(), request_id=_request_id(request))


@router.get("/ledger")
async def list_ledger(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    entry_type: LedgerEntryType | None = Query(None, description="Filter by entry type"),
) -> ApiResponse:
    data = await _service.list_ledger(
        db, user_id, cursor, limit, entry_type.value if entry_type else None
    )
    return success_response(data.model_dump(mode="json"), request_id=_request_id(request))


@router.get("/reconcile")
async def reconcile(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.reconcile(db, user_id)
    return success_response(data.model_dump(), request_id=_request_id(request))
