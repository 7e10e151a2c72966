"""gs_purchase REST API — buy a game from the store."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.gs_common.database import get_db_session
from src.gs_common.response import ApiResponse, success_response
from src.gs_gateway.auth.dependencies import get_current_user_id
from src.gs_purchase.application.engine import PurchaseEngine, get_purchase_engine
from src.gs_purchase.application.schemas import PurchaseRequest, PurchaseResponse

router = APIRouter(prefix="/store", tags=["store"])


@router.post("/purchase", status_code=201)
async def purchase_game(
    body: PurchaseRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    engine: Annotated[PurchaseEngine, Depends(get_purchase_engine)],
    request: Request,
) -> ApiResponse:
    outcome = await engine.purchase(db, user_id, body.game_id)
    if outcome.error is not None:
        # Rendered as the error envelope by the AppError handler
        raise outcome.error
    assert outcome.receipt is not None
    return success_response(
        PurchaseResponse.from_receipt(outcome.receipt).model_dump(),
        request_id=getattr(request.state, "request_id", None),
    )
