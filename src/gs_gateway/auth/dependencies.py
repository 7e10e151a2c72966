"""FastAPI dependency: get_current_user_id.

Authentication happens upstream: the auth gateway validates the session and
forwards the caller's opaque user id in the X-User-Id header. This service
only requires the header to be present.

Usage in any protected router:
    from src.gs_gateway.auth.dependencies import get_current_user_id

    @router.get("/protected")
    async def protected(user_id: str = Depends(get_current_user_id)):
        ...
"""

from typing import Annotated

from fastapi import Header, HTTPException, status

USER_ID_HEADER = "X-User-Id"

_MISSING_IDENTITY_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail=f"Missing {USER_ID_HEADER} header",
)


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header(alias=USER_ID_HEADER)] = None,
) -> str:
    user_id = (x_user_id or "").strip()
    if not user_id or len(user_id) > 64:
        raise _MISSING_IDENTITY_EXCEPTION
    return user_id
