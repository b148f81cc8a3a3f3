"""API key verification and user scoping for goal endpoints."""

from fastapi import HTTPException, Header

from goaltally.config import settings


async def verify_api_key(
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
    authorization: str | None = Header(default=None),
) -> str:
    """Validate API key via X-API-Key or Authorization: Bearer.

    If GOALTALLY_API_KEY is not set, passes through (no auth).
    If set, requires matching key or raises 401.
    """
    if settings.api_key is None:
        return ""

    key = x_api_key
    if key is None and authorization and authorization.startswith("Bearer "):
        key = authorization[7:].strip()

    if key != settings.api_key:
        raise HTTPException(status_code=401, detail="Invalid or missing API key")

    return key


async def current_user(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
) -> str:
    """Return the user every goals/stats request is scoped to.

    Identity is asserted by the fronting auth provider; this only
    rejects requests that carry none.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="User not authenticated")
    return x_user_id.strip()
