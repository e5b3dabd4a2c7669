"""Current session and capability flags."""

from fastapi import APIRouter, Depends

from facilitydesk.api.deps import get_auth_state, get_context
from facilitydesk.context import DashboardContext
from facilitydesk.core.auth import AuthState

router = APIRouter(prefix="/api/session", tags=["session"])


@router.get("", summary="Who is signed in")
async def session(
    auth: AuthState = Depends(get_auth_state),
    ctx: DashboardContext = Depends(get_context),
):
    return {**auth.to_dict(), "capabilities": ctx.capabilities.to_dict()}


@router.get("/notifications", summary="Recent notifications")
async def notifications(
    limit: int = 20,
    ctx: DashboardContext = Depends(get_context),
):
    return {"notifications": [n.to_dict() for n in ctx.notifier.recent(limit)]}
