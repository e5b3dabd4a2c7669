"""FastAPI dependencies: the dashboard context and the signed-in user."""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from facilitydesk.context import DashboardContext
from facilitydesk.core.auth import AuthState

security = HTTPBearer(auto_error=False)


def get_context(request: Request) -> DashboardContext:
    return request.app.state.context


async def get_auth_state(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    ctx: DashboardContext = Depends(get_context),
) -> AuthState:
    token = credentials.credentials if credentials else None
    return await ctx.auth.get_auth_state(token)


async def require_user(auth: AuthState = Depends(get_auth_state)) -> AuthState:
    if not auth.signed_in:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth


def store_failure(context: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"{context} failed")
