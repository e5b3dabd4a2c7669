"""API routes for the kanban board."""

from fastapi import APIRouter, Depends

from facilitydesk.api.deps import get_context, require_user
from facilitydesk.context import DashboardContext
from facilitydesk.schemas.forms import KanbanMove
from facilitydesk.services.kanban import board_columns

router = APIRouter(prefix="/api/kanban", tags=["kanban"], dependencies=[Depends(require_user)])


@router.get("", summary="Cases grouped into status columns")
async def board(ctx: DashboardContext = Depends(get_context)):
    return {"columns": board_columns(ctx.cases.items), "loading": ctx.cases.loading}


@router.post("/move", summary="Drop a case on a column")
async def move(body: KanbanMove, ctx: DashboardContext = Depends(get_context)):
    ctx.kanban.drag_start(body.case_id)
    moved = await ctx.kanban.drag_end(body.case_id, body.column_id)
    return {"moved": moved, "columns": board_columns(ctx.cases.items)}
