"""API routes for work-order tasks."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from facilitydesk.api.deps import get_context, require_user, store_failure
from facilitydesk.context import DashboardContext
from facilitydesk.schemas.entities import TaskStatus
from facilitydesk.schemas.forms import TaskCreate
from facilitydesk.services.kpis import is_overdue

router = APIRouter(prefix="/api/tasks", tags=["tasks"], dependencies=[Depends(require_user)])


@router.get("", summary="List tasks")
async def list_tasks(
    status: Optional[TaskStatus] = Query(None),
    case_id: Optional[str] = Query(None),
    overdue: bool = Query(False, description="Only tasks past due and not completed"),
    ctx: DashboardContext = Depends(get_context),
):
    tasks = ctx.tasks.items
    if status:
        tasks = [t for t in tasks if t.status == status]
    if case_id:
        tasks = [t for t in tasks if t.case_id == case_id]
    if overdue:
        tasks = [t for t in tasks if is_overdue(t)]
    return {
        "tasks": [t.to_dict() for t in tasks],
        "total": len(tasks),
        "loading": ctx.tasks.loading,
    }


@router.post("", summary="Create a task", status_code=201)
async def create_task(body: TaskCreate, ctx: DashboardContext = Depends(get_context)):
    task = await ctx.tasks.create(body)
    if task is None:
        raise store_failure("Creating task")
    return task.to_dict()
