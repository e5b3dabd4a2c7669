"""API routes for maintenance plans and the maintenance calendar."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from facilitydesk.api.deps import get_context, require_user, store_failure
from facilitydesk.context import DashboardContext
from facilitydesk.core.errors import DataAccessError, handle_api_error
from facilitydesk.schemas.forms import MaintenancePlanCreate
from facilitydesk.services.calendar import maintenance_events

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/maintenance", tags=["maintenance"], dependencies=[Depends(require_user)]
)


@router.get("", summary="List maintenance plans")
async def list_plans(
    property_id: Optional[str] = Query(None),
    ctx: DashboardContext = Depends(get_context),
):
    plans = ctx.maintenance.items
    if property_id:
        plans = [p for p in plans if p.property_id == property_id]
    return {
        "plans": [p.to_dict() for p in plans],
        "total": len(plans),
        "loading": ctx.maintenance.loading,
    }


@router.post("", summary="Create a maintenance plan", status_code=201)
async def create_plan(body: MaintenancePlanCreate, ctx: DashboardContext = Depends(get_context)):
    plan = await ctx.maintenance.create(body)
    if plan is None:
        raise store_failure("Creating maintenance plan")
    return plan.to_dict()


@router.get("/calendar", summary="Maintenance calendar events")
async def calendar(
    property_id: Optional[str] = Query(None, description="Only plans for this property"),
    ctx: DashboardContext = Depends(get_context),
):
    try:
        properties = await ctx.data_source.properties.list()
    except DataAccessError as e:
        handle_api_error(e, "Loading properties")
        raise store_failure("Loading properties")
    events = maintenance_events(
        ctx.maintenance.items,
        properties={p.id: p for p in properties},
        property_id=property_id,
        tz=ctx.tz,
        occurrences=ctx.config.CALENDAR_OCCURRENCES,
    )
    return {"events": [e.to_dict() for e in events], "total": len(events)}


@router.delete("/{plan_id}", summary="Delete a maintenance plan")
async def delete_plan(plan_id: str, ctx: DashboardContext = Depends(get_context)):
    if ctx.maintenance.get(plan_id) is None:
        raise HTTPException(status_code=404, detail="Maintenance plan not found")
    if not await ctx.maintenance.delete(plan_id):
        raise store_failure("Deleting maintenance plan")
    return {"deleted": True, "id": plan_id}
