"""API routes for reference data: properties, units and users."""

from fastapi import APIRouter, Depends, HTTPException

from facilitydesk.api.deps import get_context, require_user, store_failure
from facilitydesk.context import DashboardContext
from facilitydesk.core.errors import DataAccessError, handle_api_error

router = APIRouter(prefix="/api", tags=["reference"], dependencies=[Depends(require_user)])


@router.get("/properties", summary="List properties")
async def list_properties(ctx: DashboardContext = Depends(get_context)):
    try:
        properties = await ctx.data_source.properties.list(order_by="name")
    except DataAccessError as e:
        handle_api_error(e, "Loading properties")
        raise store_failure("Loading properties")
    return {"properties": [p.to_dict() for p in properties]}


@router.get("/properties/{property_id}/units", summary="Units of a property")
async def list_units(property_id: str, ctx: DashboardContext = Depends(get_context)):
    try:
        prop = await ctx.data_source.properties.get_by_id(property_id)
        if prop is None:
            raise HTTPException(status_code=404, detail="Property not found")
        units = await ctx.data_source.units.list(order_by="unit_number", property_id=property_id)
    except DataAccessError as e:
        handle_api_error(e, "Loading units")
        raise store_failure("Loading units")
    return {"property": prop.to_dict(), "units": [u.to_dict() for u in units]}


@router.get("/users", summary="List users")
async def list_users(ctx: DashboardContext = Depends(get_context)):
    try:
        users = await ctx.data_source.users.list(order_by="name")
    except DataAccessError as e:
        handle_api_error(e, "Loading users")
        raise store_failure("Loading users")
    return {"users": [u.to_dict() for u in users]}
