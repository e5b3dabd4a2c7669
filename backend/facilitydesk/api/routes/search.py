"""API routes for global search."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from facilitydesk.api.deps import get_context, require_user
from facilitydesk.context import DashboardContext
from facilitydesk.services.search import RESULT_TYPES, search_snapshots, server_search

router = APIRouter(prefix="/api/search", tags=["search"], dependencies=[Depends(require_user)])


@router.get("", summary="Search the loaded cases, tasks and plans")
async def search(
    q: str = Query("", description="Search text"),
    types: Optional[list[str]] = Query(None, description=f"Any of {', '.join(RESULT_TYPES)}"),
    ctx: DashboardContext = Depends(get_context),
):
    results = search_snapshots(
        q, ctx.cases.items, ctx.tasks.items, ctx.maintenance.items,
        types=types, min_length=ctx.config.SEARCH_MIN_QUERY_LENGTH,
    )
    shown = results[: ctx.config.SEARCH_DISPLAY_LIMIT]
    return {
        "query": q,
        "total": len(results),
        "results": [r.to_dict() for r in shown],
    }


@router.get("/server", summary="Capped lookup against the database")
async def search_server(
    q: str = Query("", description="Search text"),
    ctx: DashboardContext = Depends(get_context),
):
    return await server_search(ctx.data_source, q, limit=ctx.config.SEARCH_RESULT_LIMIT)
