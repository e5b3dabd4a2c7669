"""API routes for the dashboard: KPIs, KPI drill-down, charts, recent items, counts."""

from fastapi import APIRouter, Depends

from facilitydesk.api.deps import get_context, require_user
from facilitydesk.context import DashboardContext
from facilitydesk.services.charts import chart_summary
from facilitydesk.services.dashboard import counts_overview, recent_items
from facilitydesk.services.kpis import KPI_DETAILS, KpiKind, dashboard_stats, kpi_items

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"], dependencies=[Depends(require_user)])


@router.get("", summary="Dashboard KPIs")
async def dashboard(ctx: DashboardContext = Depends(get_context)):
    return {
        "loading": ctx.loading,
        "stats": dashboard_stats(ctx.cases.items, ctx.tasks.items, ctx.maintenance.items, tz=ctx.tz),
    }


@router.get("/kpi/{kind}", summary="Items behind one KPI tile")
async def kpi_detail(kind: KpiKind, ctx: DashboardContext = Depends(get_context)):
    items = kpi_items(kind, ctx.cases.items, ctx.tasks.items, tz=ctx.tz)
    return {
        "kind": kind.value,
        **KPI_DETAILS[kind],
        "count": len(items),
        "items": [i.to_dict() for i in items],
    }


@router.get("/charts", summary="Chart series")
async def charts(ctx: DashboardContext = Depends(get_context)):
    return chart_summary(ctx.cases.items)


@router.get("/recent", summary="Most recent cases, tasks and plans")
async def recent(ctx: DashboardContext = Depends(get_context)):
    return recent_items(
        ctx.cases.items, ctx.tasks.items, ctx.maintenance.items,
        limit=ctx.config.RECENT_ITEMS_LIMIT,
    )


@router.get("/counts", summary="Row counts per table")
async def counts(ctx: DashboardContext = Depends(get_context)):
    return await counts_overview(ctx.data_source)
