"""API routes for cases: the filtered list, detail, status changes and comments."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError

from facilitydesk.api.deps import get_context, require_user, store_failure
from facilitydesk.context import DashboardContext
from facilitydesk.core.auth import AuthState
from facilitydesk.core.errors import DataAccessError, FeatureUnsupported, handle_api_error
from facilitydesk.schemas.forms import (
    CaseCreate,
    CaseFilters,
    CommentCreate,
    SortDirection,
    SortField,
    StatusUpdate,
)
from facilitydesk.services.case_detail import add_comment, list_comments, load_case_detail
from facilitydesk.services.case_filters import filter_cases, sort_cases

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cases", tags=["cases"], dependencies=[Depends(require_user)])


def _filters(
    status: Optional[str] = Query(None),
    priority: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    date_from: Optional[str] = Query(None, description="Date or timestamp; dates mean 00:00 UTC"),
    date_to: Optional[str] = Query(None),
    q: Optional[str] = Query(None, description="Free text over title, description, category"),
) -> CaseFilters:
    try:
        return CaseFilters(
            status=status or None,
            priority=priority or None,
            category=category or None,
            date_from=date_from or None,
            date_to=date_to or None,
            query=q,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))


@router.get("", summary="List cases")
async def list_cases(
    filters: CaseFilters = Depends(_filters),
    sort: SortField = Query("created_at"),
    direction: SortDirection = Query("desc"),
    ctx: DashboardContext = Depends(get_context),
):
    all_cases = ctx.cases.items
    cases = sort_cases(filter_cases(all_cases, filters), sort, direction)
    return {
        "cases": [c.to_dict() for c in cases],
        "total": len(all_cases),
        "matched": len(cases),
        "loading": ctx.cases.loading,
    }


@router.post("", summary="Create a case", status_code=201)
async def create_case(
    body: CaseCreate,
    ctx: DashboardContext = Depends(get_context),
    auth: AuthState = Depends(require_user),
):
    case = await ctx.cases.create(body, created_by=auth.user_id)
    if case is None:
        raise store_failure("Creating case")
    return case.to_dict()


@router.get("/{case_id}", summary="Get case detail")
async def get_case(case_id: str, ctx: DashboardContext = Depends(get_context)):
    try:
        detail = await load_case_detail(ctx.data_source, case_id, ctx.capabilities)
    except DataAccessError as e:
        logger.error(f"Error loading case {case_id}: {e}")
        raise store_failure("Loading case")
    if detail is None:
        raise HTTPException(status_code=404, detail="Case not found")
    return detail.to_dict()


@router.patch("/{case_id}/status", summary="Change case status")
async def update_status(
    case_id: str,
    body: StatusUpdate,
    ctx: DashboardContext = Depends(get_context),
):
    if ctx.cases.get(case_id) is None:
        raise HTTPException(status_code=404, detail="Case not found")
    if not await ctx.cases.update_status(case_id, body.status):
        raise store_failure("Updating case status")
    return ctx.cases.get(case_id).to_dict()


@router.delete("/{case_id}", summary="Delete a case")
async def delete_case(case_id: str, ctx: DashboardContext = Depends(get_context)):
    if ctx.cases.get(case_id) is None:
        raise HTTPException(status_code=404, detail="Case not found")
    if not await ctx.cases.delete(case_id):
        raise store_failure("Deleting case")
    return {"deleted": True, "id": case_id}


# ── Comments ──────────────────────────────────────────────────────────

@router.get("/{case_id}/comments", summary="List comments on a case")
async def get_comments(case_id: str, ctx: DashboardContext = Depends(get_context)):
    try:
        comments = await list_comments(ctx.data_source, case_id, ctx.capabilities)
    except FeatureUnsupported as e:
        raise HTTPException(status_code=501, detail=str(e))
    except DataAccessError as e:
        logger.error(f"Error loading comments for {case_id}: {e}")
        raise store_failure("Loading comments")
    return {"comments": [c.to_dict() for c in comments], "supported": True}


@router.post("/{case_id}/comments", summary="Comment on a case", status_code=201)
async def post_comment(
    case_id: str,
    body: CommentCreate,
    ctx: DashboardContext = Depends(get_context),
    auth: AuthState = Depends(require_user),
):
    try:
        comment = await add_comment(
            ctx.data_source, case_id, body.content, auth.user_id, ctx.capabilities
        )
    except FeatureUnsupported as e:
        raise HTTPException(status_code=501, detail=str(e))
    except DataAccessError as e:
        handle_api_error(e, "Adding comment", ctx.notifier)
        raise store_failure("Adding comment")
    return comment.to_dict()
