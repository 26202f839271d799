"""
Admin API Endpoints

Read-only CSV exports of every record, for admins only.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from goalsportal.api.deps import get_store
from goalsportal.core.schemas import AdminCheckResponse
from goalsportal.export import PARTS_EXPORT_FILENAME, ROSTER_EXPORT_FILENAME, to_csv
from goalsportal.records import RecordStore, StoreError

logger = logging.getLogger(__name__)

router = APIRouter()


async def _require_admin(store: RecordStore) -> None:
    try:
        is_admin = await store.call_procedure("is_admin")
    except StoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

    if not is_admin:
        logger.warning("Export refused for non-admin", extra={"viewer": store.viewer_email})
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")


async def _csv_download(store: RecordStore, procedure: str, filename: str) -> Response:
    await _require_admin(store)

    try:
        rows = await store.call_procedure(procedure)
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from e

    logger.info(f"Exported {len(rows)} rows via {procedure}", extra={"viewer": store.viewer_email})
    return Response(
        content=to_csv(rows),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-store",
        },
    )


@router.get("/check", response_model=AdminCheckResponse)
async def check_admin(store: RecordStore = Depends(get_store)) -> AdminCheckResponse:
    """Whether the caller has admin access."""
    try:
        return AdminCheckResponse(is_admin=await store.call_procedure("is_admin"))
    except StoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e


@router.get("/export")
async def export_parts(store: RecordStore = Depends(get_store)) -> Response:
    """Download every Part record as CSV."""
    return await _csv_download(store, "admin_export", PARTS_EXPORT_FILENAME)


@router.get("/export/roster")
async def export_roster(store: RecordStore = Depends(get_store)) -> Response:
    """Download the roster as CSV."""
    return await _csv_download(store, "admin_export_roster", ROSTER_EXPORT_FILENAME)
