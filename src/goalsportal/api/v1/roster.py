"""
Roster API Endpoints
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from fastapi import APIRouter, Depends, HTTPException, status

from goalsportal.access import editable_parts
from goalsportal.api.deps import get_store
from goalsportal.core.schemas import RosterEntry
from goalsportal.records import RecordStore, StoreError

router = APIRouter()


@router.get("/", response_model=list[RosterEntry])
async def list_pairs(store: RecordStore = Depends(get_store)) -> list[RosterEntry]:
    """Pairs visible to the caller, with the parts they may edit on each."""
    try:
        pairs = await store.query_roster()
    except StoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

    return [
        RosterEntry(
            **pair.model_dump(),
            label=pair.display_label,
            editable_parts=[str(part) for part in editable_parts(pair, store.viewer_email)],
        )
        for pair in pairs
    ]
