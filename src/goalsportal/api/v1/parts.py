"""
Part Record API Endpoints

Load and save one Part of a pair's record. Both go through the record access
controller so the API enforces the same role gating and save/reload cycle as
the portal UI.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from goalsportal.access import PartName, SessionContext
from goalsportal.api.deps import get_current_user, get_store
from goalsportal.core.schemas import READ_ONLY_NOTICE, PartFields, PartView
from goalsportal.core.validation import ValidationError, parse_part_name
from goalsportal.identity import IdentityUser
from goalsportal.records import RecordAccessController, RecordStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _part_or_422(part_name: str) -> PartName:
    try:
        return parse_part_name(part_name)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e


async def _open_controller(
    pair_id: str, part_name: str, user: IdentityUser, store: RecordStore
) -> RecordAccessController:
    part = _part_or_422(part_name)
    controller = RecordAccessController(SessionContext(user.email), store)

    if not await controller.open(pair_id, part):
        if controller.status and controller.status.kind == "error":
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=controller.status.message
            )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Pair not found: {pair_id}",
        )
    return controller


@router.get("/{pair_id}/{part_name}", response_model=PartView)
async def get_part(
    pair_id: str,
    part_name: str,
    user: IdentityUser = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
) -> PartView:
    """Current record for the part, with the caller's edit rights.

    A part that has never been saved comes back as an empty record.
    """
    controller = await _open_controller(pair_id, part_name, user, store)
    try:
        return controller.view()
    finally:
        controller.close()


@router.put("/{pair_id}/{part_name}", response_model=PartView)
async def save_part(
    pair_id: str,
    part_name: str,
    fields: PartFields,
    user: IdentityUser = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
) -> PartView:
    """Merge the given fields into the part and return the canonical saved row.

    Only fields present in the body are changed.
    """
    controller = await _open_controller(pair_id, part_name, user, store)
    try:
        if not controller.can_edit:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=READ_ONLY_NOTICE)

        if not await controller.save(fields):
            message = controller.status.message if controller.status else "Save failed"
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=message)

        return controller.view()
    finally:
        controller.close()
