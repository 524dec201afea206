"""
Inventory router module for /inventories requests handling stocktaking sessions
"""

import logging

from fastapi import Depends

from ._router import router
from ..base import BadRequest
from ..dependency import LocalRequestData
from .. import helpers, versioning
from ...misc import inventories
from ... import schemas


logger = logging.getLogger(__name__)


@router.get("/inventories", tags=["Inventories"], response_model=schemas.InventoryStatus)
@versioning.versions(minimal=3)
async def get_inventory_status(local: LocalRequestData = Depends(LocalRequestData)):
    """
    Return whether a stocktaking session is currently active
    """

    active = inventories.is_active(local.session)
    return schemas.InventoryStatus(status=schemas.InventoryState.ACTIVE if active else schemas.InventoryState.INACTIVE)


@router.post("/inventories/start", tags=["Inventories"], status_code=204)
@versioning.versions(minimal=3)
async def start_inventory(local: LocalRequestData = Depends(LocalRequestData)):
    """
    Start a stocktaking session, which marks all articles as not yet checked

    A 400 error will be returned when a stocktaking session is already active.
    """

    try:
        inventories.start(local.session, local.now, logger)
    except inventories.InventoryStateError as exc:
        raise BadRequest(str(exc)) from exc
    return helpers.no_content()


@router.post("/inventories/stop", tags=["Inventories"], status_code=204)
@versioning.versions(minimal=3)
async def stop_inventory(local: LocalRequestData = Depends(LocalRequestData)):
    """
    Stop the active stocktaking session

    A 400 error will be returned when no stocktaking session is active.
    """

    try:
        inventories.stop(local.session, local.now, logger)
    except inventories.InventoryStateError as exc:
        raise BadRequest(str(exc)) from exc
    return helpers.no_content()
