"""
Inventory router module for /lots requests
"""

import logging

import pydantic
from fastapi import Depends

from ._router import router
from ..base import BadRequest, NotFound
from ..dependency import LocalRequestData
from .. import helpers, versioning
from ...misc import lots, positions
from ...persistence import models
from ... import schemas


logger = logging.getLogger(__name__)


@router.get("/lots/{lot_id}", tags=["Lots"], response_model=schemas.Lot)
@versioning.versions(minimal=3)
async def get_lot(lot_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    return (await helpers.return_one(lot_id, models.Lot, local.session)).schema


@router.post("/lots", tags=["Lots"], status_code=204)
@versioning.versions(minimal=3)
async def create_lot(body: schemas.LotCreation, local: LocalRequestData = Depends(LocalRequestData)):
    """
    Append a new lot to the end of the lots of its article
    """

    article = await helpers.return_one(body.article, models.Article, local.session)
    lots.create_lot(local.session, article, body.best_before, body.stock, body.timestamp, local.now, logger)
    return helpers.no_content()


@router.put("/lots/{lot_id}", tags=["Lots"], status_code=204)
@versioning.versions(minimal=3)
async def update_lot(
        lot_id: pydantic.NonNegativeInt,
        body: schemas.LotUpdate,
        local: LocalRequestData = Depends(LocalRequestData)
):
    """
    Overwrite the best-before date and the stock of the lot

    Changes based on an outdated version of the lot are dropped silently.
    """

    lot = await helpers.return_one(lot_id, models.Lot, local.session, lock=True)
    lots.update_lot(local.session, lot, body.best_before, body.stock, body.timestamp, local.now, logger)
    return helpers.no_content()


async def _change_stock(lot_id: int, delta: int, local: LocalRequestData) -> schemas.Lot:
    lot = lots.change_stock(local.session, lot_id, delta, local.now, logger)
    if lot is None:
        raise NotFound(f"Lot with ID {lot_id!r}")
    return lot.schema


@router.put("/lots/{lot_id}/increment", tags=["Lots"], response_model=schemas.Lot)
@versioning.versions(minimal=3)
async def increment_lot(lot_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    return await _change_stock(lot_id, 1, local)


@router.put("/lots/{lot_id}/decrement", tags=["Lots"], response_model=schemas.Lot)
@versioning.versions(minimal=3)
async def decrement_lot(lot_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    """
    Decrement the stock of the lot, which may become negative
    """

    return await _change_stock(lot_id, -1, local)


async def _move_lot(lot_id: int, move_up: bool, local: LocalRequestData) -> schemas.Lots:
    lot = await helpers.return_one(lot_id, models.Lot, local.session, lock=True)
    moved = positions.swap_move(local.session, lot, move_up, local.now, logger)
    if moved is None:
        raise BadRequest(f"The lot is already the {'first' if move_up else 'last'} one of its article.")
    local.session.commit()
    return schemas.Lots(lots=[entry.schema for entry in moved])


@router.put("/lots/{lot_id}/move-up", tags=["Lots"], response_model=schemas.Lots)
@versioning.versions(minimal=3)
async def move_lot_up(lot_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    return await _move_lot(lot_id, True, local)


@router.put("/lots/{lot_id}/move-down", tags=["Lots"], response_model=schemas.Lots)
@versioning.versions(minimal=3)
async def move_lot_down(lot_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    return await _move_lot(lot_id, False, local)
