"""
Inventory router module for the flat /inventory and /item requests of version 1

Items are the articles of all categories in the flat shape of the first
API version. The stock of an item is the total stock of all lots of the
article, its best-before date is the one of the article's first lot.
"""

import logging

import pydantic
from fastapi import Depends

from ._router import router
from ..base import NotFound
from ..dependency import LocalRequestData
from .. import helpers, versioning
from ...misc import articles, categories, positions
from ...persistence import models
from ... import schemas


logger = logging.getLogger(__name__)

PLACEHOLDER_TEXT = "N/A"


def _with_placeholders(payload: schemas.ItemPayload) -> dict:
    return {
        "name": payload.name or PLACEHOLDER_TEXT,
        "size": payload.size or 0,
        "unit": payload.unit or PLACEHOLDER_TEXT,
        "best_before": payload.best_before or "",
        "stock": payload.stock or 0
    }


@router.get("/inventory", tags=["Items"], response_model=schemas.Items)
@versioning.versions(1)
async def get_all_items(local: LocalRequestData = Depends(LocalRequestData)):
    """
    Return all items of the inventory
    """

    query = local.session.query(models.Article).join(models.Article.category)
    items = query.order_by(models.Category.position, models.Article.position).all()
    return schemas.Items(items=[item.schema_v1 for item in items])


@router.get("/item/{item_id}", tags=["Items"], response_model=schemas.Item)
@versioning.versions(1)
async def get_item(item_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    return (await helpers.return_one(item_id, models.Article, local.session)).schema_v1


@router.post("/item", tags=["Items"], status_code=204)
@versioning.versions(1)
async def create_item(payload: schemas.ItemPayload, local: LocalRequestData = Depends(LocalRequestData)):
    """
    Create a new item, replacing missing fields with placeholders

    New items are added to the first category, which is created if there's none.
    """

    values = _with_placeholders(payload)
    articles.create_article(
        local.session,
        categories.get_default_category(local.session, local.now, logger),
        values["name"],
        values["size"],
        values["unit"],
        local.now,
        lot_entries=articles.flat_lots(values["best_before"], values["stock"]),
        logger=logger
    )
    return helpers.no_content()


@router.put("/item/{item_id}", tags=["Items"], status_code=204)
@versioning.versions(1)
async def update_item(
        item_id: pydantic.NonNegativeInt,
        payload: schemas.ItemPayload,
        local: LocalRequestData = Depends(LocalRequestData)
):
    """
    Overwrite an item, replacing missing fields with placeholders
    """

    item = await helpers.return_one(item_id, models.Article, local.session, lock=True)
    values = _with_placeholders(payload)
    articles.update_article(
        local.session,
        item,
        item.category,
        values["name"],
        values["size"],
        values["unit"],
        local.now,
        lot_entries=articles.flat_lots(values["best_before"], values["stock"]),
        logger=logger
    )
    return helpers.no_content()


@router.get("/item/{item_id}/increment", tags=["Items"], status_code=204)
@versioning.versions(1)
async def increment_item(item_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    item = await helpers.return_one(item_id, models.Article, local.session, lock=True)
    articles.shift_stock(local.session, item, 1, local.now, logger)
    return helpers.no_content()


@router.get("/item/{item_id}/decrement", tags=["Items"], status_code=204)
@versioning.versions(1)
async def decrement_item(item_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    item = await helpers.return_one(item_id, models.Article, local.session, lock=True)
    articles.shift_stock(local.session, item, -1, local.now, logger)
    return helpers.no_content()


@router.get("/item/{item_id}/reset-stock", tags=["Items"], status_code=204)
@versioning.versions(1)
async def reset_item_stock(item_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    """
    Set the stock of the item to zero
    """

    item = await helpers.return_one(item_id, models.Article, local.session, lock=True)
    articles.clear_stock(local.session, item, local.now)
    return helpers.no_content()


async def _move_item(item_id: int, move_up: bool, local: LocalRequestData):
    item = await helpers.return_one(item_id, models.Article, local.session, lock=True)
    if positions.swap_move(local.session, item, move_up, local.now, logger) is None:
        raise NotFound(f"Neighbour of item with ID {item_id}")
    local.session.commit()
    return helpers.no_content()


@router.get("/item/{item_id}/move-up", tags=["Items"], status_code=204)
@versioning.versions(1)
async def move_item_up(item_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    return await _move_item(item_id, True, local)


@router.get("/item/{item_id}/move-down", tags=["Items"], status_code=204)
@versioning.versions(1)
async def move_item_down(item_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    return await _move_item(item_id, False, local)
