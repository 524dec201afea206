"""
Inventory router module for /categories requests
"""

import logging
from typing import Optional

import pydantic
from fastapi import Depends

from ._router import router
from ..base import BadRequest, NotFound
from ..dependency import LocalRequestData
from .. import helpers, versioning
from ...misc import categories, positions
from ...persistence import models
from ... import schemas


logger = logging.getLogger(__name__)


@router.get("/categories", tags=["Categories"], response_model=schemas.CategoriesV2)
@versioning.versions(2)
async def get_all_categories_v2(local: LocalRequestData = Depends(LocalRequestData)):
    return schemas.CategoriesV2(
        categories=[c.schema_v2 for c in helpers.get_ordered(models.Category, local.session)]
    )


@router.get("/categories", tags=["Categories"], response_model=schemas.Categories)
@versioning.versions(minimal=3)
async def get_all_categories(local: LocalRequestData = Depends(LocalRequestData)):
    """
    Return all categories ordered by their position
    """

    return schemas.Categories(
        categories=[c.schema for c in helpers.get_ordered(models.Category, local.session)]
    )


@router.get("/categories/{category_id}", tags=["Categories"], response_model=schemas.CategoryV2)
@versioning.versions(2)
async def get_category_v2(category_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    return (await helpers.return_one(category_id, models.Category, local.session)).schema_v2


@router.get("/categories/{category_id}", tags=["Categories"], response_model=schemas.Category)
@versioning.versions(minimal=3)
async def get_category(category_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    return (await helpers.return_one(category_id, models.Category, local.session)).schema


@router.get("/categories/{category_id}/articles", tags=["Categories"], response_model=schemas.ArticlesV2)
@versioning.versions(2)
async def get_articles_of_category_v2(
        category_id: pydantic.NonNegativeInt,
        local: LocalRequestData = Depends(LocalRequestData)
):
    await helpers.return_one(category_id, models.Category, local.session)
    found = helpers.get_ordered(models.Article, local.session, category_id=category_id)
    return schemas.ArticlesV2(articles=[a.schema_v2 for a in found])


@router.get("/categories/{category_id}/articles", tags=["Categories"], response_model=schemas.Articles)
@versioning.versions(minimal=3)
async def get_articles_of_category(
        category_id: pydantic.NonNegativeInt,
        local: LocalRequestData = Depends(LocalRequestData)
):
    """
    Return all articles of the category ordered by their position
    """

    await helpers.return_one(category_id, models.Category, local.session)
    found = helpers.get_ordered(models.Article, local.session, category_id=category_id)
    return schemas.Articles(articles=[a.schema for a in found])


@router.post("/categories", tags=["Categories"], status_code=204)
@versioning.versions(2)
async def create_category_v2(body: schemas.CategoryV2Body, local: LocalRequestData = Depends(LocalRequestData)):
    categories.create_category(local.session, body.name, None, local.now, logger)
    return helpers.no_content()


@router.post("/categories", tags=["Categories"], status_code=204)
@versioning.versions(minimal=3)
async def create_category(body: schemas.CategoryCreation, local: LocalRequestData = Depends(LocalRequestData)):
    """
    Append a new category to the end of the list of categories
    """

    categories.create_category(local.session, body.name, body.timestamp, local.now, logger)
    return helpers.no_content()


@router.put("/categories/{category_id}", tags=["Categories"], status_code=204)
@versioning.versions(2)
async def update_category_v2(
        category_id: pydantic.NonNegativeInt,
        body: schemas.CategoryV2Body,
        local: LocalRequestData = Depends(LocalRequestData)
):
    category = await helpers.return_one(category_id, models.Category, local.session, lock=True)
    categories.update_category(local.session, category, body.name, None, local.now, logger)
    return helpers.no_content()


@router.put("/categories/{category_id}", tags=["Categories"], status_code=204)
@versioning.versions(minimal=3)
async def update_category(
        category_id: pydantic.NonNegativeInt,
        body: schemas.CategoryUpdate,
        local: LocalRequestData = Depends(LocalRequestData)
):
    """
    Rename the category

    Changes based on an outdated version of the category are dropped
    silently, so the response doesn't tell whether it has been applied.
    """

    category = await helpers.return_one(category_id, models.Category, local.session, lock=True)
    categories.update_category(local.session, category, body.name, body.timestamp, local.now, logger)
    return helpers.no_content()


async def _move_category(category_id: int, move_up: bool, local: LocalRequestData) -> Optional[tuple]:
    category = await helpers.return_one(category_id, models.Category, local.session, lock=True)
    moved = positions.swap_move(local.session, category, move_up, local.now, logger)
    if moved is not None:
        local.session.commit()
    return moved


@router.put("/categories/{category_id}/move-up", tags=["Categories"], response_model=schemas.CategoriesV2)
@versioning.versions(2)
async def move_category_up_v2(category_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    moved = await _move_category(category_id, True, local)
    if moved is None:
        raise NotFound(f"Neighbour of Category with ID {category_id}")
    return schemas.CategoriesV2(categories=[c.schema_v2 for c in moved])


@router.put("/categories/{category_id}/move-down", tags=["Categories"], response_model=schemas.CategoriesV2)
@versioning.versions(2)
async def move_category_down_v2(
        category_id: pydantic.NonNegativeInt,
        local: LocalRequestData = Depends(LocalRequestData)
):
    moved = await _move_category(category_id, False, local)
    if moved is None:
        raise NotFound(f"Neighbour of Category with ID {category_id}")
    return schemas.CategoriesV2(categories=[c.schema_v2 for c in moved])


@router.put("/categories/{category_id}/move-up", tags=["Categories"], response_model=schemas.Categories)
@versioning.versions(minimal=3)
async def move_category_up(category_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    """
    Swap the category with the one before it and return both of them
    """

    moved = await _move_category(category_id, True, local)
    if moved is None:
        raise BadRequest("The category is already the first one.")
    return schemas.Categories(categories=[c.schema for c in moved])


@router.put("/categories/{category_id}/move-down", tags=["Categories"], response_model=schemas.Categories)
@versioning.versions(minimal=3)
async def move_category_down(
        category_id: pydantic.NonNegativeInt,
        local: LocalRequestData = Depends(LocalRequestData)
):
    """
    Swap the category with the one after it and return both of them
    """

    moved = await _move_category(category_id, False, local)
    if moved is None:
        raise BadRequest("The category is already the last one.")
    return schemas.Categories(categories=[c.schema for c in moved])
