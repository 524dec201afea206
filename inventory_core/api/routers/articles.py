"""
Inventory router module for /articles requests

Version 2 shows articles with a flat stock and best-before date,
while version 3 shows them with their lots and barcodes.
"""

import logging
from typing import Optional

import pydantic
from fastapi import Depends

from ._router import router
from ..base import BadRequest, NotFound
from ..dependency import LocalRequestData
from .. import helpers, versioning
from ...misc import articles, positions
from ...persistence import models
from ... import schemas


logger = logging.getLogger(__name__)


@router.get("/articles", tags=["Articles"], response_model=schemas.ArticlesV2)
@versioning.versions(2)
async def get_all_articles_v2(local: LocalRequestData = Depends(LocalRequestData)):
    return schemas.ArticlesV2(articles=[a.schema_v2 for a in helpers.get_ordered(models.Article, local.session)])


@router.get("/articles", tags=["Articles"], response_model=schemas.Articles)
@versioning.versions(minimal=3)
async def get_all_articles(local: LocalRequestData = Depends(LocalRequestData)):
    """
    Return all articles with their lots, ordered by category and position
    """

    return schemas.Articles(articles=[a.schema for a in helpers.get_ordered(models.Article, local.session)])


@router.get("/articles/{article_id}", tags=["Articles"], response_model=schemas.ArticleV2)
@versioning.versions(2)
async def get_article_v2(article_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    return (await helpers.return_one(article_id, models.Article, local.session)).schema_v2


@router.get("/articles/{article_id}", tags=["Articles"], response_model=schemas.Article)
@versioning.versions(minimal=3)
async def get_article(article_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    return (await helpers.return_one(article_id, models.Article, local.session)).schema


@router.post("/articles", tags=["Articles"], status_code=204)
@versioning.versions(2)
async def create_article_v2(body: schemas.ArticleV2Body, local: LocalRequestData = Depends(LocalRequestData)):
    category = await helpers.return_one(body.category, models.Category, local.session)
    articles.create_article(
        local.session,
        category,
        body.name,
        body.size,
        body.unit,
        local.now,
        lot_entries=articles.flat_lots(body.best_before, body.stock),
        timestamp=body.timestamp,
        logger=logger
    )
    return helpers.no_content()


@router.post("/articles", tags=["Articles"], status_code=204)
@versioning.versions(minimal=3)
async def create_article(body: schemas.ArticleCreation, local: LocalRequestData = Depends(LocalRequestData)):
    """
    Append a new article to the end of its category

    The optional lots of the article are stored in the given order.
    """

    category = await helpers.return_one(body.category, models.Category, local.session)
    articles.create_article(
        local.session,
        category,
        body.name,
        body.size,
        body.unit,
        local.now,
        gtins=body.gtins,
        lot_entries=body.lots,
        timestamp=body.timestamp,
        logger=logger
    )
    return helpers.no_content()


@router.put("/articles/{article_id}", tags=["Articles"], status_code=204)
@versioning.versions(2)
async def update_article_v2(
        article_id: pydantic.NonNegativeInt,
        body: schemas.ArticleV2Body,
        local: LocalRequestData = Depends(LocalRequestData)
):
    article = await helpers.return_one(article_id, models.Article, local.session, lock=True)
    category = await helpers.return_one(body.category, models.Category, local.session)
    articles.update_article(
        local.session,
        article,
        category,
        body.name,
        body.size,
        body.unit,
        local.now,
        lot_entries=articles.flat_lots(body.best_before, body.stock),
        timestamp=body.timestamp,
        logger=logger
    )
    return helpers.no_content()


@router.put("/articles/{article_id}", tags=["Articles"], status_code=204)
@versioning.versions(minimal=3)
async def update_article(
        article_id: pydantic.NonNegativeInt,
        body: schemas.ArticleUpdate,
        local: LocalRequestData = Depends(LocalRequestData)
):
    """
    Overwrite the article

    A changed category moves the article to the end of the new category.
    The lots of the article are replaced completely if `lots` is given.
    Changes based on an outdated version of the article are dropped
    silently, so the response doesn't tell whether it has been applied.
    """

    article = await helpers.return_one(article_id, models.Article, local.session, lock=True)
    category = await helpers.return_one(body.category, models.Category, local.session)
    articles.update_article(
        local.session,
        article,
        category,
        body.name,
        body.size,
        body.unit,
        local.now,
        gtins=body.gtins,
        lot_entries=body.lots,
        timestamp=body.timestamp,
        logger=logger
    )
    return helpers.no_content()


@router.put("/articles/{article_id}/increment", tags=["Articles"], response_model=schemas.ArticleV2)
@versioning.versions(2)
async def increment_article(article_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    article = await helpers.return_one(article_id, models.Article, local.session, lock=True)
    return articles.shift_stock(local.session, article, 1, local.now, logger).schema_v2


@router.put("/articles/{article_id}/decrement", tags=["Articles"], response_model=schemas.ArticleV2)
@versioning.versions(2)
async def decrement_article(article_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    article = await helpers.return_one(article_id, models.Article, local.session, lock=True)
    return articles.shift_stock(local.session, article, -1, local.now, logger).schema_v2


async def _reset_article(
        article_id: int,
        reset: Optional[schemas.ArticleReset],
        local: LocalRequestData
) -> models.Article:
    article = await helpers.return_one(article_id, models.Article, local.session, lock=True)
    articles.reset_article(local.session, article, local.now, reset and reset.timestamp, logger)
    return article


@router.put("/articles/{article_id}/reset", tags=["Articles"], response_model=schemas.ArticleV2)
@versioning.versions(2)
async def reset_article_v2(
        article_id: pydantic.NonNegativeInt,
        reset: Optional[schemas.ArticleReset] = None,
        local: LocalRequestData = Depends(LocalRequestData)
):
    return (await _reset_article(article_id, reset, local)).schema_v2


@router.put("/articles/{article_id}/reset", tags=["Articles"], response_model=schemas.Article)
@versioning.versions(minimal=3)
async def reset_article(
        article_id: pydantic.NonNegativeInt,
        reset: Optional[schemas.ArticleReset] = None,
        local: LocalRequestData = Depends(LocalRequestData)
):
    """
    Delete all lots of the article and return it

    During an active stocktaking the article is marked as checked afterwards.
    """

    return (await _reset_article(article_id, reset, local)).schema


async def _move_article(article_id: int, move_up: bool, local: LocalRequestData) -> Optional[tuple]:
    article = await helpers.return_one(article_id, models.Article, local.session, lock=True)
    moved = positions.swap_move(local.session, article, move_up, local.now, logger)
    if moved is not None:
        local.session.commit()
    return moved


@router.put("/articles/{article_id}/move-up", tags=["Articles"], response_model=schemas.ArticlesV2)
@versioning.versions(2)
async def move_article_up_v2(article_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    moved = await _move_article(article_id, True, local)
    if moved is None:
        raise NotFound(f"Neighbour of Article with ID {article_id}")
    return schemas.ArticlesV2(articles=[a.schema_v2 for a in moved])


@router.put("/articles/{article_id}/move-down", tags=["Articles"], response_model=schemas.ArticlesV2)
@versioning.versions(2)
async def move_article_down_v2(
        article_id: pydantic.NonNegativeInt,
        local: LocalRequestData = Depends(LocalRequestData)
):
    moved = await _move_article(article_id, False, local)
    if moved is None:
        raise NotFound(f"Neighbour of Article with ID {article_id}")
    return schemas.ArticlesV2(articles=[a.schema_v2 for a in moved])


@router.put("/articles/{article_id}/move-up", tags=["Articles"], response_model=schemas.Articles)
@versioning.versions(minimal=3)
async def move_article_up(article_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    """
    Swap the article with the one before it in its category and return both of them
    """

    moved = await _move_article(article_id, True, local)
    if moved is None:
        raise BadRequest("The article is already the first one of its category.")
    return schemas.Articles(articles=[a.schema for a in moved])


@router.put("/articles/{article_id}/move-down", tags=["Articles"], response_model=schemas.Articles)
@versioning.versions(minimal=3)
async def move_article_down(article_id: pydantic.NonNegativeInt, local: LocalRequestData = Depends(LocalRequestData)):
    """
    Swap the article with the one after it in its category and return both of them
    """

    moved = await _move_article(article_id, False, local)
    if moved is None:
        raise BadRequest("The article is already the last one of its category.")
    return schemas.Articles(articles=[a.schema for a in moved])
