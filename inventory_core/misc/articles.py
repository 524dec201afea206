"""
Inventory library to create and change articles with their lots and barcodes

The legacy API versions don't know about lots. They see the total stock
of all lots and the best-before date of the first lot, which is why the
helpers to write such flat values are collected here as well.
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from . import inventories, lots, positions, timestamps
from .logger import enforce_logger
from .. import schemas
from ..persistence import models


def flat_lots(best_before: str, stock: int) -> List[schemas.LotEntry]:
    """
    Convert the flat stock of the legacy API versions into a list of lots
    """

    if not best_before and not stock:
        return []
    return [schemas.LotEntry(best_before=best_before, stock=stock)]


def set_gtins(article: models.Article, gtins: Iterable[str]):
    """
    Replace the barcodes of an article, keeping entries that are still wanted
    """

    wanted = list(dict.fromkeys(gtins))
    for entry in list(article.gtin_entries):
        if entry.gtin not in wanted:
            article.gtin_entries.remove(entry)
    present = set(article.gtins)
    for gtin in wanted:
        if gtin not in present:
            article.gtin_entries.append(models.Gtin(gtin=gtin))


def replace_lots(article: models.Article, entries: Iterable[schemas.LotEntry], now: int):
    """
    Replace the whole set of lots of an article, keeping the order of the entries
    """

    article.lots.clear()
    for position, entry in enumerate(entries, start=1):
        article.lots.append(models.Lot(
            best_before=entry.best_before,
            stock=entry.stock,
            position=position,
            timestamp=timestamps.creation_timestamp(entry.timestamp, now)
        ))


def create_article(
        session: Session,
        category: models.Category,
        name: str,
        size: float,
        unit: str,
        now: int,
        gtins: Iterable[str] = (),
        lot_entries: Optional[Iterable[schemas.LotEntry]] = None,
        timestamp: Optional[int] = None,
        logger: Optional[logging.Logger] = None
) -> models.Article:
    """
    Append a new article to the end of the articles of a category

    :param session: SQLAlchemy session used to perform database operations
    :param category: the category the article belongs to
    :param name: name of the article
    :param size: size of one piece of the article in its unit
    :param unit: unit of the size, e.g. ``g`` or ``ml``
    :param now: server time of the request
    :param gtins: barcodes of the article
    :param lot_entries: initial lots of the article, which get the positions ``1..k``
    :param timestamp: optional timestamp supplied by the client
    :param logger: logger that should be used for INFO messages
    :return: the newly created and committed Article object
    """

    logger = enforce_logger(logger)
    article = models.Article(
        category_id=category.id,
        name=name,
        size=size,
        unit=unit,
        inventoried=inventories.inventoried_status(session),
        position=positions.next_position(session, positions.Scope(models.Article, category_id=category.id)),
        timestamp=timestamps.creation_timestamp(timestamp, now)
    )
    set_gtins(article, gtins)
    replace_lots(article, lot_entries or [], now)
    session.add(article)
    session.commit()
    logger.info(f"Created new article {article} with {len(article.lots)} lots")
    return article


def update_article(
        session: Session,
        article: models.Article,
        category: models.Category,
        name: str,
        size: float,
        unit: str,
        now: int,
        gtins: Optional[Iterable[str]] = None,
        lot_entries: Optional[Iterable[schemas.LotEntry]] = None,
        timestamp: Optional[int] = None,
        logger: Optional[logging.Logger] = None
) -> bool:
    """
    Overwrite an article unless the change is based on an outdated version of it

    Changing the category moves the article to the end of the new category
    and closes the gap in its old category. Barcodes and lots are only
    replaced when they are given. The stocktaking flag is set according
    to the current stocktaking state, since the article has been touched.

    :return: whether the change has been accepted and committed
    """

    logger = enforce_logger(logger)
    resolved = timestamps.resolve_timestamp(article.timestamp, timestamp, now)
    if resolved is None:
        logger.info(f"Dropped outdated change of {article} (timestamp {timestamp} < {article.timestamp})")
        return False

    if category.id != article.category_id:
        logger.debug(f"Moving {article} to {category}")
        positions.relocate(session, article, positions.Scope(models.Article, category_id=category.id))

    article.name = name
    article.size = size
    article.unit = unit
    article.inventoried = inventories.inventoried_status(session)
    article.timestamp = resolved
    if gtins is not None:
        set_gtins(article, gtins)
    if lot_entries is not None:
        positions.lock_scope(session, positions.Scope(models.Lot, article_id=article.id))
        replace_lots(article, lot_entries, now)
    session.add(article)
    session.commit()
    return True


def reset_article(
        session: Session,
        article: models.Article,
        now: int,
        timestamp: Optional[int] = None,
        logger: Optional[logging.Logger] = None
) -> bool:
    """
    Delete all lots of an article and mark it according to the stocktaking state

    :return: whether the reset has been accepted and committed
    """

    logger = enforce_logger(logger)
    resolved = timestamps.resolve_timestamp(article.timestamp, timestamp, now)
    if resolved is None:
        logger.info(f"Dropped outdated reset of {article} (timestamp {timestamp} < {article.timestamp})")
        return False

    positions.lock_scope(session, positions.Scope(models.Lot, article_id=article.id))
    article.lots.clear()
    article.inventoried = inventories.inventoried_status(session)
    article.timestamp = resolved
    session.add(article)
    session.commit()
    logger.debug(f"Reset {article}")
    return True


def shift_stock(
        session: Session,
        article: models.Article,
        delta: int,
        now: int,
        logger: Optional[logging.Logger] = None
) -> models.Article:
    """
    Change the flat stock of an article by changing the stock of its first lot

    A new lot without best-before date is created when the article has no lots.
    """

    logger = enforce_logger(logger)
    scope = positions.Scope(models.Lot, article_id=article.id)
    positions.lock_scope(session, scope)
    first = scope.query(session).order_by(models.Lot.position).first()

    if first is None:
        session.add(models.Lot(
            article_id=article.id,
            best_before="",
            stock=delta,
            position=positions.next_position(session, scope),
            timestamp=now
        ))
    else:
        lots.apply_delta(session, first.id, delta, now)
    article.timestamp = now
    session.add(article)
    session.commit()
    logger.debug(f"Changed flat stock of {article} by {delta}")
    return article


def clear_stock(session: Session, article: models.Article, now: int) -> models.Article:
    """
    Set the stock of all lots of an article to zero while keeping the lots themselves
    """

    session.query(models.Lot).filter(models.Lot.article_id == article.id).update(
        {models.Lot.stock: 0, models.Lot.timestamp: now},
        synchronize_session=False
    )
    article.timestamp = now
    session.add(article)
    session.commit()
    return article
