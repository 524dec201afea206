"""
Inventory library to create and change lots of articles
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from . import positions, timestamps
from .logger import enforce_logger
from ..persistence import models


def create_lot(
        session: Session,
        article: models.Article,
        best_before: str,
        stock: int,
        timestamp: Optional[int],
        now: int,
        logger: Optional[logging.Logger] = None
) -> models.Lot:
    """
    Append a new lot to the end of the lots of an article

    :param session: SQLAlchemy session used to perform database operations
    :param article: the article the lot belongs to
    :param best_before: best-before date of the lot (free text, may be empty)
    :param stock: initial stock of the lot
    :param timestamp: optional timestamp supplied by the client
    :param now: server time of the request
    :param logger: logger that should be used for INFO messages
    :return: the newly created and committed Lot object
    """

    logger = enforce_logger(logger)
    lot = models.Lot(
        article_id=article.id,
        best_before=best_before,
        stock=stock,
        position=positions.next_position(session, positions.Scope(models.Lot, article_id=article.id)),
        timestamp=timestamps.creation_timestamp(timestamp, now)
    )
    session.add(lot)
    session.commit()
    logger.info(f"Created new lot {lot}")
    return lot


def update_lot(
        session: Session,
        lot: models.Lot,
        best_before: str,
        stock: int,
        timestamp: Optional[int],
        now: int,
        logger: Optional[logging.Logger] = None
) -> bool:
    """
    Overwrite the best-before date and stock of a lot unless the change is outdated

    :return: whether the change has been accepted and committed
    """

    logger = enforce_logger(logger)
    resolved = timestamps.resolve_timestamp(lot.timestamp, timestamp, now)
    if resolved is None:
        logger.info(f"Dropped outdated change of {lot} (timestamp {timestamp} < {lot.timestamp})")
        return False

    lot.best_before = best_before
    lot.stock = stock
    lot.timestamp = resolved
    session.add(lot)
    session.commit()
    return True


def apply_delta(session: Session, lot_id: int, delta: int, now: int) -> int:
    """
    Add the delta to the stock of a lot in the database without reading it first

    The new stock is computed by the database itself, so concurrent
    changes of the same lot can't get lost. The stock is not clamped
    and may become negative. The session is not committed.

    :return: number of changed lots (zero if there's no such lot)
    """

    return session.query(models.Lot).filter(models.Lot.id == lot_id).update(
        {models.Lot.stock: models.Lot.stock + delta, models.Lot.timestamp: now},
        synchronize_session=False
    )


def change_stock(
        session: Session,
        lot_id: int,
        delta: int,
        now: int,
        logger: Optional[logging.Logger] = None
) -> Optional[models.Lot]:
    """
    Atomically increment or decrement the stock of a lot

    :param session: SQLAlchemy session used to perform database operations
    :param lot_id: ID of the lot whose stock should be changed
    :param delta: signed amount to add to the current stock
    :param now: server time of the request, which becomes the lot's timestamp
    :param logger: logger that should be used for DEBUG messages
    :return: the updated Lot object or None if there's no such lot
    """

    logger = enforce_logger(logger)
    if apply_delta(session, lot_id, delta, now) == 0:
        session.rollback()
        return None
    session.commit()
    lot = session.get(models.Lot, lot_id)
    logger.debug(f"Changed stock of {lot} by {delta}")
    return lot
