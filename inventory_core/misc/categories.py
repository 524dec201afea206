"""
Inventory library to create and change categories
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from . import positions, timestamps
from .logger import enforce_logger
from ..persistence import models


DEFAULT_CATEGORY_NAME: str = "Inventory"


def create_category(
        session: Session,
        name: str,
        timestamp: Optional[int],
        now: int,
        logger: Optional[logging.Logger] = None
) -> models.Category:
    """
    Append a new category to the end of the list of categories

    :param session: SQLAlchemy session used to perform database operations
    :param name: name of the new category
    :param timestamp: optional timestamp supplied by the client
    :param now: server time of the request
    :param logger: logger that should be used for INFO messages
    :return: the newly created and committed Category object
    """

    logger = enforce_logger(logger)
    category = models.Category(
        name=name,
        position=positions.next_position(session, positions.Scope(models.Category)),
        timestamp=timestamps.creation_timestamp(timestamp, now)
    )
    session.add(category)
    session.commit()
    logger.info(f"Created new category {category}")
    return category


def update_category(
        session: Session,
        category: models.Category,
        name: str,
        timestamp: Optional[int],
        now: int,
        logger: Optional[logging.Logger] = None
) -> bool:
    """
    Rename a category unless the change is based on an outdated version of it

    :return: whether the change has been accepted and committed
    """

    logger = enforce_logger(logger)
    resolved = timestamps.resolve_timestamp(category.timestamp, timestamp, now)
    if resolved is None:
        logger.info(f"Dropped outdated change of {category} (timestamp {timestamp} < {category.timestamp})")
        return False

    category.name = name
    category.timestamp = resolved
    session.add(category)
    session.commit()
    return True


def get_default_category(session: Session, now: int, logger: Optional[logging.Logger] = None) -> models.Category:
    """
    Return the first category, which gets created if there's none yet

    The flat item list of the first API version has no notion of categories,
    so all of its items are put into this category. The new category is
    only flushed, the caller has to commit it along with the new item.
    Until then, the list of categories stays locked.
    """

    scope = positions.Scope(models.Category)
    positions.lock_scope(session, scope)
    category = session.query(models.Category).order_by(models.Category.position).first()
    if category is not None:
        return category

    enforce_logger(logger).info(f"Creating the default category {DEFAULT_CATEGORY_NAME!r} for new items")
    category = models.Category(
        name=DEFAULT_CATEGORY_NAME,
        position=positions.next_position(session, scope),
        timestamp=now
    )
    session.add(category)
    session.flush()
    return category
