"""
Inventory library to handle stocktaking sessions

While a stocktaking session is active, every article carries a flag
whether it has been checked yet. Starting a session marks all articles
as unchecked (``0``), stopping it marks them as not applicable (``-1``).
Each article that gets created, updated or reset during an active
session is considered checked (``1``).
"""

import logging
from typing import Optional

import sqlalchemy.exc
from sqlalchemy.orm import Session

from . import locks
from .logger import enforce_logger
from ..persistence import models


LOCK_NAME = "inventories"

UNCHECKED: int = 0
CHECKED: int = 1
NOT_APPLICABLE: int = -1


class InventoryStateError(ValueError):
    """
    Exception raised when starting an active or stopping an inactive stocktaking session
    """


def get_active(session: Session) -> Optional[models.InventorySession]:
    return session.query(models.InventorySession).filter(models.InventorySession.stop.is_(None)).first()


def is_active(session: Session) -> bool:
    return get_active(session) is not None


def inventoried_status(session: Session) -> int:
    """
    Return the stocktaking flag a written article should get in the current state
    """

    return CHECKED if is_active(session) else NOT_APPLICABLE


def start(session: Session, timestamp: int, logger: Optional[logging.Logger] = None) -> models.InventorySession:
    """
    Start a new stocktaking session and mark all articles as unchecked

    Concurrent calls are serialized by the stocktaking lock. The unique
    ``running`` column additionally rejects a second active session in
    the database itself.

    :param session: SQLAlchemy session used to perform database operations
    :param timestamp: start time of the stocktaking session
    :param logger: logger that should be used for INFO messages
    :return: the newly created and committed stocktaking session
    :raises InventoryStateError: when another stocktaking session is still active
    """

    logger = enforce_logger(logger)
    locks.acquire_lock(session, LOCK_NAME)
    if is_active(session):
        session.rollback()
        raise InventoryStateError("A stocktaking session is already active.")

    count = session.query(models.Article).update(
        {models.Article.inventoried: UNCHECKED},
        synchronize_session=False
    )
    inventory = models.InventorySession(start=timestamp, running=True)
    session.add(inventory)
    try:
        session.commit()
    except sqlalchemy.exc.IntegrityError as exc:
        session.rollback()
        raise InventoryStateError("A stocktaking session is already active.") from exc
    logger.info(f"Started stocktaking session {inventory.id} covering {count} articles")
    return inventory


def stop(session: Session, timestamp: int, logger: Optional[logging.Logger] = None) -> models.InventorySession:
    """
    Stop the active stocktaking session and clear the flags of all articles

    The session is only stopped if it's still active in the database,
    so two concurrent calls can't both stop the same session.

    :param session: SQLAlchemy session used to perform database operations
    :param timestamp: stop time of the stocktaking session
    :param logger: logger that should be used for INFO messages
    :return: the stopped and committed stocktaking session
    :raises InventoryStateError: when no stocktaking session is active
    """

    logger = enforce_logger(logger)
    locks.acquire_lock(session, LOCK_NAME)
    inventory = get_active(session)
    if inventory is None:
        session.rollback()
        raise InventoryStateError("No stocktaking session is active.")

    stopped = session.query(models.InventorySession).filter(
        models.InventorySession.id == inventory.id,
        models.InventorySession.stop.is_(None)
    ).update(
        {models.InventorySession.stop: max(timestamp, inventory.start), models.InventorySession.running: None},
        synchronize_session=False
    )
    if stopped != 1:
        session.rollback()
        raise InventoryStateError("No stocktaking session is active.")

    unchecked = session.query(models.Article).filter_by(inventoried=UNCHECKED).count()
    session.query(models.Article).update(
        {models.Article.inventoried: NOT_APPLICABLE},
        synchronize_session=False
    )
    session.commit()
    logger.info(f"Stopped stocktaking session {inventory.id} with {unchecked} unchecked articles left")
    return inventory
