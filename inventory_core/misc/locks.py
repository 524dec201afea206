"""
Inventory library to serialize concurrent writers of the same resource

A plain ``SELECT ... FOR UPDATE`` doesn't lock anything in sqlite and can't
lock rows that don't exist yet. The functions here therefore lock by
updating a row without changing it. This takes a row lock in database
servers and the write lock of the whole database in sqlite. The lock is
held until the transaction of the session ends by commit or rollback.
"""

import logging
from typing import Type

from sqlalchemy.orm import Session

from ..persistence import models


logger = logging.getLogger(__name__)


def lock_record(session: Session, model: Type[models.Base], object_id: int) -> bool:
    """
    Lock the row of one record until the end of the transaction

    :return: whether the record exists
    """

    return session.query(model).filter(model.id == object_id).update(
        {model.id: model.id},
        synchronize_session=False
    ) == 1


def acquire_lock(session: Session, name: str):
    """
    Lock the row of the named lock until the end of the transaction

    The rows of all known locks are created together with their table.
    A missing row gets created here, which doesn't block other writers
    of this transaction, but of all following ones.
    """

    updated = session.query(models.Lock).filter(models.Lock.name == name).update(
        {models.Lock.name: models.Lock.name},
        synchronize_session=False
    )
    if not updated:
        logger.warning(f"Creating the missing row of the lock {name!r}")
        session.add(models.Lock(name=name))
        session.flush()
