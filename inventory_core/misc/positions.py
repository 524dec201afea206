"""
Inventory library to manage the positions of ordered records

Categories are ordered globally, articles inside their category and lots
inside their article. Such a group of records is called a scope here.
The positions of a scope always form the sequence ``1..n`` without gaps
or duplicates. A model declares its scope by the attribute ``scope_keys``,
which lists the columns that identify the scope of one of its records.

None of the functions in this module commit the session. The caller is
responsible to commit all changes of one operation at once, which also
releases the lock of the scope taken by ``next_position`` or ``swap_move``.
"""

import logging
from typing import Optional, Tuple, Type

import sqlalchemy
from sqlalchemy.orm import Query, Session

from . import locks
from .logger import enforce_logger
from ..persistence import models


SCOPE_PARENTS = {
    models.Article: (models.Category, "category_id"),
    models.Lot: (models.Article, "article_id")
}


class Scope:
    """
    Group of records of one model whose positions are ordered together
    """

    def __init__(self, model: Type[models.Base], **criteria):
        missing = set(model.scope_keys).symmetric_difference(criteria)
        if missing:
            raise ValueError(f"Invalid scope criteria for {model.__name__}: {', '.join(sorted(missing))}")
        self.model = model
        self.criteria = criteria

    @classmethod
    def of(cls, obj: models.Base) -> "Scope":
        """
        Return the scope the given record currently belongs to
        """

        return cls(type(obj), **{key: getattr(obj, key) for key in type(obj).scope_keys})

    @property
    def conditions(self) -> list:
        return [getattr(self.model, key) == value for key, value in self.criteria.items()]

    def query(self, session: Session) -> Query:
        return session.query(self.model).filter(*self.conditions)

    def __eq__(self, other) -> bool:
        return isinstance(other, Scope) and self.model is other.model and self.criteria == other.criteria

    def __repr__(self) -> str:
        return f"Scope({self.model.__name__}, {self.criteria})"


def fetch_for_update(session: Session, model: Type[models.Base], object_id: int) -> Optional[models.Base]:
    """
    Load one record by its ID and lock its row until the end of the transaction
    """

    return session.query(model).filter(model.id == object_id).with_for_update().first()


def lock_scope(session: Session, scope: Scope):
    """
    Block other writers of the scope until the end of the transaction

    Articles and lots are guarded by the row of the category or article
    they belong to, the global list of categories by a named lock.
    """

    parent = SCOPE_PARENTS.get(scope.model)
    if parent is None:
        locks.acquire_lock(session, scope.model.__tablename__)
    else:
        parent_model, key = parent
        locks.lock_record(session, parent_model, scope.criteria[key])


def next_position(session: Session, scope: Scope) -> int:
    """
    Lock the scope and return the position a new record appended to its end gets

    The lock is held until the caller commits the new record, so that
    concurrent appends to the same scope get consecutive positions.

    :param session: SQLAlchemy session used to perform database operations
    :param scope: the scope the new record will belong to
    :return: one higher than the highest position in the scope, or 1 if the scope is empty
    """

    lock_scope(session, scope)
    highest = session.query(sqlalchemy.func.max(scope.model.position)).filter(*scope.conditions).scalar()
    return (highest or 0) + 1


def swap_move(
        session: Session,
        obj: models.Base,
        move_up: bool,
        timestamp: int,
        logger: Optional[logging.Logger] = None
) -> Optional[Tuple[models.Base, models.Base]]:
    """
    Swap the position of a record with its nearest neighbour in the given direction

    Moving up means moving towards lower positions. The moved record gets
    the given timestamp, while the timestamp of the neighbour is kept. The
    scope gets locked and the record reloaded before its neighbour is searched.

    :param session: SQLAlchemy session used to perform database operations
    :param obj: the record that should be moved
    :param move_up: True to swap with the nearest lower position, False for the nearest higher one
    :param timestamp: new timestamp of the moved record
    :param logger: optional logger that should be used for DEBUG messages
    :return: tuple of the moved record and its former neighbour or None if there's no neighbour
    """

    logger = enforce_logger(logger)
    scope = Scope.of(obj)
    lock_scope(session, scope)
    session.refresh(obj, ["position"])
    query = scope.query(session).filter(scope.model.id != obj.id)
    if move_up:
        query = query.filter(scope.model.position < obj.position).order_by(scope.model.position.desc())
    else:
        query = query.filter(scope.model.position > obj.position).order_by(scope.model.position.asc())

    neighbour = query.with_for_update().first()
    if neighbour is None:
        logger.debug(f"{obj} has no neighbour to be swapped with in {scope}")
        return None

    obj.position, neighbour.position = neighbour.position, obj.position
    obj.timestamp = timestamp
    session.add(obj)
    session.add(neighbour)
    logger.debug(f"Swapped positions of {obj} and {neighbour}")
    return obj, neighbour


def close_gap(session: Session, scope: Scope, position: int) -> int:
    """
    Shift every record behind the given position one position forward

    This has to be done whenever a record leaves its scope, e.g. when an
    article is moved to another category, since otherwise the remaining
    positions of the scope would contain a gap.

    :param session: SQLAlchemy session used to perform database operations
    :param scope: the scope the record has been removed from
    :param position: former position of the removed record
    :return: number of records that have been shifted
    """

    return scope.query(session).filter(scope.model.position > position).update(
        {scope.model.position: scope.model.position - 1},
        synchronize_session="fetch"
    )


def relocate(session: Session, obj: models.Base, target: Scope):
    """
    Move a record to the end of another scope and close the gap it leaves behind
    """

    source = Scope.of(obj)
    if source == target:
        return
    # Concurrent relocations lock their scopes in the same order
    for scope in sorted((source, target), key=lambda s: tuple(s.criteria.values())):
        lock_scope(session, scope)
    session.refresh(obj, ["position"])
    position = next_position(session, target)
    close_gap(session, source, obj.position)
    for key, value in target.criteria.items():
        setattr(obj, key, value)
    obj.position = position
    session.add(obj)
