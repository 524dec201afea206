"""
Generic helper library for the core REST API
"""

from typing import List, Type

import sqlalchemy.orm
from fastapi.responses import Response

from .base import NotFound
from ..misc import positions
from ..persistence import models


NO_CONTENT_RESPONSE = 204


async def return_one(
        object_id: int,
        model: Type[models.Base],
        session: sqlalchemy.orm.Session,
        lock: bool = False
) -> models.Base:
    """
    Return the object of a given model that's identified by its object ID

    :param object_id: internal ID (primary key in the database) of the model
    :param model: class of a SQLAlchemy model
    :param session: database session which should be used to perform the query
    :param lock: whether the row of the object should be locked until the end of the transaction
    :return: resulting entity as SQLAlchemy model
    :raises NotFound: when the specified object ID returned no result
    """

    if lock:
        obj = positions.fetch_for_update(session, model, object_id)
    else:
        obj = session.get(model, object_id)
    if obj is None:
        raise NotFound(f"{model.__name__} with ID {object_id!r}")
    return obj


def get_ordered(model: Type[models.Base], session: sqlalchemy.orm.Session, **kwargs) -> List[models.Base]:
    """
    Return all objects of a model that equal all kwargs, ordered by their scope and position
    """

    query = session.query(model).filter_by(**kwargs)
    order = [getattr(model, key) for key in model.scope_keys] + [model.position]
    return query.order_by(*order).all()


def no_content() -> Response:
    """
    Return an empty response, used for accepted writes as well as silently dropped outdated writes
    """

    return Response(status_code=NO_CONTENT_RESPONSE)
