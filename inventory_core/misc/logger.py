"""
Inventory library containing logging helper functionality
"""

import time
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..persistence import models


MAX_CONTENT_LENGTH: int = 2048


def enforce_logger(logger: Optional[logging.Logger] = None) -> logging.Logger:
    """
    Enforce availability of a working logger
    """

    if logger is not None and isinstance(logger, logging.Logger):
        return logger
    elif logger is not None:
        raise TypeError(f"Expected 'logging.Logger', got {type(logger)}")
    log = logging.getLogger(__name__)
    log.warning("No logger specified for function call; using defaults.")
    return log


class NoDebugFilter(logging.Filter):
    """
    Drop DEBUG records of the named logger (and its children), e.g. the chatty ``urllib3``
    """

    def filter(self, record: logging.LogRecord) -> int:
        if super().filter(record):
            return record.levelno > logging.DEBUG
        return True


def record_request(
        session: Session,
        log_type: str,
        content: str,
        client_name: Optional[str] = None,
        client_ip: Optional[str] = None,
        user_agent: Optional[str] = None
) -> models.RequestLog:
    """
    Store one entry in the request log table of the database

    :param session: SQLAlchemy session used to perform database operations
    :param log_type: short type of the entry, e.g. ``response`` or ``exception``
    :param content: free text of the entry, which gets truncated to fit the table
    :param client_name: name of the authenticated client, if any
    :param client_ip: remote address of the request, if known
    :param user_agent: value of the ``User-Agent`` request header, if any
    :return: the newly created and committed RequestLog object
    :raises sqlalchemy.exc.DBAPIError: in case committing to the database fails
    """

    entry = models.RequestLog(
        timestamp=int(time.time()),
        type=log_type,
        content=content[:MAX_CONTENT_LENGTH],
        client_name=client_name,
        client_ip=client_ip,
        user_agent=user_agent and user_agent[:1024]
    )
    session.add(entry)
    session.commit()
    return entry
