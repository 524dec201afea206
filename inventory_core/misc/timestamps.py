"""
Inventory library for the timestamps of the last change of records

Every category, article and lot carries the time of its last accepted change
as seconds since the epoch. Clients send the timestamp of the version they
edited along with their changes. A change based on an older version than the
stored one is silently dropped, which allows offline clients to replay their
queued changes without overwriting newer data of other clients.
"""

import time
from typing import Optional


def now() -> int:
    """
    Return the current time as whole seconds since the epoch
    """

    return int(time.time())


def resolve_timestamp(stored: int, client: Optional[int], current: int) -> Optional[int]:
    """
    Determine the timestamp a write should store, or None if the write must be dropped

    :param stored: timestamp of the record as currently found in the database
    :param client: timestamp supplied by the client along its change, if any
    :param current: server time of the request
    :return: the current time if the client didn't supply a timestamp, the client's
        timestamp if it's not older than the stored one or None for stale writes
    """

    if client is None:
        return current
    if client < stored:
        return None
    return client


def creation_timestamp(client: Optional[int], current: int) -> int:
    """
    Determine the timestamp of a new record (there's nothing to be stale against)
    """

    return current if client is None else client
