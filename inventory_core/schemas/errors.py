"""
Inventory error schemas
"""

from typing import Optional

import pydantic


class APIError(pydantic.BaseModel):
    """
    Body of every failed response of the API

    Error handlers turn exceptions raised while handling a request into
    this model. Unhandled crashes produce it with status 500 as well.
    ``status`` repeats the HTTP status code, ``method`` and ``request``
    name the failed request (path only), ``repeat`` tells clients
    whether sending the same request again could succeed. ``message``
    is short enough to show in a GUI, ``details`` is meant for debugging.
    """

    error: bool = True
    status: Optional[pydantic.NonNegativeInt] = None
    method: pydantic.constr(max_length=255)
    request: str
    repeat: bool
    message: str
    details: str
