"""
Inventory router module for the health check of every API version
"""

import pydantic
from fastapi import Depends

from ._router import router
from ..dependency import MinimalRequestData
from .. import versioning


@router.get("/health", tags=["Generic"], response_model=pydantic.BaseModel)
@versioning.versions(minimal=1)
async def check_health(_: MinimalRequestData = Depends(MinimalRequestData)):
    """
    Answer with an empty object, which requires a working database session but no token
    """

    return {}
