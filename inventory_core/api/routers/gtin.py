"""
Inventory router module for /gtin requests looking up barcodes
"""

import logging

import pydantic
from fastapi import Depends

from ._router import router
from ..dependency import LocalRequestData
from .. import versioning
from ...misc import gtin
from ... import schemas


logger = logging.getLogger(__name__)


@router.get(
    "/gtin/{code}",
    tags=["GTIN"],
    response_model=schemas.GtinResult,
    response_model_exclude_none=True
)
@versioning.versions(minimal=3)
def lookup_gtin(
        code: pydantic.constr(min_length=1, max_length=255),
        local: LocalRequestData = Depends(LocalRequestData)
):
    """
    Look up the barcode among the articles and in the food databases

    If exactly one article carries the barcode, its ID is returned as
    `articleId` with the type `existing`. Otherwise the product is searched
    at Open Food Facts, which yields `found`, `notFound` or `error`. Failed
    lookups at Open Food Facts don't produce error responses, but a result
    of type `error`. This operation blocks while waiting for Open Food Facts,
    so it's executed in the thread pool.
    """

    client = gtin.OpenFoodFactsClient(local.config.gtin, logger=logger)
    return gtin.lookup(local.session, code, client)
