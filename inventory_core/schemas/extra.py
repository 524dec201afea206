"""
Inventory extra schemas

This module contains the collection wrappers of the responses,
the stocktaking status, barcode lookup results and version info.
"""

import enum
from typing import List, Optional

import pydantic

from .bases import Article, Category, Lot


class Versions(pydantic.BaseModel):
    class Version(pydantic.BaseModel):
        version: pydantic.PositiveInt
        prefix: pydantic.constr(min_length=2)

    latest: pydantic.PositiveInt
    versions: List[Version]


class Categories(pydantic.BaseModel):
    categories: List[Category]


class Articles(pydantic.BaseModel):
    articles: List[Article]


class Lots(pydantic.BaseModel):
    lots: List[Lot]


@enum.unique
class InventoryState(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class InventoryStatus(pydantic.BaseModel):
    status: InventoryState


@enum.unique
class GtinResultType(str, enum.Enum):
    EXISTING = "existing"
    FOUND = "found"
    NOT_FOUND = "notFound"
    ERROR = "error"


class GtinResult(pydantic.BaseModel):
    """
    Result of a barcode lookup, either a known article or a product of the food database
    """

    model_config = pydantic.ConfigDict(populate_by_name=True)

    type: GtinResultType
    article_id: Optional[pydantic.NonNegativeInt] = pydantic.Field(default=None, alias="articleId")
    name: Optional[str] = None
    quantity: Optional[str] = None
    error: Optional[str] = None


class Token(pydantic.BaseModel):
    id: pydantic.NonNegativeInt
    name: pydantic.constr(max_length=255)
    active: bool
