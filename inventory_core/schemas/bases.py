"""
Inventory schemas for the base system

This module contains schemas for categories, articles and
their lots in the shape used by the latest API version.
All entities carry a `position` inside their scope and a
`timestamp` (seconds since the epoch) of their last change.
"""

from typing import List, Optional

import pydantic


class Category(pydantic.BaseModel):
    id: pydantic.NonNegativeInt
    name: pydantic.constr(max_length=255)
    position: pydantic.PositiveInt
    timestamp: pydantic.NonNegativeInt


class CategoryCreation(pydantic.BaseModel):
    name: pydantic.constr(max_length=255)
    timestamp: Optional[pydantic.NonNegativeInt] = None


class CategoryUpdate(pydantic.BaseModel):
    name: pydantic.constr(max_length=255)
    timestamp: Optional[pydantic.NonNegativeInt] = None


class Lot(pydantic.BaseModel):
    id: pydantic.NonNegativeInt
    article: pydantic.NonNegativeInt
    best_before: pydantic.constr(max_length=255)
    stock: int
    position: pydantic.PositiveInt
    timestamp: pydantic.NonNegativeInt


class LotEntry(pydantic.BaseModel):
    """
    Lot as part of an article payload (the article is given by the enclosing object)
    """

    best_before: pydantic.constr(max_length=255)
    stock: int
    timestamp: Optional[pydantic.NonNegativeInt] = None


class LotCreation(pydantic.BaseModel):
    article: pydantic.NonNegativeInt
    best_before: pydantic.constr(max_length=255)
    stock: int
    timestamp: Optional[pydantic.NonNegativeInt] = None


class LotUpdate(pydantic.BaseModel):
    best_before: pydantic.constr(max_length=255)
    stock: int
    timestamp: Optional[pydantic.NonNegativeInt] = None


class Article(pydantic.BaseModel):
    id: pydantic.NonNegativeInt
    category: pydantic.NonNegativeInt
    name: pydantic.constr(max_length=255)
    size: float
    unit: pydantic.constr(max_length=255)
    gtins: List[pydantic.constr(max_length=255)]
    inventoried: pydantic.conint(ge=-1, le=1)
    position: pydantic.PositiveInt
    timestamp: pydantic.NonNegativeInt
    lots: List[Lot]


class ArticleCreation(pydantic.BaseModel):
    category: pydantic.NonNegativeInt
    name: pydantic.constr(max_length=255)
    size: float
    unit: pydantic.constr(max_length=255)
    gtins: List[pydantic.constr(max_length=255)] = []
    lots: Optional[List[LotEntry]] = None
    timestamp: Optional[pydantic.NonNegativeInt] = None


class ArticleUpdate(pydantic.BaseModel):
    category: pydantic.NonNegativeInt
    name: pydantic.constr(max_length=255)
    size: float
    unit: pydantic.constr(max_length=255)
    gtins: List[pydantic.constr(max_length=255)] = []
    lots: Optional[List[LotEntry]] = None
    """Replacement for the whole set of lots of the article (lots are kept if omitted)"""
    timestamp: Optional[pydantic.NonNegativeInt] = None


class ArticleReset(pydantic.BaseModel):
    timestamp: Optional[pydantic.NonNegativeInt] = None
