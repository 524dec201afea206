"""
Inventory schemas for the legacy API versions

Version 1 only knew a flat list of items, version 2 added categories
but still stored the stock and best-before date on the article itself.
Both shapes are projections of the current articles: the stock is the
sum of all lots and the best-before date is the one of the first lot.
"""

from typing import List, Optional

import pydantic


class Item(pydantic.BaseModel):
    id: pydantic.NonNegativeInt
    name: pydantic.constr(max_length=255)
    size: float
    unit: pydantic.constr(max_length=255)
    best_before: str
    stock: int
    position: pydantic.PositiveInt


class ItemPayload(pydantic.BaseModel):
    """
    Payload of created or updated items where empty fields fall back to placeholders
    """

    name: Optional[pydantic.constr(max_length=255)] = None
    size: Optional[float] = None
    unit: Optional[pydantic.constr(max_length=255)] = None
    best_before: Optional[str] = None
    stock: Optional[int] = None


class Items(pydantic.BaseModel):
    items: List[Item]


class CategoryV2(pydantic.BaseModel):
    id: pydantic.NonNegativeInt
    name: pydantic.constr(max_length=255)
    position: pydantic.PositiveInt


class CategoryV2Body(pydantic.BaseModel):
    name: pydantic.constr(max_length=255)


class CategoriesV2(pydantic.BaseModel):
    categories: List[CategoryV2]


class ArticleV2(pydantic.BaseModel):
    id: pydantic.NonNegativeInt
    category: pydantic.NonNegativeInt
    name: pydantic.constr(max_length=255)
    size: float
    unit: pydantic.constr(max_length=255)
    best_before: str
    stock: int
    position: pydantic.PositiveInt
    timestamp: pydantic.NonNegativeInt


class ArticleV2Body(pydantic.BaseModel):
    category: pydantic.NonNegativeInt
    name: pydantic.constr(max_length=255)
    size: float
    unit: pydantic.constr(max_length=255)
    best_before: str
    stock: int
    timestamp: Optional[pydantic.NonNegativeInt] = None


class ArticlesV2(pydantic.BaseModel):
    articles: List[ArticleV2]
