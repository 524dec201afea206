"""
Inventory core unit tests
"""

import unittest
from .test_api import APITests
from .test_api_v1 import ItemAPITests
from .test_api_v2 import CategoryAndArticleV2Tests
from .test_api_v3 import ArticleV3Tests, CategoryV3Tests, GtinTests, LotTests, StocktakingAPITests
from .test_cli import StandaloneCLITests, TablePrintingTests
from .test_gtin import ArticleLookupTests, OpenFoodFactsClientTests
from .test_misc import ArticleHandlerTests, CategoryHandlerTests, InventoryTests, LotHandlerTests
from .test_positions import ConcurrentPositionTests, PositionTests, TimestampTests
from .test_versioning import VersioningTests


TEST_CLASSES = [
    APITests,
    ArticleHandlerTests,
    ArticleLookupTests,
    ArticleV3Tests,
    CategoryAndArticleV2Tests,
    CategoryHandlerTests,
    CategoryV3Tests,
    ConcurrentPositionTests,
    GtinTests,
    InventoryTests,
    ItemAPITests,
    LotHandlerTests,
    LotTests,
    OpenFoodFactsClientTests,
    PositionTests,
    StocktakingAPITests,
    StandaloneCLITests,
    TablePrintingTests,
    TimestampTests,
    VersioningTests,
]


def get_suite() -> unittest.TestSuite:
    suite = unittest.TestSuite()
    for cls in TEST_CLASSES:
        for fixture in filter(lambda f: f.startswith("test_"), dir(cls)):
            suite.addTest(cls(fixture))
    return suite
