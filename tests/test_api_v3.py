"""
Inventory unit tests for the categories, articles, lots, stocktaking and barcodes of the third API version
"""

import unittest as _unittest
from unittest import mock

import requests

from inventory_core import schemas
from inventory_core.misc import gtin
from inventory_core.persistence import models

from . import utils


class CategoryV3Tests(utils.BaseAPITests):
    def _add_category(self, name: str, **kwargs):
        self.assertQuery(("POST", "/categories"), 204, json={"name": name, **kwargs}, r_none=True)

    def _categories(self) -> schemas.Categories:
        return schemas.Categories(**self.assertQuery(("GET", "/categories")).json())

    def test_categories_with_timestamps(self):
        self._add_category("Pantry", timestamp=100)
        self._add_category("Fridge")
        categories = self._categories().categories
        self.assertEqual([(1, "Pantry", 1), (2, "Fridge", 2)], [(c.id, c.name, c.position) for c in categories])
        self.assertEqual(100, categories[0].timestamp)
        self.assertGreater(categories[1].timestamp, 100)
        self.assertEqual(categories[0], schemas.Category(**self.assertQuery(("GET", "/categories/1")).json()))

        def _first() -> tuple:
            category = self._categories().categories[0]
            return category.name, category.timestamp

        self.assertQuery(("PUT", "/categories/1"), 204, json={"name": "Cellar", "timestamp": 99}, r_none=True)
        self.assertEqual(("Pantry", 100), _first())
        self.assertQuery(("PUT", "/categories/1"), 204, json={"name": "Cellar", "timestamp": 100}, r_none=True)
        self.assertEqual(("Cellar", 100), _first())
        self.assertQuery(("PUT", "/categories/1"), 204, json={"name": "Basement"}, r_none=True)
        self.assertGreater(_first()[1], 100)

        self.assertQuery(("POST", "/categories"), 400, json={"name": "Attic", "timestamp": -1})
        self.assertQuery(("PUT", "/categories/3"), 404, json={"name": "Attic"})

    def test_move_categories(self):
        for name in ["A", "B", "C"]:
            self._add_category(name, timestamp=10)

        moved = schemas.Categories(**self.assertQuery(("PUT", "/categories/1/move-down")).json()).categories
        self.assertEqual([(1, 2), (2, 1)], [(c.id, c.position) for c in moved])
        self.assertGreater(moved[0].timestamp, 10)
        self.assertEqual(10, moved[1].timestamp)

        self.assertQuery(("PUT", "/categories/2/move-up"), 400)
        self.assertQuery(("PUT", "/categories/3/move-down"), 400)
        self.assertQuery(("PUT", "/categories/4/move-down"), 404)
        self.assertEqual(["B", "A", "C"], [c.name for c in self._categories().categories])


class ArticleV3Tests(utils.BaseAPITests):
    def setUp(self) -> None:
        super().setUp()
        for name in ["Pantry", "Fridge"]:
            self.assertQuery(("POST", "/categories"), 204, json={"name": name}, r_none=True)

    def _add_article(self, category: int, name: str, **kwargs):
        self.assertQuery(
            ("POST", "/articles"), 204,
            json={"category": category, "name": name, "size": 500, "unit": "g", **kwargs},
            r_none=True
        )

    def _article(self, article_id: int) -> schemas.Article:
        return schemas.Article(**self.assertQuery(("GET", f"/articles/{article_id}")).json())

    def test_create_articles(self):
        self._add_article(
            1, "Pasta",
            gtins=["7610000000001", "7610000000002"],
            lots=[{"best_before": "2030-01", "stock": 2}, {"best_before": "2030-02", "stock": 3, "timestamp": 7}],
            timestamp=100
        )
        self._add_article(1, "Rice")
        self._add_article(2, "Milk")

        article = self._article(1)
        self.assertEqual(
            (1, "Pasta", 500, "g", -1, 1, 100),
            (article.category, article.name, article.size, article.unit,
             article.inventoried, article.position, article.timestamp)
        )
        self.assertEqual(["7610000000001", "7610000000002"], article.gtins)
        self.assertEqual(
            [(1, "2030-01", 2, 1), (1, "2030-02", 3, 2)],
            [(lot.article, lot.best_before, lot.stock, lot.position) for lot in article.lots]
        )
        self.assertEqual(7, article.lots[1].timestamp)
        self.assertEqual(([], []), (self._article(2).gtins, self._article(2).lots))

        articles = schemas.Articles(**self.assertQuery(("GET", "/articles")).json()).articles
        self.assertEqual([("Pasta", 1), ("Rice", 2), ("Milk", 1)], [(a.name, a.position) for a in articles])
        articles = schemas.Articles(**self.assertQuery(("GET", "/categories/2/articles")).json()).articles
        self.assertEqual(["Milk"], [a.name for a in articles])
        self.assertQuery(("GET", "/categories/3/articles"), 404)
        self.assertQuery(("GET", "/articles/4"), 404)

    def test_update_articles(self):
        self._add_article(1, "Pasta", gtins=["1", "2"], lots=[{"best_before": "", "stock": 1}], timestamp=100)
        self._add_article(1, "Rice", timestamp=100)
        self._add_article(2, "Milk", timestamp=100)
        body = {"category": 1, "name": "Spaghetti", "size": 1, "unit": "kg", "gtins": ["2", "3"]}

        self.assertQuery(("PUT", "/articles/1"), 204, json={**body, "timestamp": 50}, r_none=True)
        self.assertEqual(("Pasta", ["1", "2"]), (self._article(1).name, self._article(1).gtins))

        self.assertQuery(("PUT", "/articles/1"), 204, json={**body, "timestamp": 100}, r_none=True)
        article = self._article(1)
        self.assertEqual(("Spaghetti", ["2", "3"], 100), (article.name, article.gtins, article.timestamp))
        self.assertEqual([(1, 1)], [(lot.stock, lot.position) for lot in article.lots])

        lots = [{"best_before": "b", "stock": 4}, {"best_before": "a", "stock": 5, "timestamp": 3}]
        self.assertQuery(("PUT", "/articles/1"), 204, json={**body, "gtins": [], "lots": lots}, r_none=True)
        article = self._article(1)
        self.assertEqual([], article.gtins)
        self.assertEqual([("b", 4, 1), ("a", 5, 2)], [(lot.best_before, lot.stock, lot.position) for lot in article.lots])
        self.assertEqual(3, article.lots[1].timestamp)
        self.assertGreater(article.timestamp, 100)

        self.assertQuery(("PUT", "/articles/1"), 204, json={**body, "lots": []}, r_none=True)
        self.assertEqual([], self._article(1).lots)
        with self.get_db_session() as session:
            self.assertEqual(0, session.query(models.Lot).count())
            self.assertEqual(2, session.query(models.Gtin).count())

    def test_change_category(self):
        for name in ["A", "B", "C"]:
            self._add_article(1, name)
        self._add_article(2, "D")

        self.assertQuery(
            ("PUT", "/articles/1"), 204,
            json={"category": 2, "name": "A", "size": 1, "unit": "kg"},
            r_none=True
        )
        first = schemas.Articles(**self.assertQuery(("GET", "/categories/1/articles")).json()).articles
        second = schemas.Articles(**self.assertQuery(("GET", "/categories/2/articles")).json()).articles
        self.assertEqual([("B", 1), ("C", 2)], [(a.name, a.position) for a in first])
        self.assertEqual([("D", 1), ("A", 2)], [(a.name, a.position) for a in second])
        self.assertQuery(("PUT", "/articles/1"), 404, json={"category": 3, "name": "A", "size": 1, "unit": "kg"})

    def test_move_articles(self):
        for name in ["A", "B"]:
            self._add_article(1, name, timestamp=10)
        self._add_article(2, "C")

        moved = schemas.Articles(**self.assertQuery(("PUT", "/articles/2/move-up")).json()).articles
        self.assertEqual([(2, 1), (1, 2)], [(a.id, a.position) for a in moved])
        self.assertEqual(10, moved[1].timestamp)
        self.assertQuery(("PUT", "/articles/2/move-up"), 400)
        self.assertQuery(("PUT", "/articles/1/move-down"), 400)
        self.assertQuery(("PUT", "/articles/3/move-up"), 400)
        self.assertQuery(("PUT", "/articles/3/move-down"), 400)
        self.assertQuery(("PUT", "/articles/4/move-down"), 404)

    def test_reset_articles(self):
        self._add_article(1, "Pasta", lots=[{"best_before": "", "stock": 1}] * 3, timestamp=100)
        article = schemas.Article(**self.assertQuery(("PUT", "/articles/1/reset"), json={"timestamp": 50}).json())
        self.assertEqual(3, len(article.lots))
        article = schemas.Article(**self.assertQuery(("PUT", "/articles/1/reset"), json={"timestamp": 200}).json())
        self.assertEqual(([], 200, -1), (article.lots, article.timestamp, article.inventoried))
        article = schemas.Article(**self.assertQuery(("PUT", "/articles/1/reset")).json())
        self.assertGreater(article.timestamp, 200)
        self.assertQuery(("PUT", "/articles/2/reset"), 404)
        self.assertQuery(("PUT", "/articles/1/increment"), 404)


class LotTests(utils.BaseAPITests):
    def setUp(self) -> None:
        super().setUp()
        self.assertQuery(("POST", "/categories"), 204, json={"name": "Pantry"}, r_none=True)
        for name in ["Pasta", "Rice"]:
            self.assertQuery(
                ("POST", "/articles"), 204,
                json={"category": 1, "name": name, "size": 1, "unit": "kg"},
                r_none=True
            )

    def _add_lot(self, article: int, best_before: str = "", stock: int = 0, **kwargs):
        self.assertQuery(
            ("POST", "/lots"), 204,
            json={"article": article, "best_before": best_before, "stock": stock, **kwargs},
            r_none=True
        )

    def _lot(self, lot_id: int) -> schemas.Lot:
        return schemas.Lot(**self.assertQuery(("GET", f"/lots/{lot_id}")).json())

    def test_create_and_update_lots(self):
        self._add_lot(1, "2030-01", 3, timestamp=100)
        self._add_lot(1, "2030-02")
        self._add_lot(2, "2031-01", 1)
        lot = self._lot(1)
        self.assertEqual(
            (1, "2030-01", 3, 1, 100),
            (lot.article, lot.best_before, lot.stock, lot.position, lot.timestamp)
        )
        self.assertEqual((1, 2), (self._lot(2).article, self._lot(2).position))
        self.assertEqual((2, 1), (self._lot(3).article, self._lot(3).position))
        self.assertQuery(("GET", "/lots/4"), 404)
        self.assertQuery(("POST", "/lots"), 404, json={"article": 3, "best_before": "", "stock": 0})

        self.assertQuery(("PUT", "/lots/1"), 204, json={"best_before": "x", "stock": 9, "timestamp": 99}, r_none=True)
        self.assertEqual(("2030-01", 3), (self._lot(1).best_before, self._lot(1).stock))
        self.assertQuery(("PUT", "/lots/1"), 204, json={"best_before": "x", "stock": 9, "timestamp": 100}, r_none=True)
        self.assertEqual(("x", 9, 100), (self._lot(1).best_before, self._lot(1).stock, self._lot(1).timestamp))
        self.assertQuery(("PUT", "/lots/1"), 204, json={"best_before": "y", "stock": -4}, r_none=True)
        self.assertEqual(("y", -4), (self._lot(1).best_before, self._lot(1).stock))
        self.assertGreater(self._lot(1).timestamp, 100)
        self.assertQuery(("PUT", "/lots/4"), 404, json={"best_before": "", "stock": 0})

        lots = schemas.Article(**self.assertQuery(("GET", "/articles/1")).json()).lots
        self.assertEqual([1, 2], [lot.id for lot in lots])

    def test_stock_changes(self):
        self._add_lot(1, stock=1, timestamp=10)
        lot = schemas.Lot(**self.assertQuery(("PUT", "/lots/1/increment")).json())
        self.assertEqual(2, lot.stock)
        self.assertGreater(lot.timestamp, 10)
        for _ in range(4):
            lot = schemas.Lot(**self.assertQuery(("PUT", "/lots/1/decrement")).json())
        self.assertEqual(-2, lot.stock)
        self.assertEqual(-2, self._lot(1).stock)
        self.assertQuery(("PUT", "/lots/2/increment"), 404)
        self.assertQuery(("PUT", "/lots/2/decrement"), 404)

    def test_move_lots(self):
        for best_before in ["a", "b", "c"]:
            self._add_lot(1, best_before, timestamp=10)
        self._add_lot(2, "d")

        moved = schemas.Lots(**self.assertQuery(("PUT", "/lots/3/move-up")).json()).lots
        self.assertEqual([(3, 2), (2, 3)], [(lot.id, lot.position) for lot in moved])
        self.assertEqual(10, moved[1].timestamp)
        lots = schemas.Article(**self.assertQuery(("GET", "/articles/1")).json()).lots
        self.assertEqual(["a", "c", "b"], [lot.best_before for lot in lots])

        self.assertQuery(("PUT", "/lots/1/move-up"), 400)
        self.assertQuery(("PUT", "/lots/2/move-down"), 400)
        self.assertQuery(("PUT", "/lots/4/move-up"), 400)
        self.assertQuery(("PUT", "/lots/5/move-up"), 404)


class StocktakingAPITests(utils.BaseAPITests):
    def _status(self) -> str:
        return self.assertQuery(("GET", "/inventories")).json()["status"]

    def _flags(self) -> list:
        return [a["inventoried"] for a in self.assertQuery(("GET", "/articles")).json()["articles"]]

    def test_stocktaking(self):
        self.assertQuery(("POST", "/categories"), 204, json={"name": "Pantry"}, r_none=True)
        article = {"category": 1, "name": "Pasta", "size": 1, "unit": "kg"}
        for _ in range(3):
            self.assertQuery(("POST", "/articles"), 204, json=article, r_none=True)

        self.assertEqual("inactive", self._status())
        self.assertEqual([-1, -1, -1], self._flags())
        self.assertQuery(("POST", "/inventories/stop"), 400)

        self.assertQuery(("POST", "/inventories/start"), 204, r_none=True)
        self.assertEqual("active", self._status())
        self.assertEqual([0, 0, 0], self._flags())
        self.assertQuery(("POST", "/inventories/start"), 400)

        self.assertQuery(("PUT", "/articles/2"), 204, json=article, r_none=True)
        self.assertQuery(("PUT", "/articles/3/reset"))
        self.assertQuery(("POST", "/articles"), 204, json=article, r_none=True)
        self.assertEqual([0, 1, 1, 1], self._flags())
        self.assertQuery(("PUT", "/articles/1/move-down"))
        self.assertQuery(("POST", "/lots"), 204, json={"article": 1, "best_before": "", "stock": 1}, r_none=True)
        self.assertEqual(0, self.assertQuery(("GET", "/articles/1")).json()["inventoried"])

        self.assertQuery(("POST", "/inventories/stop"), 204, r_none=True)
        self.assertEqual("inactive", self._status())
        self.assertEqual([-1, -1, -1, -1], self._flags())
        self.assertQuery(("POST", "/inventories/stop"), 400)

        with self.get_db_session() as session:
            inventory = session.query(models.InventorySession).one()
            self.assertFalse(inventory.active)
            self.assertGreaterEqual(inventory.stop, inventory.start)

        self.assertQuery(("POST", "/inventories/start"), 204, r_none=True)
        with self.get_db_session() as session:
            self.assertEqual(2, session.query(models.InventorySession).count())


class GtinTests(utils.BaseAPITests):
    def setUp(self) -> None:
        super().setUp()
        self.assertQuery(("POST", "/categories"), 204, json={"name": "Pantry"}, r_none=True)
        for name, gtins in [("Milk", ["7610000000001"]), ("Butter", ["42"]), ("Cream", ["42"])]:
            self.assertQuery(
                ("POST", "/articles"), 204,
                json={"category": 1, "name": name, "size": 1, "unit": "l", "gtins": gtins},
                r_none=True
            )

    def test_existing_article(self):
        with mock.patch.object(gtin.OpenFoodFactsClient, "fetch_product") as fetch:
            self.assertEqual(
                {"type": "existing", "articleId": 1},
                self.assertQuery(("GET", "/gtin/7610000000001")).json()
            )
            fetch.assert_not_called()

    def test_food_database(self):
        with mock.patch.object(gtin.OpenFoodFactsClient, "fetch_product") as fetch:
            fetch.return_value = {"status": 1, "product": {"product_name_de": "Rahm", "quantity": "2 dl"}}
            self.assertEqual(
                {"type": "found", "name": "Rahm", "quantity": "2 dl"},
                self.assertQuery(("GET", "/gtin/42")).json()
            )
            fetch.assert_called_once_with("42", "ch")

            fetch.reset_mock()
            fetch.return_value = {"status": 0}
            self.assertEqual({"type": "notFound"}, self.assertQuery(("GET", "/gtin/1234")).json())
            self.assertEqual(2, fetch.call_count)

            fetch.side_effect = requests.Timeout("timed out")
            self.assertEqual(
                {"type": "error", "error": "timed out"},
                self.assertQuery(("GET", "/gtin/1234")).json()
            )

    def test_authentication(self):
        self.assertQuery(("GET", "/gtin/42"), 401, no_auth=True)


if __name__ == '__main__':
    _unittest.main()
