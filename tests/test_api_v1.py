"""
Inventory unit tests for the flat item list of the first API version
"""

import unittest as _unittest

from inventory_core.misc import categories
from inventory_core.persistence import models

from . import utils


class ItemAPITests(utils.BaseAPITests):
    latest_api_version = 1

    def _items(self) -> list:
        return self.assertQuery(("GET", "/inventory")).json()["items"]

    def _add_item(self, **payload):
        self.assertQuery(("POST", "/item"), 204, json=payload, r_none=True)

    def test_create_items(self):
        self.assertEqual([], self._items())
        self._add_item(name="Pasta", size=500, unit="g", best_before="2030-01", stock=3)
        self._add_item()

        with self.get_db_session() as session:
            category = session.query(models.Category).one()
            self.assertEqual((categories.DEFAULT_CATEGORY_NAME, 1), (category.name, category.position))
            self.assertEqual(2, len(category.articles))
            self.assertEqual([1, 0], [len(article.lots) for article in category.articles])

        items = self._items()
        self.assertEqual(
            {"id": 1, "name": "Pasta", "size": 500, "unit": "g", "best_before": "2030-01", "stock": 3, "position": 1},
            items[0]
        )
        self.assertEqual(
            {"id": 2, "name": "N/A", "size": 0, "unit": "N/A", "best_before": "", "stock": 0, "position": 2},
            items[1]
        )
        self.assertEqual(items[0], self.assertQuery(("GET", "/item/1")).json())

    def test_items_are_added_to_the_first_category(self):
        self.assertQuery(("POST", "/categories", 3), 204, json={"name": "Pantry"}, r_none=True)
        self.assertQuery(("POST", "/categories", 3), 204, json={"name": "Fridge"}, r_none=True)
        self.assertQuery(("PUT", "/categories/2/move-up", 3))
        self._add_item(name="Milk")

        with self.get_db_session() as session:
            self.assertEqual(2, session.query(models.Category).count())
            self.assertEqual(2, session.get(models.Article, 1).category_id)

    def test_items_of_all_categories(self):
        for name in ["Pantry", "Fridge"]:
            self.assertQuery(("POST", "/categories", 3), 204, json={"name": name}, r_none=True)
        for category, name in [(2, "Milk"), (1, "Pasta"), (2, "Butter"), (1, "Rice")]:
            self.assertQuery(
                ("POST", "/articles", 3), 204,
                json={"category": category, "name": name, "size": 1, "unit": "kg"},
                r_none=True
            )
        self.assertEqual(["Pasta", "Rice", "Milk", "Butter"], [item["name"] for item in self._items()])
        self.assertEqual([1, 2, 1, 2], [item["position"] for item in self._items()])

    def test_update_item(self):
        self._add_item(name="Pasta", size=500, unit="g", best_before="2030-01", stock=3)
        self.assertQuery(
            ("PUT", "/item/1"), 204,
            json={"name": "Spaghetti", "size": 1, "unit": "kg", "best_before": "2031-02", "stock": 1},
            r_none=True
        )
        self.assertEqual(
            {"id": 1, "name": "Spaghetti", "size": 1, "unit": "kg", "best_before": "2031-02", "stock": 1, "position": 1},
            self.assertQuery(("GET", "/item/1")).json()
        )

        self.assertQuery(("PUT", "/item/1"), 204, json={"name": "Spaghetti"}, r_none=True)
        item = self.assertQuery(("GET", "/item/1")).json()
        self.assertEqual(("N/A", 0, "", 0), (item["unit"], item["size"], item["best_before"], item["stock"]))
        with self.get_db_session() as session:
            self.assertEqual(0, session.query(models.Lot).count())

        self.assertQuery(("PUT", "/item/42"), 404, json={"name": "Spaghetti"})

    def test_stock_changes(self):
        self._add_item(name="Pasta")
        for _ in range(3):
            self.assertQuery(("GET", "/item/1/increment"), 204, r_none=True)
        self.assertEqual(3, self.assertQuery(("GET", "/item/1")).json()["stock"])

        for _ in range(5):
            self.assertQuery(("GET", "/item/1/decrement"), 204, r_none=True)
        self.assertEqual(-2, self.assertQuery(("GET", "/item/1")).json()["stock"])

        self.assertQuery(("GET", "/item/1/reset-stock"), 204, r_none=True)
        self.assertEqual(0, self.assertQuery(("GET", "/item/1")).json()["stock"])
        with self.get_db_session() as session:
            self.assertEqual(1, session.query(models.Lot).count())

        for action in ["increment", "decrement", "reset-stock", "move-up", "move-down"]:
            self.assertQuery(("GET", f"/item/42/{action}"), 404)

    def test_flat_stock_of_multiple_lots(self):
        self._add_item(name="Pasta", best_before="2030-01", stock=2)
        self.assertQuery(("POST", "/lots", 3), 204, json={"article": 1, "best_before": "2031-01", "stock": 5}, r_none=True)
        item = self.assertQuery(("GET", "/item/1")).json()
        self.assertEqual((7, "2030-01"), (item["stock"], item["best_before"]))

        self.assertQuery(("GET", "/item/1/increment"), 204, r_none=True)
        self.assertEqual([3, 5], [lot["stock"] for lot in self.assertQuery(("GET", "/articles/1", 3)).json()["lots"]])

        self.assertQuery(("GET", "/item/1/reset-stock"), 204, r_none=True)
        self.assertEqual([0, 0], [lot["stock"] for lot in self.assertQuery(("GET", "/articles/1", 3)).json()["lots"]])

    def test_move_items(self):
        for name in ["A", "B", "C"]:
            self._add_item(name=name)

        self.assertQuery(("GET", "/item/1/move-up"), 404)
        self.assertQuery(("GET", "/item/3/move-down"), 404)
        self.assertQuery(("GET", "/item/3/move-up"), 204, r_none=True)
        self.assertEqual(["A", "C", "B"], [item["name"] for item in self._items()])
        self.assertQuery(("GET", "/item/1/move-down"), 204, r_none=True)
        self.assertEqual(["C", "A", "B"], [item["name"] for item in self._items()])
        self.assertEqual([1, 2, 3], [item["position"] for item in self._items()])


if __name__ == '__main__':
    _unittest.main()
