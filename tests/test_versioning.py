"""
Inventory unit tests for the version annotations of path operations
"""

import unittest as _unittest

import fastapi

from inventory_core.api import versioning


class VersioningTests(_unittest.TestCase):
    def test_annotations(self):
        @versioning.versions(2)
        def only_two():
            pass

        @versioning.versions(minimal=2, maximal=3)
        def two_to_three():
            pass

        def plain():
            pass

        self.assertEqual([False, True, False, False], [versioning.supports(only_two, v, 4) for v in range(1, 5)])
        self.assertEqual([False, True, True, False], [versioning.supports(two_to_three, v, 4) for v in range(1, 5)])
        self.assertEqual([False, False, False, True], [versioning.supports(plain, v, 4) for v in range(1, 5)])

    def test_invalid_annotations(self):
        self.assertRaises(TypeError, versioning.versions, "1")
        self.assertRaises(TypeError, versioning.versions, minimal=1.5)
        self.assertRaises(ValueError, versioning.versions, minimal=3, maximal=2)
        self.assertRaises(ValueError, versioning.versions, 1, minimal=2)

        decorator = versioning.versions(1)
        func = decorator(lambda: None)
        self.assertRaises(RuntimeError, versioning.versions(2), func)

    def test_routes_per_version(self):
        router = fastapi.APIRouter()

        @router.get("/old")
        @versioning.versions(1)
        async def old():
            return {}

        @router.get("/new")
        @versioning.versions(minimal=2)
        async def new():
            return {}

        apis = {1: fastapi.FastAPI(), 2: fastapi.FastAPI()}
        app = versioning.VersionedFastAPI(apis)
        app.add_router(router)
        app.finish()
        app.finish()

        paths = {number: {route.path for route in api.routes} for number, api in apis.items()}
        self.assertIn("/old", paths[1])
        self.assertNotIn("/new", paths[1])
        self.assertIn("/new", paths[2])
        self.assertNotIn("/old", paths[2])
        self.assertEqual(
            {"latest": 2, "versions": [{"version": 1, "prefix": "/v1"}, {"version": 2, "prefix": "/v2"}]},
            app.get_versions().model_dump()
        )
        self.assertRaises(RuntimeError, app.add_router, router)

    def test_invalid_setup(self):
        self.assertRaises(ValueError, versioning.VersionedFastAPI, {})
        self.assertRaises(ValueError, versioning.VersionedFastAPI, {1: fastapi.FastAPI()}, version_format="/v")


if __name__ == '__main__':
    _unittest.main()
