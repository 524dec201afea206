"""
Helper functions to make writing unit tests for the inventory core easier
"""

import os
import random
import string
import secrets
import unittest
from typing import Iterable, List, Mapping, Optional, Tuple, Union

import sqlalchemy.orm
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine as _Engine

from inventory_core import settings as _settings
from inventory_core.api.api import create_app
from inventory_core.persistence import database, models

from . import conf


class BaseTest(unittest.TestCase):
    """
    Base class of all tests using a database and a config file

    Each test gets its own config file name and database URL, both of
    them removed afterwards. Subclasses overwriting ``setUp`` or ``tearDown``
    have to call the methods of this class first or last, respectively.
    """

    config_file: Optional[str] = None
    database_url: Optional[str] = None
    _database_file: Optional[str] = None

    def setUp(self) -> None:
        self.config_file = f"config_{os.getpid()}_{secrets.token_hex(8)}.json"
        _settings.CONFIG_PATHS = [self.config_file]

        if conf.DATABASE_URL is not None:
            self.database_url = conf.DATABASE_URL
        else:
            self._database_file = conf.DATABASE_DEFAULT_FILE_FORMAT.format(
                os.getpid(),
                "".join([random.choice(string.ascii_lowercase) for _ in range(6)])
            )
            self.database_url = conf.DATABASE_URL_FORMAT.format(self._database_file)

    def tearDown(self) -> None:
        if conf.DATABASE_URL is not None:
            engine = sqlalchemy.create_engine(self.database_url)
            models.Base.metadata.drop_all(bind=engine)
            engine.dispose()

        elif self._database_file and os.path.exists(self._database_file):
            os.remove(self._database_file)

        if self.config_file and os.path.exists(self.config_file):
            os.remove(self.config_file)


class BasePersistenceTests(BaseTest):
    engine: _Engine
    session: sqlalchemy.orm.Session

    def setUp(self) -> None:
        super().setUp()
        opts = {"echo": conf.SQLALCHEMY_ECHOING}
        if self.database_url.startswith("sqlite:"):
            opts["connect_args"] = {"check_same_thread": False}
        self.engine = sqlalchemy.create_engine(self.database_url, **opts)
        self.session = self.make_session()
        models.Base.metadata.create_all(bind=self.engine)

    def tearDown(self) -> None:
        self.session.close()
        self.engine.dispose()
        super().tearDown()

    def make_session(self) -> sqlalchemy.orm.Session:
        return sqlalchemy.orm.sessionmaker(autocommit=False, autoflush=False, bind=self.engine)()

    def add_category(self, name: str = "Pantry", timestamp: int = 100) -> models.Category:
        position = len(self.session.query(models.Category).all()) + 1
        category = models.Category(name=name, position=position, timestamp=timestamp)
        self.session.add(category)
        self.session.commit()
        return category

    def add_article(
            self,
            category: models.Category,
            name: str = "Pasta",
            lot_stocks: Iterable[int] = (),
            timestamp: int = 100
    ) -> models.Article:
        position = len(self.session.query(models.Article).filter_by(category_id=category.id).all()) + 1
        article = models.Article(
            category_id=category.id,
            name=name,
            size=500,
            unit="g",
            inventoried=-1,
            position=position,
            timestamp=timestamp,
            lots=[
                models.Lot(best_before=f"2030-0{i + 1}", stock=stock, position=i + 1, timestamp=timestamp)
                for i, stock in enumerate(lot_stocks)
            ]
        )
        self.session.add(article)
        self.session.commit()
        return article

    def get_positions(self, model, **kwargs) -> List[Tuple[int, int]]:
        """
        Return the pairs of ID and position of all matching records ordered by position
        """

        query = self.session.query(model).filter_by(**kwargs).order_by(model.position)
        return [(obj.id, obj.position) for obj in query.all()]


class BaseAPITests(BaseTest):
    api_version_format: str = "/v{}"
    latest_api_version: int = 3

    token: Optional[str] = None
    client: Optional[TestClient] = None

    def setUp(self) -> None:
        super().setUp()
        config = _settings.get_default_core_config(self.database_url)
        config.database.debug_sql = conf.SQLALCHEMY_ECHOING
        config.server.allowed_origins = [conf.ALLOWED_ORIGIN]
        _settings.store_configuration(config, self.config_file)

        database.PRINT_SQLITE_WARNING = False
        self.app = create_app(_settings.Settings(), configure_logging=False)

        self.token = secrets.token_urlsafe(16)
        with self.get_db_session() as session:
            session.add(models.Token(name="unittest", token=self.token, active=True))
            session.commit()

        self.client = TestClient(self.app)
        self.client.__enter__()

    def tearDown(self) -> None:
        self.client.__exit__(None, None, None)
        database.get_engine().dispose()
        super().tearDown()

    @staticmethod
    def get_db_session() -> sqlalchemy.orm.Session:
        return database.get_new_session()

    def assertQuery(
            self,
            endpoint: Union[Tuple[str, str], Tuple[str, str, int]],
            status_code: Union[int, Iterable[int]] = 200,
            json: Optional[Union[dict, list]] = None,
            headers: Optional[dict] = None,
            r_none: bool = False,
            r_is_json: bool = True,
            r_headers: Optional[Union[Mapping, Iterable]] = None,
            no_version: bool = False,
            no_auth: bool = False,
            **kwargs
    ):
        """
        Send a request to the test client and check the status code and content of the response

        Requests carry the bearer token of the test client unless ``no_auth``
        is set. The expected response headers are either a mapping of
        names to values or an iterable of names which only have to exist.

        :param endpoint: method and path, optionally followed by the API version
            (the class attribute ``latest_api_version`` is used otherwise)
        :param status_code: expected status code or collection of accepted codes
        :param json: request body
        :param headers: additional request headers
        :param r_none: expect an empty body (used for 204 responses)
        :param r_is_json: expect a JSON body (ignored if ``r_none`` is set)
        :param r_headers: expected response headers
        :param no_version: send the path without any version prefix
        :param no_auth: omit the bearer token of the test client
        :param kwargs: further keyword arguments of ``TestClient.request``
        :return: the response of the test client
        """

        if len(endpoint) == 3:
            method, path, api_version = endpoint
        else:
            method, path = endpoint
            api_version = self.latest_api_version

        prefix = "" if no_version else self.api_version_format.format(api_version)
        headers = dict(headers or {})
        if not no_auth:
            headers.setdefault("Authorization", f"Bearer {self.token}")
        response = self.client.request(method.upper(), prefix + path, json=json, headers=headers, **kwargs)

        if isinstance(status_code, int):
            self.assertEqual(status_code, response.status_code, response.text)
        elif isinstance(status_code, Iterable):
            self.assertTrue(
                response.status_code in status_code,
                (response.text, response.status_code, status_code)
            )

        if r_headers is not None:
            for k in (r_headers.keys() if isinstance(r_headers, Mapping) else r_headers):
                self.assertIsNotNone(response.headers.get(k), response.headers)
                if isinstance(r_headers, Mapping):
                    self.assertEqual(r_headers[k], response.headers.get(k), response.headers)

        if r_none:
            self.assertEqual("", response.text)
        elif r_is_json:
            try:
                self.assertIsNotNone(response.json())
            except ValueError:
                self.fail(("No JSON content detected", response.headers, response.text))

        return response
