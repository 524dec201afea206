"""
Combined inventory core REST API definitions

This API provides multiple versions of its endpoints, each of them
mounted below its own path prefix, e.g. `/v3`. Take a look into the
different API definitions to see which functionality they provide.
The endpoint `/versions` lists all available versions.
"""

import contextlib
import logging.config
from typing import Any, Callable, Dict, Optional, Type, Union

import fastapi
from fastapi.exceptions import RequestValidationError, StarletteHTTPException
from fastapi.middleware.cors import CORSMiddleware

from . import base, versioning
from .routers import router
from .. import schemas, __version__
from ..persistence import database
from ..settings import Settings


DEFAULT_EXCEPTION_HANDLERS = {
    StarletteHTTPException: base.APIException.handle,
    RequestValidationError: base.handle_request_validation_error,
    Exception: base.handle_generic_exception
}

LICENSE_INFO = {
    "name": "MIT License",
    "url": "https://opensource.org/licenses/MIT"
}

CORS_METHODS = ["GET", "PUT", "POST", "DELETE"]
CORS_HEADERS = ["authorization", "content-type"]

ERROR_RESPONSES = {
    400: {"model": schemas.APIError},
    401: {"model": schemas.APIError},
    404: {"model": schemas.APIError}
}


API_V1_DOC = """Inventory core REST API definition version 1

The first version only knows a flat list of items. Every item is shown
with the total stock of its lots and the best-before date of its first lot.
New items are added to the first category. All actions on single items
are triggered by `GET` requests and answered with `204` (No Content).
"""

API_V2_DOC = """Inventory core REST API definition version 2

The second version groups the articles into categories, but still shows
a flat stock and best-before date for every article. Articles carry a
`timestamp` of their last change. Updates based on an outdated version
of an article are dropped silently and still answered with `204`.
"""

API_V3_DOC = """Inventory core REST API definition version 3

This API requires authentication using bearer tokens, which have to be
included in the `Authorization` header with the type `Bearer`.

The stock of an article is split into lots, each of them with its own
best-before date and stock. Categories, articles and lots carry a
`position` in their list and a `timestamp` of their last change. Writes
may include the `timestamp` of the version they are based on. Writes
based on an outdated version are dropped silently, which allows offline
clients to replay their changes later. Such writes are answered with
`204` (No Content) just like accepted ones. A stocktaking session marks
all articles as unchecked until they get updated or reset.

All error responses use the schema of the `APIError`. In general, the
`400` (Bad Request) response is used for invalid requests, including
moves beyond the ends of a list, while `404` (Not Found) is returned
whenever a referenced ID doesn't exist.
"""


def _make_app(
        title: str,
        version: str,
        description: str,
        license_info: Optional[Dict[str, str]] = None,
        exception_handlers: Optional[Dict[Any, Callable]] = None,
        root_redirect: bool = True,
        responses: Optional[Dict[Union[int, str], Dict[str, Any]]] = None,
        api_class: Optional[Type[fastapi.FastAPI]] = None,
        **kwargs
) -> fastapi.FastAPI:
    if api_class is None:
        api_class = fastapi.FastAPI
    app = api_class(
        title=title,
        version=version,
        description=description,
        license_info=license_info or LICENSE_INFO,
        responses=responses or {400: {"model": schemas.APIError}},
        **kwargs
    )

    handlers = exception_handlers or DEFAULT_EXCEPTION_HANDLERS
    for exc in handlers:
        app.add_exception_handler(exc, handlers[exc])

    if root_redirect:
        @app.get("/", include_in_schema=False)
        async def redirect_root():
            return fastapi.responses.RedirectResponse("./docs")

    return app


def create_app(
        settings: Optional[Settings] = None,
        configure_logging: bool = True,
        configure_database: bool = True
) -> fastapi.FastAPI:
    """
    Build the versioned application with all sub-applications and middlewares

    The settings are stored in the state of every (sub-)application, where
    dependencies and error handlers look them up. Tests create one
    application per test case with their own settings.

    :param settings: settings to use, loaded from the config file if omitted
    :param configure_logging: apply the logging section of the settings
    :param configure_database: initialize the database with the configured connection
    :return: the versioned ``FastAPI`` application
    """

    @contextlib.asynccontextmanager
    async def lifespan(_: fastapi.FastAPI):
        logger.info(f"Inventory core {__version__} is ready")
        yield
        logger.info("Inventory core is shutting down")

    if settings is None:
        settings = Settings()

    if configure_logging:
        logging.config.dictConfig(settings.logging.model_dump())
    logger = logging.getLogger(__name__)
    logger.debug("Creating the versioned application")

    if configure_database:
        database.init(settings.database.connection, settings.database.debug_sql)

    apis = {
        number: _make_app(
            title=f"Inventory core REST API v{number}",
            version=__version__,
            description=doc,
            api_class=base.APIWithoutValidationError,
            responses=ERROR_RESPONSES
        )
        for number, doc in [(1, API_V1_DOC), (2, API_V2_DOC), (3, API_V3_DOC)]
    }

    app = _make_app(
        title="Inventory core REST API",
        version=__version__,
        description=__doc__,
        apis=apis,
        logger=logger,
        license_info=LICENSE_INFO,
        responses={400: {"model": schemas.APIError}},
        lifespan=lifespan,
        api_class=versioning.VersionedFastAPI
    )

    assert isinstance(app, versioning.VersionedFastAPI), "'VersionedFastAPI' instance required"
    for application in [app, *apis.values()]:
        application.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.allowed_origins,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS
    )
    app.add_router(router)

    app.finish()
    return app


class APIWrapper:
    """
    Lazy holder of the application, which is created on first access of ``app``

    The module-level instance ``api`` lets ``uvicorn`` import the
    application without building it at import time:

    .. code-block::

        uvicorn inventory_core.api.api:api.app
    """

    def __init__(self):
        self._app: Optional[fastapi.FastAPI] = None

    def get_app(self) -> fastapi.FastAPI:
        return self.app

    def set_app(self, application: fastapi.FastAPI):
        if not isinstance(application, fastapi.FastAPI):
            raise TypeError
        self._app = application

    @property
    def app(self) -> fastapi.FastAPI:
        """
        Return the application, created with the settings of the config file on first access
        """

        if self._app is not None:
            return self._app
        self._app = create_app()
        return self._app


api = APIWrapper()
