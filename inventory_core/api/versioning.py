"""
Inventory API library to provide multiple versions of the API endpoints

All path operations are registered on one shared router. Each of them is
annotated with the API versions it belongs to, since the versions differ
in their data shapes while sharing most of their paths. The versioned
application filters the shared router once per version and mounts the
resulting sub-applications below their version prefix, e.g. ``/v3``.
"""

import logging
from typing import Callable, Dict, NamedTuple, Optional, Tuple

import fastapi
import fastapi.routing

from .. import schemas


ANNOTATION_ATTRIBUTE = "_inventory_api_versions"


class VersionAnnotation(NamedTuple):
    """
    Versions of the API a path operation belongs to

    An operation belongs to a version if the version lies between
    ``minimal`` and ``maximal`` (each of them unbounded if None)
    and, if ``explicit`` is not empty, is also one of those.
    """

    explicit: Tuple[int, ...] = ()
    minimal: Optional[int] = None
    maximal: Optional[int] = None

    def includes(self, api_version: int) -> bool:
        if self.minimal is not None and api_version < self.minimal:
            return False
        if self.maximal is not None and api_version > self.maximal:
            return False
        return not self.explicit or api_version in self.explicit


def versions(
        *explicit: int,
        minimal: Optional[int] = None,
        maximal: Optional[int] = None
) -> Callable[[Callable], Callable]:
    """
    Decorate a path operation function with the version(s) of the API that should serve it

    Examples: ``@versions(2)`` only adds the operation to version 2,
    ``@versions(minimal=3)`` to version 3 and all later versions.

    :param explicit: any number of API versions that should serve the operation
    :param minimal: lowest API version that should serve the operation
    :param maximal: highest API version that should serve the operation
    :return: decorator to use on a path operation function
    :raises TypeError: when one of the versions is no integer
    :raises ValueError: when the explicit versions lie outside of the given bounds
    """

    for value in [*explicit, minimal, maximal]:
        if value is not None and not isinstance(value, int):
            raise TypeError(f"API versions must be integers, got {value!r}")

    annotation = VersionAnnotation(tuple(explicit), minimal, maximal)
    if minimal is not None and maximal is not None and minimal > maximal:
        raise ValueError(f"Minimal version {minimal} is bigger than maximal version {maximal}")
    if not all(map(annotation.includes, explicit)):
        raise ValueError(f"Explicit versions {explicit!r} exceed the bounds {minimal!r} and {maximal!r}")

    def decorator(func: Callable) -> Callable:
        if hasattr(func, ANNOTATION_ATTRIBUTE):
            raise RuntimeError(f"Versions of {func.__name__!r} have already been annotated")
        setattr(func, ANNOTATION_ATTRIBUTE, annotation)
        return func

    return decorator


def get_annotation(endpoint: Callable) -> Optional[VersionAnnotation]:
    annotation = getattr(endpoint, ANNOTATION_ATTRIBUTE, None)
    if annotation is not None and not isinstance(annotation, VersionAnnotation):
        raise TypeError(f"Invalid version annotation {annotation!r} of {endpoint!r}")
    return annotation


def supports(endpoint: Callable, api_version: int, latest_version: int) -> bool:
    """
    Determine whether the endpoint belongs to the given API version

    Endpoints without annotation only belong to the latest version.
    """

    annotation = get_annotation(endpoint)
    if annotation is None:
        return api_version == latest_version
    return annotation.includes(api_version)


class VersionedFastAPI(fastapi.FastAPI):
    """
    FastAPI application serving one sub-application per API version

    The ``apis`` argument maps the API versions to the applications
    that serve them. Routers must be added with ``add_router``, which
    distributes their routes to the sub-applications according to the
    version annotations. Afterwards, ``finish`` mounts every sub-application
    below its prefix and adds the ``/versions`` endpoint.

    .. code-block::

        app = VersionedFastAPI(
            apis={1: FastAPI(title="v1"), 2: FastAPI(title="v2")},
            title="API"
        )
        app.add_router(router)
        app.finish()
    """

    def __init__(
            self,
            apis: Dict[int, fastapi.FastAPI],
            *args,
            version_format: str = "/v{}",
            logger: Optional[logging.Logger] = None,
            **kwargs
    ):
        if not apis:
            raise ValueError("At least one API version is required")
        if version_format.count("{}") != 1:
            raise ValueError(f"Version format {version_format!r} must contain exactly one '{{}}'")
        super().__init__(*args, **kwargs)
        self._apis = dict(apis)
        self._version_format = version_format
        self._logger = logger or logging.getLogger(__name__)
        self._finished = False

    @property
    def apis(self) -> Dict[int, fastapi.FastAPI]:
        return dict(self._apis)

    @property
    def latest_version(self) -> int:
        return max(self._apis)

    def get_versions(self) -> schemas.Versions:
        return schemas.Versions(
            latest=self.latest_version,
            versions=[
                schemas.Versions.Version(version=number, prefix=self._version_format.format(number))
                for number in sorted(self._apis)
            ]
        )

    def add_router(self, router: fastapi.APIRouter, **kwargs):
        """
        Distribute the routes of the router to the sub-applications of their versions

        :param router: APIRouter holding the annotated path operations
        :param kwargs: further keyword arguments for ``include_router`` of the sub-applications
        :raises RuntimeError: when the application has already been finished
        """

        if self._finished:
            raise RuntimeError("Routers can't be added after the application has been finished")

        routes = []
        for route in router.routes:
            if not isinstance(route, fastapi.routing.APIRoute):
                self._logger.error(f"Ignoring route {route!r}, since it's no 'APIRoute'")
                continue
            if get_annotation(route.endpoint) is None:
                self._logger.warning(f"Route {route.path!r} has no version annotation, using the latest version")
            routes.append(route)

        kwargs.pop("prefix", None)
        for number, api in self._apis.items():
            selected = [route for route in routes if supports(route.endpoint, number, self.latest_version)]
            self._logger.debug(f"Adding {len(selected)} routes to API version {number}")
            api.include_router(
                fastapi.APIRouter(default_response_class=router.default_response_class, routes=selected),
                **kwargs
            )

    def finish(self, versions_endpoint: bool = True):
        """
        Mount all sub-applications below their version prefixes (only once)

        :param versions_endpoint: switch to add the ``/versions`` endpoint to this application
        """

        if self._finished:
            return

        if versions_endpoint:
            @self.get("/versions", response_model=schemas.Versions, tags=["Miscellaneous"])
            async def get_version_info():
                """
                Return the available API versions with their path prefixes
                """

                return self.get_versions()

        for number in sorted(self._apis):
            prefix = self._version_format.format(number)
            self.mount(prefix, self._apis[number])
            self._logger.debug(f"Mounted API version {number} at {prefix!r}")

        self._finished = True
