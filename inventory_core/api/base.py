"""
Inventory REST API base library with the error handling of all API versions
"""

import logging
from typing import Any, Dict, Optional

import sqlalchemy.exc
from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError, StarletteHTTPException
from fastapi.responses import JSONResponse

from .. import schemas
from ..misc.logger import record_request
from ..persistence import database


logger = logging.getLogger(__name__)


class APIWithoutValidationError(FastAPI):
    """
    FastAPI application whose OpenAPI schema doesn't list the 422 responses

    Validation errors are answered with 400 and the ``APIError`` schema instead.
    """

    def openapi(self) -> Dict[str, Any]:
        if self.openapi_schema:
            return self.openapi_schema
        schema = super().openapi()
        for operations in schema.get("paths", {}).values():
            for operation in operations.values():
                operation.get("responses", {}).pop("422", None)
        return schema


def log_failed_request(request: Request, error: schemas.APIError):
    """
    Store the error response of a request in the request log table, if enabled in the settings
    """

    settings = getattr(request.app.state, "settings", None)
    if settings is not None and not settings.server.log_failed_requests:
        return

    session = database.get_new_session()
    try:
        record_request(
            session,
            "response",
            f"{error.status} {error.method} {error.request}: {error.message}",
            client_name=getattr(request.state, "client_name", None),
            client_ip=request.client and request.client.host,
            user_agent=request.headers.get("User-Agent")
        )
    except sqlalchemy.exc.SQLAlchemyError:
        session.rollback()
        logger.exception(f"Failed to store the log entry of a failed request to {error.request!r}")
    finally:
        session.close()


def _make_error_response(
        request: Request,
        status_code: int,
        repeat: bool,
        message: str,
        details: str,
        headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    error = schemas.APIError(
        status=status_code,
        method=request.method,
        request=request.url.path,
        repeat=repeat,
        message=message,
        details=details
    )
    log_failed_request(request, error)
    return JSONResponse(jsonable_encoder(error), status_code=status_code, headers=headers)


async def handle_generic_exception(request: Request, _: Exception):
    logger.exception(f"Unhandled exception while processing {request.method} {request.url.path}")
    message = "Internal server error. The request may have been processed only partially."
    return _make_error_response(request, 500, False, message, "")


async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error['msg']}"
        for error in exc.errors()
    )
    message = f"Invalid request: {problems}"
    return _make_error_response(request, 400, False, message, str(exc.errors()))


class APIException(HTTPException):
    """
    Base class of the exceptions which are turned into ``APIError`` responses
    """

    def __init__(
            self,
            status_code: int,
            detail: Optional[str],
            repeat: bool = False,
            message: Optional[str] = None,
            headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.repeat = repeat
        self.message = message

    @classmethod
    async def handle(cls, request: Request, exc: StarletteHTTPException) -> Response:
        """
        Exception handler for all HTTP exceptions, including the ones raised by FastAPI itself
        """

        status_code = getattr(exc, "status_code", 500)
        message = getattr(exc, "message", None) or exc.__class__.__name__
        if not isinstance(exc, StarletteHTTPException):
            logger.error(f"Unexpected exception {exc!r} in the handler of HTTP exceptions")

        logger.debug(f"{request.method} {request.url.path} failed with {status_code}: {message} ({exc.detail})")
        return _make_error_response(
            request,
            status_code,
            getattr(exc, "repeat", False),
            message,
            "" if exc.detail is None else str(exc.detail),
            getattr(exc, "headers", None)
        )


class BadRequest(APIException):
    """
    Exception for requests that are well-formed but can't be carried out

    The message is shown to users, so keep it short and understandable.
    """

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(400, detail, repeat=True, message=message)


class Unauthorized(APIException):
    """
    Exception when a request carries no or no valid bearer token
    """

    def __init__(self, detail: Optional[str] = None):
        super().__init__(
            401,
            detail,
            message="Missing or invalid bearer token",
            headers={"WWW-Authenticate": "Bearer"}
        )


class NotFound(APIException):
    """
    Exception when a referenced resource doesn't exist
    """

    def __init__(self, resource: str, detail: Optional[str] = None):
        super().__init__(404, detail, message=f"{resource} doesn't exist.")
