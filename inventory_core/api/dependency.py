"""
Inventory API dependency library
"""

import logging
from typing import Generator, Optional

import sqlalchemy.exc
from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from . import auth, base
from ..misc import timestamps
from ..persistence import database
from ..settings import Settings


def get_session() -> Generator[Session, None, None]:
    """
    Provide one database session per request, rolled back if the request fails
    """

    session = database.get_new_session()
    try:
        yield session
        session.flush()
    except sqlalchemy.exc.SQLAlchemyError as exc:
        statement = (getattr(exc, "statement", None) or "").replace("\n", " ")
        logging.getLogger(__name__).exception(f"Database error {exc!r} (statement: {statement!r})")
        session.rollback()
        raise
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


async def check_bearer_token(
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(HTTPBearer(auto_error=False)),
        session: Session = Depends(get_session)
) -> str:
    """
    Verify the bearer token of the request and return the name of its owner

    :raises Unauthorized: when the request carries no token or the token is unknown or inactive
    """

    if credentials is None:
        raise base.Unauthorized("Missing bearer token in the 'Authorization' header")
    entry = auth.find_client(session, credentials.credentials)
    if entry is None:
        raise base.Unauthorized("Unknown or inactive bearer token")
    request.state.client_name = entry.name
    return entry.name


class MinimalRequestData:
    """
    Request data without authentication, used by the health check
    """

    def __init__(
            self,
            request: Request,
            response: Response,
            session: Session = Depends(get_session)
    ):
        self.request = request
        self.response = response
        self.headers = request.headers
        self.session = session
        self.now: int = timestamps.now()
        """Server time of the request, used for all timestamps written by it"""

        self._config: Optional[Settings] = None

    @property
    def config(self) -> Settings:
        if self._config is None:
            self._config = getattr(self.request.app.state, "settings", None) or Settings()
        return self._config


class LocalRequestData(MinimalRequestData):
    """
    Request data of all authenticated path operations

    Depending on it enforces a valid bearer token. Query, header, path
    or cookie parameters added here show up in the OpenAPI schema
    of every path operation.
    """

    def __init__(
            self,
            request: Request,
            response: Response,
            session: Session = Depends(get_session),
            client_name: str = Depends(check_bearer_token)
    ):
        super().__init__(request, response, session)
        self.client_name: str = client_name
