"""
Inventory REST API library for the bearer tokens of clients
"""

import secrets
from typing import Optional

from sqlalchemy.orm import Session

from ..persistence import models


TOKEN_BYTES: int = 32


def generate_token() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)


def find_client(session: Session, token: str) -> Optional[models.Token]:
    """
    Return the active token entry matching the given token value or None
    """

    entries = session.query(models.Token).filter_by(token=token, active=True).all()
    if len(entries) != 1:
        return None
    return entries[0]
