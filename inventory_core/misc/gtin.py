"""
Inventory library to look up barcodes (Global Trade Item Numbers)

A barcode is first searched among the stored articles. If exactly one
article carries it, that article is the result. Otherwise the product
databases of Open Food Facts are queried, one country after the other.
"""

import logging
from typing import Optional

import requests
from sqlalchemy.orm import Session

from .logger import enforce_logger
from .. import schemas
from ..persistence import models
from ..schemas.config import GtinConfig


PRODUCT_NOT_FOUND_STATUS: int = 0


class OpenFoodFactsClient:
    """
    Minimal client of the product API of Open Food Facts
    """

    def __init__(
            self,
            config: GtinConfig,
            session: Optional[requests.Session] = None,
            logger: Optional[logging.Logger] = None
    ):
        self.config = config
        self.logger = enforce_logger(logger)
        self.session = session or requests.Session()
        self.session.max_redirects = config.max_redirects
        self.session.headers.update({"User-Agent": config.user_agent})

    @property
    def name_field(self) -> str:
        return f"product_name_{self.config.language}"

    def fetch_product(self, gtin: str, country: str) -> dict:
        """
        Query the product database of one country and return the decoded response

        :raises requests.RequestException: when the request failed or got no valid response
        :raises ValueError: when the response body is not a valid JSON object
        """

        url = self.config.url_format.format(country=country, gtin=gtin)
        response = self.session.get(
            url,
            params={"fields": f"product_name,{self.name_field},quantity"},
            timeout=self.config.timeout
        )
        self.logger.debug(f"Product lookup of {gtin!r} at {country!r} returned {response.status_code}")
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
        return data

    def lookup(self, gtin: str) -> schemas.GtinResult:
        """
        Search the product in the configured countries and convert the result
        """

        try:
            data = {}
            for country in self.config.countries:
                data = self.fetch_product(gtin, country)
                if data.get("status", PRODUCT_NOT_FOUND_STATUS) != PRODUCT_NOT_FOUND_STATUS:
                    break
            else:
                return schemas.GtinResult(type=schemas.GtinResultType.NOT_FOUND)
        except (requests.RequestException, ValueError) as exc:
            self.logger.warning(f"Product lookup of {gtin!r} failed: {exc}")
            return schemas.GtinResult(type=schemas.GtinResultType.ERROR, error=str(exc))

        product = data.get("product")
        if not isinstance(product, dict):
            product = {}
        return schemas.GtinResult(
            type=schemas.GtinResultType.FOUND,
            name=product.get(self.name_field) or product.get("product_name"),
            quantity=product.get("quantity")
        )


def find_article(session: Session, gtin: str) -> Optional[int]:
    """
    Return the ID of the only article carrying the barcode or None if there's not exactly one
    """

    article_ids = session.query(models.Gtin.article_id).filter(models.Gtin.gtin == gtin).distinct().all()
    if len(article_ids) != 1:
        return None
    return article_ids[0][0]


def lookup(session: Session, gtin: str, client: OpenFoodFactsClient) -> schemas.GtinResult:
    article_id = find_article(session, gtin)
    if article_id is not None:
        return schemas.GtinResult(type=schemas.GtinResultType.EXISTING, article_id=article_id)
    return client.lookup(gtin)
