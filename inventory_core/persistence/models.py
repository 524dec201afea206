"""
Inventory core database models
"""

from typing import List, Optional

from sqlalchemy import (
    Boolean, Float, Integer, String,
    CheckConstraint, Column, ForeignKey, Index, UniqueConstraint,
    event
)
from sqlalchemy.orm import relationship

from .database import Base
from .. import schemas


class Category(Base):
    """
    Model representing a category of articles, ordered globally by its position
    """

    __tablename__ = "categories"
    scope_keys = ()

    id: int = Column(Integer, nullable=False, primary_key=True, autoincrement=True, unique=True)
    name: str = Column(String(255), nullable=False)
    position: int = Column(Integer, nullable=False)
    timestamp: int = Column(Integer, nullable=False)
    """Seconds since the epoch of the last accepted change"""

    articles: List["Article"] = relationship("Article", back_populates="category", order_by="Article.position")

    __table_args__ = (
        CheckConstraint("position > 0"),
    )

    @property
    def schema(self) -> schemas.Category:
        """
        Pydantic schema representation of the database model that can be sent to clients
        """

        return schemas.Category(
            id=self.id,
            name=self.name,
            position=self.position,
            timestamp=self.timestamp
        )

    @property
    def schema_v2(self) -> schemas.CategoryV2:
        return schemas.CategoryV2(id=self.id, name=self.name, position=self.position)

    def __repr__(self) -> str:
        return f"Category(id={self.id}, name={self.name!r}, position={self.position})"


class Article(Base):
    """
    Model representing one article, ordered by its position inside its category
    """

    __tablename__ = "articles"
    scope_keys = ("category_id",)

    id: int = Column(Integer, nullable=False, primary_key=True, autoincrement=True, unique=True)
    category_id: int = Column(Integer, ForeignKey("categories.id"), nullable=False)
    name: str = Column(String(255), nullable=False)
    size: float = Column(Float, nullable=False, default=0)
    unit: str = Column(String(255), nullable=False)
    inventoried: int = Column(Integer, nullable=False, default=-1)
    """Stocktaking flag: 1 = checked, 0 = not yet checked, -1 = no stocktaking active"""
    position: int = Column(Integer, nullable=False)
    timestamp: int = Column(Integer, nullable=False)

    category: Category = relationship("Category", back_populates="articles")
    lots: List["Lot"] = relationship(
        "Lot",
        back_populates="article",
        cascade="all,delete-orphan",
        order_by="Lot.position"
    )
    gtin_entries: List["Gtin"] = relationship(
        "Gtin",
        back_populates="article",
        cascade="all,delete-orphan",
        order_by="Gtin.id"
    )

    __table_args__ = (
        CheckConstraint("inventoried IN (-1, 0, 1)"),
        CheckConstraint("position > 0"),
        Index("articles_by_category", "category_id", "position"),
    )

    @property
    def gtins(self) -> List[str]:
        return [entry.gtin for entry in self.gtin_entries]

    @property
    def stock(self) -> int:
        """
        Total stock of all lots (used by the flat views of the legacy API versions)
        """

        return sum(lot.stock for lot in self.lots)

    @property
    def best_before(self) -> str:
        """
        Best-before date of the first lot or an empty string
        """

        return self.lots[0].best_before if self.lots else ""

    @property
    def schema(self) -> schemas.Article:
        """
        Pydantic schema representation of the database model that can be sent to clients
        """

        return schemas.Article(
            id=self.id,
            category=self.category_id,
            name=self.name,
            size=self.size,
            unit=self.unit,
            gtins=self.gtins,
            inventoried=self.inventoried,
            position=self.position,
            timestamp=self.timestamp,
            lots=[lot.schema for lot in self.lots]
        )

    @property
    def schema_v2(self) -> schemas.ArticleV2:
        return schemas.ArticleV2(
            id=self.id,
            category=self.category_id,
            name=self.name,
            size=self.size,
            unit=self.unit,
            best_before=self.best_before,
            stock=self.stock,
            position=self.position,
            timestamp=self.timestamp
        )

    @property
    def schema_v1(self) -> schemas.Item:
        return schemas.Item(
            id=self.id,
            name=self.name,
            size=self.size,
            unit=self.unit,
            best_before=self.best_before,
            stock=self.stock,
            position=self.position
        )

    def __repr__(self) -> str:
        return "Article(id={}, category_id={}, name={!r}, position={})".format(
            self.id, self.category_id, self.name, self.position
        )


class Gtin(Base):
    """
    Model representing one barcode (Global Trade Item Number) of an article
    """

    __tablename__ = "gtins"

    id: int = Column(Integer, nullable=False, primary_key=True, autoincrement=True, unique=True)
    article_id: int = Column(Integer, ForeignKey("articles.id", ondelete="CASCADE"), nullable=False)
    gtin: str = Column(String(255), nullable=False, index=True)

    article: Article = relationship("Article", back_populates="gtin_entries")

    def __repr__(self) -> str:
        return f"Gtin(id={self.id}, article_id={self.article_id}, gtin={self.gtin!r})"


class Lot(Base):
    """
    Model representing a batch of an article sharing a best-before date, ordered inside its article
    """

    __tablename__ = "lots"
    scope_keys = ("article_id",)

    id: int = Column(Integer, nullable=False, primary_key=True, autoincrement=True, unique=True)
    article_id: int = Column(Integer, ForeignKey("articles.id", ondelete="CASCADE"), nullable=False)
    best_before: str = Column(String(255), nullable=False, default="")
    stock: int = Column(Integer, nullable=False, default=0)
    """Quantity of the lot, which may become negative"""
    position: int = Column(Integer, nullable=False)
    timestamp: int = Column(Integer, nullable=False)

    article: Article = relationship("Article", back_populates="lots")

    __table_args__ = (
        CheckConstraint("position > 0"),
        Index("lots_by_article", "article_id", "position"),
    )

    @property
    def schema(self) -> schemas.Lot:
        """
        Pydantic schema representation of the database model that can be sent to clients
        """

        return schemas.Lot(
            id=self.id,
            article=self.article_id,
            best_before=self.best_before,
            stock=self.stock,
            position=self.position,
            timestamp=self.timestamp
        )

    def __repr__(self) -> str:
        return "Lot(id={}, article_id={}, stock={}, position={})".format(
            self.id, self.article_id, self.stock, self.position
        )


class InventorySession(Base):
    """
    Model representing a stocktaking session, which is active as long as it has no stop time
    """

    __tablename__ = "inventories"

    id: int = Column(Integer, nullable=False, primary_key=True, autoincrement=True, unique=True)
    start: int = Column(Integer, nullable=False)
    stop: Optional[int] = Column(Integer, nullable=True, default=None)
    running: Optional[bool] = Column(Boolean, nullable=True, default=True)
    """True while the session has no stop time and NULL afterwards, unique to allow only one active session"""

    __table_args__ = (
        CheckConstraint("stop IS NULL OR stop >= start"),
        CheckConstraint(
            "(stop IS NULL AND running IS NOT NULL) OR (stop IS NOT NULL AND running IS NULL)",
            name="inventories_running_matches_stop"
        ),
        UniqueConstraint("running", name="inventories_single_running"),
    )

    @property
    def active(self) -> bool:
        return self.stop is None

    def __repr__(self) -> str:
        return f"InventorySession(id={self.id}, start={self.start}, stop={self.stop})"


class Token(Base):
    """
    Model representing a bearer token of a client application
    """

    __tablename__ = "tokens"

    id: int = Column(Integer, nullable=False, primary_key=True, autoincrement=True, unique=True)
    name: str = Column(String(255), nullable=False, unique=True)
    token: str = Column(String(255), nullable=False, unique=True)
    active: bool = Column(Boolean, nullable=False, default=True)

    @property
    def schema(self) -> schemas.Token:
        return schemas.Token(id=self.id, name=self.name, active=self.active)

    def __repr__(self) -> str:
        return f"Token(id={self.id}, name={self.name!r}, active={self.active})"


class RequestLog(Base):
    """
    Model representing a logged (usually failed) request or an operational error
    """

    __tablename__ = "request_logs"

    id: int = Column(Integer, nullable=False, primary_key=True, autoincrement=True, unique=True)
    timestamp: int = Column(Integer, nullable=False)
    type: str = Column(String(32), nullable=False)
    content: str = Column(String(2048), nullable=False)
    client_name: Optional[str] = Column(String(255), nullable=True)
    client_ip: Optional[str] = Column(String(255), nullable=True)
    user_agent: Optional[str] = Column(String(1024), nullable=True)

    def __repr__(self) -> str:
        return f"RequestLog(id={self.id}, type={self.type!r}, content={self.content!r})"


class Lock(Base):
    """
    Model representing a named row that serializes writers of a resource without a parent row

    Transactions acquire a lock by updating its row, which blocks all other
    transactions doing the same until the first one ends. The global list
    of categories and the stocktaking state are guarded this way.
    """

    __tablename__ = "locks"

    NAMES = ("categories", "inventories")

    name: str = Column(String(64), nullable=False, primary_key=True)

    def __repr__(self) -> str:
        return f"Lock(name={self.name!r})"


@event.listens_for(Lock.__table__, "after_create")
def insert_lock_rows(target, connection, **kwargs):
    connection.execute(target.insert(), [{"name": name} for name in Lock.NAMES])
