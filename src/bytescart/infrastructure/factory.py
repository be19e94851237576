"""
Infrastructure factory for repository construction.

Builds the persistence repositories for the configured database URL. Engines
are cached per URL so every request reuses one connection pool.

Usage:
    from bytescart.infrastructure import InfrastructureFactory
    from bytescart.config import get_settings

    # Option 1: From settings
    settings = get_settings()
    factory = InfrastructureFactory.from_settings(settings)

    # Option 2: Manual configuration
    factory = InfrastructureFactory(database_url="sqlite:///./shop.db")

    # Get repositories
    store_repo = factory.get_store_repository()
    audit_repo = factory.get_audit_repository()
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from bytescart.infrastructure.implementations.sql import (
    SessionProvider,
    SqlAuditRepository,
    SqlOrderRepository,
    SqlProductRepository,
    SqlShippingLocationRepository,
    SqlStoreRepository,
    create_db_engine,
    init_schema,
)
from bytescart.infrastructure.repositories import (
    AuditRepository,
    OrderRepository,
    ProductRepository,
    ShippingLocationRepository,
    StoreRepository,
)

if TYPE_CHECKING:
    from bytescart.config import Settings


@lru_cache(maxsize=8)
def get_engine(database_url: str) -> Engine:
    """Engine for a database URL (cached)."""
    return create_db_engine(database_url)


class InfrastructureFactory:
    """
    Factory for creating repository instances.

    Provides dependency injection for persistence operations.
    """

    def __init__(self, database_url: str, engine: Engine | None = None):
        """
        Initialize infrastructure factory.

        Args:
            database_url: SQLAlchemy database URL
            engine: Existing engine to use instead of the cached one for the URL
        """
        self.database_url = database_url
        self.engine = engine if engine is not None else get_engine(database_url)
        self._provider = SessionProvider(self.engine)

        logger.debug(f"Initialized InfrastructureFactory for {self.engine.url.drivername}")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "InfrastructureFactory":
        """
        Create factory from Settings object.

        Args:
            settings: Application settings from config.py

        Returns:
            InfrastructureFactory configured from settings
        """
        return cls(database_url=settings.database_url)

    def init_schema(self) -> None:
        """Create any missing tables."""
        init_schema(self.engine)

    def get_store_repository(self) -> StoreRepository:
        return SqlStoreRepository(self._provider)

    def get_shipping_location_repository(self) -> ShippingLocationRepository:
        return SqlShippingLocationRepository(self._provider)

    def get_product_repository(self) -> ProductRepository:
        return SqlProductRepository(self._provider)

    def get_order_repository(self) -> OrderRepository:
        return SqlOrderRepository(self._provider)

    def get_audit_repository(self) -> AuditRepository:
        return SqlAuditRepository(self._provider)

    def ping(self) -> bool:
        """Whether the database answers a trivial query."""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"Database ping failed: {e}")
            return False
        return True
