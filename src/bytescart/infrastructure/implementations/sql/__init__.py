"""SQLAlchemy implementations of the persistence repositories."""

from bytescart.infrastructure.implementations.sql.audit_repository import (
    SqlAuditRepository,
)
from bytescart.infrastructure.implementations.sql.database import (
    SessionProvider,
    create_db_engine,
    init_schema,
)
from bytescart.infrastructure.implementations.sql.order_repository import (
    SqlOrderRepository,
)
from bytescart.infrastructure.implementations.sql.product_repository import (
    SqlProductRepository,
)
from bytescart.infrastructure.implementations.sql.shipping_location_repository import (
    SqlShippingLocationRepository,
)
from bytescart.infrastructure.implementations.sql.store_repository import (
    SqlStoreRepository,
)

__all__ = [
    "SessionProvider",
    "SqlAuditRepository",
    "SqlOrderRepository",
    "SqlProductRepository",
    "SqlShippingLocationRepository",
    "SqlStoreRepository",
    "create_db_engine",
    "init_schema",
]
