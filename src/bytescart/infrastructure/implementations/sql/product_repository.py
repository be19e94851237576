"""SQLAlchemy product repository."""

from decimal import Decimal

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from bytescart.infrastructure.implementations.sql.database import SessionProvider
from bytescart.infrastructure.implementations.sql.models import ProductModel
from bytescart.infrastructure.repositories.product_repository import (
    Product,
    ProductRepository,
)


def to_product(row: ProductModel) -> Product:
    return Product(
        id=row.id,
        store_id=row.store_id,
        name=row.name,
        price=Decimal(row.price),
        image_url=row.image_url,
        created_at=row.created_at,
    )


class SqlProductRepository(ProductRepository):
    def __init__(self, provider: SessionProvider):
        self._provider = provider

    async def get(self, product_id: str) -> Product | None:
        def work(session: Session) -> Product | None:
            row = session.get(ProductModel, product_id)
            return to_product(row) if row else None

        return await self._provider.run(work)

    async def list_for_store(self, store_id: str) -> list[Product]:
        query = (
            select(ProductModel)
            .where(ProductModel.store_id == store_id)
            .order_by(ProductModel.created_at.desc())
        )
        return await self._provider.run(
            lambda session: [to_product(row) for row in session.execute(query).scalars()]
        )

    async def list_by_ids(self, store_id: str, product_ids: list[str]) -> list[Product]:
        if not product_ids:
            return []
        query = select(ProductModel).where(
            ProductModel.store_id == store_id, ProductModel.id.in_(product_ids)
        )
        return await self._provider.run(
            lambda session: [to_product(row) for row in session.execute(query).scalars()]
        )

    async def create(
        self,
        store_id: str,
        name: str,
        price: Decimal,
        image_url: str | None = None,
    ) -> Product:
        def work(session: Session) -> Product:
            row = ProductModel(
                store_id=store_id, name=name, price=price, image_url=image_url
            )
            session.add(row)
            session.commit()
            return to_product(row)

        return await self._provider.run(work)

    async def update(
        self,
        product_id: str,
        name: str,
        price: Decimal,
        image_url: str | None = None,
    ) -> Product:
        def work(session: Session) -> Product:
            row = session.get(ProductModel, product_id)
            if row is None:
                raise LookupError(f"Product not found: {product_id}")
            row.name = name
            row.price = price
            if image_url is not None:
                row.image_url = image_url
            session.commit()
            return to_product(row)

        return await self._provider.run(work)

    async def delete(self, product_id: str) -> None:
        def work(session: Session) -> None:
            session.execute(delete(ProductModel).where(ProductModel.id == product_id))
            session.commit()

        await self._provider.run(work)
