"""SQLAlchemy shipping location repository."""

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from bytescart.infrastructure.implementations.sql.database import SessionProvider
from bytescart.infrastructure.implementations.sql.models import ShippingLocationModel
from bytescart.infrastructure.repositories.shipping_location_repository import (
    ShippingLocation,
    ShippingLocationRepository,
)


def to_location(row: ShippingLocationModel) -> ShippingLocation:
    return ShippingLocation(
        id=row.id,
        store_id=row.store_id,
        country=row.country,
        cities=list(row.cities or []),
        sort_order=row.sort_order,
    )


class SqlShippingLocationRepository(ShippingLocationRepository):
    def __init__(self, provider: SessionProvider):
        self._provider = provider

    async def list_for_store(self, store_id: str) -> list[ShippingLocation]:
        query = (
            select(ShippingLocationModel)
            .where(ShippingLocationModel.store_id == store_id)
            .order_by(ShippingLocationModel.sort_order.asc())
        )
        return await self._provider.run(
            lambda session: [to_location(row) for row in session.execute(query).scalars()]
        )

    async def get(self, location_id: str) -> ShippingLocation | None:
        def work(session: Session) -> ShippingLocation | None:
            row = session.get(ShippingLocationModel, location_id)
            return to_location(row) if row else None

        return await self._provider.run(work)

    async def create(
        self, store_id: str, country: str, cities: list[str]
    ) -> ShippingLocation:
        def work(session: Session) -> ShippingLocation:
            last = session.execute(
                select(func.max(ShippingLocationModel.sort_order)).where(
                    ShippingLocationModel.store_id == store_id
                )
            ).scalar()
            row = ShippingLocationModel(
                store_id=store_id,
                country=country,
                cities=list(cities),
                sort_order=0 if last is None else last + 1,
            )
            session.add(row)
            session.commit()
            return to_location(row)

        return await self._provider.run(work)

    async def update(
        self, location_id: str, country: str, cities: list[str]
    ) -> ShippingLocation:
        def work(session: Session) -> ShippingLocation:
            row = session.get(ShippingLocationModel, location_id)
            if row is None:
                raise LookupError(f"Shipping location not found: {location_id}")
            row.country = country
            row.cities = list(cities)
            session.commit()
            return to_location(row)

        return await self._provider.run(work)

    async def delete(self, location_id: str) -> None:
        def work(session: Session) -> None:
            session.execute(
                delete(ShippingLocationModel).where(
                    ShippingLocationModel.id == location_id
                )
            )
            session.commit()

        await self._provider.run(work)

    async def reorder(self, store_id: str, location_ids: list[str]) -> None:
        positions = {location_id: index for index, location_id in enumerate(location_ids)}

        def work(session: Session) -> None:
            rows = session.execute(
                select(ShippingLocationModel).where(
                    ShippingLocationModel.store_id == store_id,
                    ShippingLocationModel.id.in_(list(positions)),
                )
            ).scalars()
            for row in rows:
                row.sort_order = positions[row.id]
            session.commit()

        await self._provider.run(work)
