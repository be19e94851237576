"""SQLAlchemy store repository."""

from typing import Any

from loguru import logger
from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bytescart.domain.domains import DomainStatus
from bytescart.infrastructure.implementations.sql.database import SessionProvider
from bytescart.infrastructure.implementations.sql.models import StoreModel
from bytescart.infrastructure.repositories.store_repository import (
    Store,
    StoreNotFoundError,
    StoreRepository,
    StoreSlugTakenError,
)

UPDATABLE_FIELDS = frozenset(
    {
        "store_name",
        "theme_id",
        "about_text",
        "domain",
        "domain_status",
        "certificate_generated_at",
        "stripe_connect_id",
        "stripe_connect_status",
        "stripe_connected_at",
    }
)


def to_store(row: StoreModel) -> Store:
    return Store(
        id=row.id,
        owner_id=row.owner_id,
        store_name=row.store_name,
        subdomain_slug=row.subdomain_slug,
        theme_id=row.theme_id,
        about_text=row.about_text,
        domain=row.domain,
        domain_status=DomainStatus(row.domain_status),
        certificate_generated_at=row.certificate_generated_at,
        stripe_connect_id=row.stripe_connect_id,
        stripe_connect_status=row.stripe_connect_status,
        stripe_connected_at=row.stripe_connected_at,
        created_at=row.created_at,
    )


def _first_store(session: Session, query: Select) -> Store | None:
    row = session.execute(query.limit(1)).scalar_one_or_none()
    return to_store(row) if row else None


class SqlStoreRepository(StoreRepository):
    def __init__(self, provider: SessionProvider):
        self._provider = provider

    async def get_by_id(self, store_id: str) -> Store | None:
        def work(session: Session) -> Store | None:
            row = session.get(StoreModel, store_id)
            return to_store(row) if row else None

        return await self._provider.run(work)

    async def get_by_slug(self, slug: str) -> Store | None:
        query = select(StoreModel).where(StoreModel.subdomain_slug == slug)
        return await self._provider.run(lambda session: _first_store(session, query))

    async def get_by_owner(self, owner_id: str) -> Store | None:
        query = (
            select(StoreModel)
            .where(StoreModel.owner_id == owner_id)
            .order_by(StoreModel.created_at)
        )
        return await self._provider.run(lambda session: _first_store(session, query))

    async def get_owned(self, store_id: str, owner_id: str) -> Store | None:
        query = select(StoreModel).where(
            StoreModel.id == store_id, StoreModel.owner_id == owner_id
        )
        return await self._provider.run(lambda session: _first_store(session, query))

    async def find_live_by_domain(self, candidates: list[str]) -> Store | None:
        if not candidates:
            return None
        query = select(StoreModel).where(
            StoreModel.domain.in_(candidates),
            StoreModel.domain_status == DomainStatus.LIVE.value,
        )
        return await self._provider.run(lambda session: _first_store(session, query))

    async def domain_taken(self, domain: str, exclude_store_id: str) -> bool:
        query = (
            select(StoreModel.id)
            .where(StoreModel.domain == domain, StoreModel.id != exclude_store_id)
            .limit(1)
        )
        return await self._provider.run(
            lambda session: session.execute(query).scalar_one_or_none() is not None
        )

    async def create(
        self,
        owner_id: str,
        store_name: str,
        subdomain_slug: str,
        theme_id: str | None = None,
    ) -> Store:
        def work(session: Session) -> Store:
            existing = session.execute(
                select(StoreModel.id).where(StoreModel.subdomain_slug == subdomain_slug)
            ).scalar_one_or_none()
            if existing:
                raise StoreSlugTakenError(subdomain_slug)

            row = StoreModel(
                owner_id=owner_id,
                store_name=store_name,
                subdomain_slug=subdomain_slug,
                theme_id=theme_id,
            )
            session.add(row)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise StoreSlugTakenError(subdomain_slug) from e
            return to_store(row)

        store = await self._provider.run(work)
        logger.info(f"Created store {store.id} ({subdomain_slug})")
        return store

    async def update(self, store_id: str, **fields: Any) -> Store:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update store fields: {sorted(unknown)}")

        def work(session: Session) -> Store:
            row = session.get(StoreModel, store_id)
            if row is None:
                raise StoreNotFoundError(store_id)

            for name, value in fields.items():
                if isinstance(value, DomainStatus):
                    value = value.value
                setattr(row, name, value)

            session.commit()
            return to_store(row)

        return await self._provider.run(work)
