"""SQLAlchemy audit log repository (append-only)."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from bytescart.infrastructure.implementations.sql.database import SessionProvider
from bytescart.infrastructure.implementations.sql.models import AuditLogModel
from bytescart.infrastructure.repositories.audit_repository import (
    AuditAction,
    AuditRecord,
    AuditRepository,
)


def to_record(row: AuditLogModel) -> AuditRecord:
    return AuditRecord(
        id=row.id,
        action=AuditAction(row.action),
        resource_type=row.resource_type,
        actor_id=row.actor_id,
        store_id=row.store_id,
        resource_id=row.resource_id,
        metadata=dict(row.details or {}),
        ip_address=row.ip_address,
        created_at=row.created_at,
    )


class SqlAuditRepository(AuditRepository):
    def __init__(self, provider: SessionProvider):
        self._provider = provider

    async def append(
        self,
        action: AuditAction,
        resource_type: str,
        actor_id: str | None = None,
        store_id: str | None = None,
        resource_id: str | None = None,
        metadata: dict[str, Any] | None = None,
        ip_address: str | None = None,
    ) -> AuditRecord:
        def work(session: Session) -> AuditRecord:
            row = AuditLogModel(
                action=AuditAction(action).value,
                resource_type=resource_type,
                actor_id=actor_id,
                store_id=store_id,
                resource_id=resource_id,
                details=metadata or {},
                ip_address=ip_address,
            )
            session.add(row)
            session.commit()
            return to_record(row)

        return await self._provider.run(work)

    async def list_recent(
        self,
        actor_id: str | None = None,
        action: AuditAction | None = None,
        limit: int = 100,
    ) -> list[AuditRecord]:
        query = select(AuditLogModel)
        if actor_id is not None:
            query = query.where(AuditLogModel.actor_id == actor_id)
        if action is not None:
            query = query.where(AuditLogModel.action == AuditAction(action).value)
        query = query.order_by(AuditLogModel.created_at.desc()).limit(limit)

        return await self._provider.run(
            lambda session: [to_record(row) for row in session.execute(query).scalars()]
        )
