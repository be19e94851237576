"""
Audit trail for sensitive mutations.

Writing an audit record is best-effort: a failure is logged through
secure_log and never propagates into the operation being audited.
"""

from dataclasses import dataclass, field
from typing import Any

from starlette.requests import Request

from bytescart.core.secure_log import secure_log
from bytescart.infrastructure.repositories.audit_repository import (
    AuditAction,
    AuditRecord,
    AuditRepository,
)

UNKNOWN_IP = "unknown"


@dataclass
class AuditLogEntry:
    """What to record. Only ``action`` and ``resource_type`` are required."""

    action: AuditAction
    resource_type: str
    actor_id: str | None = None
    store_id: str | None = None
    resource_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    ip_address: str | None = None


class AuditLogger:
    def __init__(self, repository: AuditRepository):
        self.repository = repository

    async def log(self, entry: AuditLogEntry) -> AuditRecord | None:
        """
        Persist an audit entry.

        Args:
            entry: Entry to record

        Returns:
            The stored record, or None when it could not be written
        """
        try:
            return await self.repository.append(
                action=entry.action,
                resource_type=entry.resource_type,
                actor_id=entry.actor_id,
                store_id=entry.store_id,
                resource_id=entry.resource_id,
                metadata=entry.metadata,
                ip_address=entry.ip_address,
            )
        except Exception as e:
            secure_log.error(
                "[Audit] Failed to write audit log",
                e,
                {
                    "action": AuditAction(entry.action).value,
                    "resource_type": entry.resource_type,
                    "resource_id": entry.resource_id,
                },
            )
            return None


def get_request_ip(request: Request) -> str:
    """
    Client IP of a request.

    Uses the first hop of ``x-forwarded-for``, then ``x-real-ip``, then
    "unknown".
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip() or UNKNOWN_IP
    return request.headers.get("x-real-ip") or UNKNOWN_IP
