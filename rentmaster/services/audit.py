"""Audit logging service."""

from typing import Any, Optional
from uuid import UUID

from fastapi.encoders import jsonable_encoder
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession

from rentmaster.core.security import AuthenticatedUser
from rentmaster.models.audit import AuditLog
from rentmaster.models.enums import AuditAction


def snapshot(obj: Any) -> dict[str, Any]:
    """JSON-safe copy of an ORM row's column values."""
    mapper = inspect(obj).mapper
    return jsonable_encoder({attr.key: getattr(obj, attr.key) for attr in mapper.column_attrs})


class AuditService:
    """Service for creating audit log entries.

    Entries are added to the caller's session and committed with the
    business change they describe.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def log(
        self,
        action: AuditAction,
        entity_table: str,
        entity_id: Optional[UUID],
        user_id: Optional[UUID] = None,
        old_data: Optional[dict[str, Any]] = None,
        new_data: Optional[dict[str, Any]] = None,
        ip_address: Optional[str] = None,
    ) -> AuditLog:
        """Create an audit log entry."""
        entry = AuditLog(
            action=action,
            entity_table=entity_table,
            entity_id=entity_id,
            user_id=user_id,
            old_data=old_data,
            new_data=new_data,
            ip_address=ip_address,
        )
        self.db.add(entry)
        await self.db.flush()
        return entry

    async def log_create(
        self,
        entity_table: str,
        obj: Any,
        actor: AuthenticatedUser,
        ip_address: Optional[str] = None,
    ) -> AuditLog:
        """Log creation of an entity."""
        return await self.log(
            action=AuditAction.CREATE,
            entity_table=entity_table,
            entity_id=obj.id,
            user_id=actor.db_user_id,
            new_data=snapshot(obj),
            ip_address=ip_address,
        )

    async def log_update(
        self,
        entity_table: str,
        obj: Any,
        old_data: dict[str, Any],
        actor: AuthenticatedUser,
        ip_address: Optional[str] = None,
        action: AuditAction = AuditAction.UPDATE,
    ) -> AuditLog:
        """Log an update (or termination) with before/after snapshots."""
        return await self.log(
            action=action,
            entity_table=entity_table,
            entity_id=obj.id,
            user_id=actor.db_user_id,
            old_data=old_data,
            new_data=snapshot(obj),
            ip_address=ip_address,
        )

    async def log_delete(
        self,
        entity_table: str,
        old_data: dict[str, Any],
        entity_id: UUID,
        actor: AuthenticatedUser,
        ip_address: Optional[str] = None,
    ) -> AuditLog:
        """Log deletion of an entity."""
        return await self.log(
            action=AuditAction.DELETE,
            entity_table=entity_table,
            entity_id=entity_id,
            user_id=actor.db_user_id,
            old_data=old_data,
            ip_address=ip_address,
        )
