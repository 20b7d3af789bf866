"""Audit log repository. Append-only; indexed reads by time and by session."""

from __future__ import annotations

from sqlalchemy import ColumnElement, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.audit_log import (
    AuditLogEntryCreate,
    AuditLogFilters,
    AuditLogResult,
)
from app.domain.enums import AuditCategory, AuditSeverity
from app.infrastructure.persistence.models.audit_log import AuditLog
from app.shared.utils.datetime import ensure_utc
from app.shared.utils.sanitization import escape_like


def _orm_to_result(row: AuditLog) -> AuditLogResult:
    """Map ORM to application DTO."""
    return AuditLogResult(
        id=row.id,
        tenant_id=row.tenant_id,
        user_id=row.user_id,
        session_id=row.session_id,
        action=row.action,
        category=AuditCategory(row.category),
        severity=AuditSeverity(row.severity),
        resource_type=row.resource_type,
        resource_id=row.resource_id,
        description=row.description,
        old_values=row.old_values,
        new_values=row.new_values,
        details=row.details,
        ip_address=row.ip_address,
        user_agent=row.user_agent,
        request_id=row.request_id,
        timestamp=ensure_utc(row.timestamp),
        success=row.success,
        error_message=row.error_message,
    )


def _conditions(tenant_id: str, filters: AuditLogFilters) -> list[ColumnElement[bool]]:
    conditions: list[ColumnElement[bool]] = [AuditLog.tenant_id == tenant_id]
    if filters.resource_type is not None:
        conditions.append(AuditLog.resource_type == filters.resource_type)
    if filters.action is not None:
        conditions.append(AuditLog.action == filters.action)
    if filters.user_id is not None:
        conditions.append(AuditLog.user_id == filters.user_id)
    if filters.category is not None:
        conditions.append(AuditLog.category == filters.category.value)
    if filters.severity is not None:
        conditions.append(AuditLog.severity == filters.severity.value)
    if filters.since is not None:
        conditions.append(AuditLog.timestamp >= filters.since)
    if filters.until is not None:
        conditions.append(AuditLog.timestamp <= filters.until)
    if filters.search:
        pattern = f"%{escape_like(filters.search.strip())}%"
        conditions.append(
            or_(
                AuditLog.description.ilike(pattern, escape="\\"),
                AuditLog.action.ilike(pattern, escape="\\"),
                AuditLog.resource_type.ilike(pattern, escape="\\"),
            )
        )
    return conditions


class AuditLogRepository:
    """Append-only audit log repository. No update/delete."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create(self, entry: AuditLogEntryCreate) -> AuditLogResult:
        """Append one audit log entry; return created record."""
        row = AuditLog(
            tenant_id=entry.tenant_id,
            user_id=entry.user_id,
            session_id=entry.session_id,
            action=entry.action,
            category=entry.category.value,
            severity=entry.severity.value,
            resource_type=entry.resource_type,
            resource_id=entry.resource_id,
            description=entry.description,
            old_values=entry.old_values,
            new_values=entry.new_values,
            details=entry.details,
            ip_address=entry.ip_address,
            user_agent=entry.user_agent,
            request_id=entry.request_id,
            success=entry.success,
            error_message=entry.error_message,
        )
        self.db.add(row)
        await self.db.flush()
        await self.db.refresh(row)
        return _orm_to_result(row)

    async def list(
        self,
        tenant_id: str,
        filters: AuditLogFilters | None = None,
        *,
        skip: int = 0,
        limit: int = 100,
    ) -> list[AuditLogResult]:
        """Entries for tenant matching filters, newest first."""
        stmt = (
            select(AuditLog)
            .where(*_conditions(tenant_id, filters or AuditLogFilters()))
            .order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [_orm_to_result(r) for r in result.scalars().all()]

    async def count(self, tenant_id: str, filters: AuditLogFilters | None = None) -> int:
        total = await self.db.scalar(
            select(func.count())
            .select_from(AuditLog)
            .where(*_conditions(tenant_id, filters or AuditLogFilters()))
        )
        return int(total or 0)

    async def get_recent_logs(self, tenant_id: str, n: int = 100) -> list[AuditLogResult]:
        """The n most recent entries for tenant (newest first)."""
        return await self.list(tenant_id, skip=0, limit=n)

    async def get_session_logs(
        self, tenant_id: str, session_id: str, *, limit: int = 1000
    ) -> list[AuditLogResult]:
        """Entries recorded under one login session, in chronological order."""
        result = await self.db.execute(
            select(AuditLog)
            .where(AuditLog.tenant_id == tenant_id, AuditLog.session_id == session_id)
            .order_by(AuditLog.timestamp.asc(), AuditLog.id.asc())
            .limit(limit)
        )
        return [_orm_to_result(r) for r in result.scalars().all()]
