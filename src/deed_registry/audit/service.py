"""Audit service: append and query the registry's action journal."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from deed_registry.common.config import RegistrySettings
from deed_registry.audit.models import AUDIT_ACTIONS, AuditLogModel


class AuditService:
    """Append-only journal of mutating and search actions.

    Entries are written inside the caller's session, so they commit or roll
    back together with the change they describe.
    """

    def __init__(self, settings: RegistrySettings):
        self.settings = settings

    # ── Write ──

    async def record_event(
        self,
        session: AsyncSession,
        action: str,
        details: str,
        user: str | None = None,
    ) -> AuditLogModel:
        """Append a new entry to the audit log."""
        if action not in AUDIT_ACTIONS:
            raise ValueError(f"Unknown audit action: {action!r}")

        entry = AuditLogModel(
            user=user or self.settings.default_actor,
            action=action,
            details=details,
        )
        session.add(entry)
        await session.flush()
        return entry

    # ── Read ──

    async def get_events(
        self,
        session: AsyncSession,
        action: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[AuditLogModel]:
        """Paginated entry list, newest first."""
        query = select(AuditLogModel)
        if action:
            query = query.where(AuditLogModel.action == action)
        query = (
            query.order_by(AuditLogModel.timestamp.desc(), AuditLogModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await session.execute(query)
        return list(result.scalars().all())
