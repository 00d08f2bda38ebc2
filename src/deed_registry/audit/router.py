"""Audit log API router."""

from typing import Literal

from fastapi import APIRouter, Depends, Query

from deed_registry.common.security import require_api_key
from deed_registry.audit.schemas import AuditLogResponse

router = APIRouter()


def _get_service():
    from deed_registry.deps import get_audit_service
    return get_audit_service()


def _get_db():
    from deed_registry.deps import get_db
    return get_db()


@router.get("/audit", response_model=list[AuditLogResponse])
async def get_audit_log(
    action: Literal["CREATE", "UPDATE", "TRANSFER", "DELETE", "SEARCH"] | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    _=Depends(require_api_key),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        entries = await svc.get_events(
            session, action=action, limit=limit, offset=offset,
        )
        return [AuditLogResponse.model_validate(e) for e in entries]
