"""Ledger and deed verification API router."""

from fastapi import APIRouter, HTTPException, Query

from deed_registry.common.exceptions import RegistryError
from deed_registry.integrity.schemas import LedgerEntryResponse, VerificationResponse

router = APIRouter()


def _get_service():
    from deed_registry.deps import get_integrity_service
    return get_integrity_service()


def _get_db():
    from deed_registry.deps import get_db
    return get_db()


@router.get("/deeds/{deed_number}/verify", response_model=VerificationResponse)
async def verify_deed(deed_number: str):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            result = await svc.verify(session, deed_number)
            return VerificationResponse.model_validate(result)
    except RegistryError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/ledger", response_model=list[LedgerEntryResponse])
async def list_ledger(
    limit: int | None = Query(None, ge=1, le=1000),
    offset: int = Query(0, ge=0),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        entries = await svc.ledger.all_entries(session, limit=limit, offset=offset)
        return [LedgerEntryResponse.model_validate(e) for e in entries]


@router.get("/ledger/{deed_number}", response_model=LedgerEntryResponse)
async def get_ledger_entry(deed_number: str):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        entry = await svc.ledger.lookup(session, deed_number)
        if entry is None:
            raise HTTPException(
                status_code=404, detail=f"Deed {deed_number} has no ledger record"
            )
        return LedgerEntryResponse.model_validate(entry)
