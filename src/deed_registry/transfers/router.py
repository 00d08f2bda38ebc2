"""Ownership transfer API router."""

from fastapi import APIRouter, Depends, HTTPException

from deed_registry.common.exceptions import RegistryError
from deed_registry.common.security import require_api_key, resolve_actor
from deed_registry.deeds.schemas import DeedResponse
from deed_registry.transfers.schemas import TransferRequest

router = APIRouter()


def _get_service():
    from deed_registry.deps import get_transfer_service
    return get_transfer_service()


def _get_db():
    from deed_registry.deps import get_db
    return get_db()


@router.post(
    "/deeds/{deed_number}/transfer", response_model=DeedResponse, status_code=201,
)
async def transfer_ownership(
    deed_number: str,
    body: TransferRequest,
    actor: str = Depends(resolve_actor),
    _=Depends(require_api_key),
):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            new_deed = await svc.transfer(
                session, deed_number, actor=actor, **body.model_dump()
            )
            return DeedResponse.model_validate(new_deed)
    except RegistryError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
