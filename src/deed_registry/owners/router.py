"""Owner API router."""

from fastapi import APIRouter, Depends, HTTPException, Query

from deed_registry.common.exceptions import RegistryError
from deed_registry.common.security import require_api_key, resolve_actor
from deed_registry.owners.schemas import OwnerCreate, OwnerResponse

router = APIRouter()


def _get_service():
    from deed_registry.deps import get_owner_service
    return get_owner_service()


def _get_db():
    from deed_registry.deps import get_db
    return get_db()


@router.post("/owners", response_model=OwnerResponse, status_code=201)
async def create_owner(
    body: OwnerCreate,
    actor: str = Depends(resolve_actor),
    _=Depends(require_api_key),
):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            owner = await svc.create_owner(session, actor=actor, **body.model_dump())
            return OwnerResponse.model_validate(owner)
    except RegistryError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/owners", response_model=list[OwnerResponse])
async def list_owners(
    q: str | None = Query(None, description="Match on NIC or name"),
    limit: int = Query(50, ge=1, le=200),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        owners = await svc.list_owners(session, query=q, limit=limit)
        return [OwnerResponse.model_validate(o) for o in owners]


@router.get("/owners/{nic}", response_model=OwnerResponse)
async def get_owner(nic: str):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        owner = await svc.get_owner(session, nic)
        if owner is None:
            raise HTTPException(status_code=404, detail=f"Owner {nic} does not exist")
        return OwnerResponse.model_validate(owner)
