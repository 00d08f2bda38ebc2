"""Land API router."""

from fastapi import APIRouter, Depends, HTTPException, Query

from deed_registry.common.exceptions import RegistryError
from deed_registry.common.security import require_api_key, resolve_actor
from deed_registry.deeds.schemas import DeedResponse
from deed_registry.lands.schemas import LandCreate, LandResponse

router = APIRouter()


def _get_service():
    from deed_registry.deps import get_land_service
    return get_land_service()


def _get_db():
    from deed_registry.deps import get_db
    return get_db()


@router.post("/lands", response_model=LandResponse, status_code=201)
async def create_land(
    body: LandCreate,
    actor: str = Depends(resolve_actor),
    _=Depends(require_api_key),
):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            land = await svc.create_land(session, actor=actor, **body.model_dump())
            return LandResponse.model_validate(land)
    except RegistryError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/lands", response_model=list[LandResponse])
async def list_lands(district: str | None = Query(None)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        lands = await svc.list_lands(session, district=district)
        return [LandResponse.model_validate(land) for land in lands]


@router.get("/lands/{land_number}", response_model=LandResponse)
async def get_land(land_number: str):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        land = await svc.get_land(session, land_number)
        if land is None:
            raise HTTPException(status_code=404, detail=f"Land {land_number} does not exist")
        return LandResponse.model_validate(land)


@router.get("/lands/{land_number}/history", response_model=list[DeedResponse])
async def land_history(land_number: str):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        deeds = await svc.land_history(session, land_number)
        return [DeedResponse.model_validate(d) for d in deeds]
