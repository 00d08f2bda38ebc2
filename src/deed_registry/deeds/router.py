"""Deed API router."""

from fastapi import APIRouter, Depends, HTTPException, Query

from deed_registry.common.exceptions import RegistryError
from deed_registry.common.schemas import MessageResponse
from deed_registry.common.security import require_api_key, resolve_actor
from deed_registry.deeds.schemas import (
    DeedCreate,
    DeedResponse,
    DeedStatsResponse,
    DeedStatus,
    DeedUpdate,
    NextDeedNumberResponse,
)

router = APIRouter()


def _get_service():
    from deed_registry.deps import get_deed_service
    return get_deed_service()


def _get_db():
    from deed_registry.deps import get_db
    return get_db()


# Static paths are declared before /deeds/{deed_number}

@router.get("/deeds/next-id", response_model=NextDeedNumberResponse)
async def next_deed_number(previous: str | None = Query(None)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        deed_number = await svc.allocate_deed_number(session, previous=previous)
        return NextDeedNumberResponse(deed_number=deed_number, previous=previous)


@router.get("/deeds/search", response_model=list[DeedResponse])
async def search_deeds(
    q: str = Query(""),
    actor: str = Depends(resolve_actor),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        deeds = await svc.search_deeds(session, q, actor=actor)
        return [DeedResponse.model_validate(d) for d in deeds]


@router.get("/deeds/stats", response_model=DeedStatsResponse)
async def deed_stats():
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        return DeedStatsResponse(**await svc.status_counts(session))


@router.post("/deeds", response_model=DeedResponse, status_code=201)
async def create_deed(
    body: DeedCreate,
    actor: str = Depends(resolve_actor),
    _=Depends(require_api_key),
):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            deed = await svc.create_deed(session, actor=actor, **body.model_dump())
            return DeedResponse.model_validate(deed)
    except RegistryError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/deeds", response_model=list[DeedResponse])
async def list_deeds(
    status: DeedStatus | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1),
):
    from deed_registry.common.config import get_settings

    settings = get_settings()
    page_size = min(page_size or settings.default_page_size, settings.max_page_size)
    svc = _get_service()
    db = _get_db()
    offset = (page - 1) * page_size
    async with db.get_session() as session:
        deeds = await svc.list_deeds(session, status=status, offset=offset, limit=page_size)
        return [DeedResponse.model_validate(d) for d in deeds]


@router.get("/deeds/{deed_number}", response_model=DeedResponse)
async def get_deed(deed_number: str):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        deed = await svc.get_deed(session, deed_number)
        if deed is None:
            raise HTTPException(status_code=404, detail=f"Deed {deed_number} does not exist")
        return DeedResponse.model_validate(deed)


@router.patch("/deeds/{deed_number}", response_model=DeedResponse)
async def update_deed(
    deed_number: str,
    body: DeedUpdate,
    actor: str = Depends(resolve_actor),
    _=Depends(require_api_key),
):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            deed = await svc.update_deed(
                session, deed_number, actor=actor, **body.model_dump(exclude_unset=True)
            )
            return DeedResponse.model_validate(deed)
    except RegistryError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/deeds/{deed_number}", response_model=MessageResponse)
async def delete_deed(
    deed_number: str,
    actor: str = Depends(resolve_actor),
    _=Depends(require_api_key),
):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            await svc.delete_deed(session, deed_number, actor=actor)
    except RegistryError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return MessageResponse(message=f"Deed {deed_number} deleted")
