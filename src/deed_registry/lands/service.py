"""Land registration service."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from deed_registry.audit.models import ACTION_CREATE
from deed_registry.common.config import RegistrySettings
from deed_registry.common.exceptions import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    require_text,
)
from deed_registry.deeds.models import DeedModel
from deed_registry.lands.models import LandModel


class LandService:
    """Land registration and ownership history."""

    def __init__(self, settings: RegistrySettings, audit_service=None):
        self.settings = settings
        self.audit_service = audit_service

    async def create_land(
        self,
        session: AsyncSession,
        land_number: str,
        district: str,
        division: str,
        area: float,
        area_unit: str,
        map_reference: str = "",
        local_division: str = "",
        actor: str | None = None,
    ) -> LandModel:
        require_text(
            land_number=land_number, district=district,
            division=division, area_unit=area_unit,
        )
        if area <= 0:
            raise InvalidInputError("Field 'area' must be positive")

        if await self.get_land(session, land_number) is not None:
            raise ConflictError(f"Land {land_number} already exists")

        land = LandModel(
            land_number=land_number,
            district=district,
            division=division,
            local_division=local_division,
            area=area,
            area_unit=area_unit,
            map_reference=map_reference,
        )
        session.add(land)
        try:
            await session.flush()
        except IntegrityError as exc:
            raise ConflictError(f"Land {land_number} already exists") from exc

        if self.audit_service:
            await self.audit_service.record_event(
                session, ACTION_CREATE, f"Registered land: {land_number}", user=actor,
            )
        return land

    async def get_land(
        self, session: AsyncSession, land_number: str
    ) -> LandModel | None:
        return await session.get(LandModel, land_number)

    async def list_lands(
        self, session: AsyncSession, district: str | None = None,
    ) -> list[LandModel]:
        query = select(LandModel)
        if district:
            query = query.where(LandModel.district == district)
        result = await session.execute(query.order_by(LandModel.land_number))
        return list(result.scalars().all())

    async def land_history(
        self, session: AsyncSession, land_number: str
    ) -> list[DeedModel]:
        """All deeds ever issued over a land, most recent registration first."""
        result = await session.execute(
            select(DeedModel)
            .where(DeedModel.land_number == land_number)
            .order_by(
                DeedModel.registration_date.desc(),
                DeedModel.deed_number.desc(),
            )
        )
        return list(result.scalars().all())

    async def require_land(self, session: AsyncSession, land_number: str) -> LandModel:
        land = await self.get_land(session, land_number)
        if land is None:
            raise NotFoundError(f"Land {land_number} does not exist")
        return land
