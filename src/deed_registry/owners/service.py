"""Owner registration service."""

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from deed_registry.audit.models import ACTION_CREATE
from deed_registry.common.config import RegistrySettings
from deed_registry.common.exceptions import ConflictError, NotFoundError, require_text
from deed_registry.owners.models import OwnerModel


class OwnerService:
    """Owner registration and lookup by identity key."""

    def __init__(self, settings: RegistrySettings, audit_service=None):
        self.settings = settings
        self.audit_service = audit_service

    async def create_owner(
        self,
        session: AsyncSession,
        nic: str,
        full_name: str,
        address: str = "",
        contact_number: str = "",
        previous_owner: str | None = None,
        actor: str | None = None,
    ) -> OwnerModel:
        require_text(nic=nic, full_name=full_name)

        if await self.get_owner(session, nic) is not None:
            raise ConflictError(f"Owner {nic} already exists")

        owner = OwnerModel(
            nic=nic,
            full_name=full_name,
            address=address,
            contact_number=contact_number,
            previous_owner=previous_owner,
        )
        session.add(owner)
        try:
            await session.flush()
        except IntegrityError as exc:
            raise ConflictError(f"Owner {nic} already exists") from exc

        if self.audit_service:
            await self.audit_service.record_event(
                session, ACTION_CREATE,
                f"Registered owner: {full_name} ({nic})", user=actor,
            )
        return owner

    async def get_owner(self, session: AsyncSession, nic: str) -> OwnerModel | None:
        return await session.get(OwnerModel, nic)

    async def require_owner(self, session: AsyncSession, nic: str) -> OwnerModel:
        owner = await self.get_owner(session, nic)
        if owner is None:
            raise NotFoundError(f"Owner {nic} does not exist")
        return owner

    async def list_owners(
        self, session: AsyncSession, query: str | None = None, limit: int = 50,
    ) -> list[OwnerModel]:
        """List owners, optionally filtered by NIC or name (case-insensitive)."""
        stmt = select(OwnerModel)
        if query and query.strip():
            needle = query.strip().lower()
            stmt = stmt.where(
                or_(
                    func.lower(OwnerModel.nic).contains(needle, autoescape=True),
                    func.lower(OwnerModel.full_name).contains(needle, autoescape=True),
                )
            )
        result = await session.execute(stmt.order_by(OwnerModel.nic).limit(limit))
        return list(result.scalars().all())
