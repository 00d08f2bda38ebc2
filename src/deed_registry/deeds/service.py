"""Deed service: registration, update, deletion, search and numbering."""

from datetime import date
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from deed_registry.audit.models import ACTION_CREATE, ACTION_DELETE, ACTION_SEARCH, ACTION_UPDATE
from deed_registry.common.config import RegistrySettings
from deed_registry.common.exceptions import (
    ConflictError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    require_text,
)
from deed_registry.common.logging import get_logger
from deed_registry.deeds.identifiers import next_deed_number
from deed_registry.deeds.models import (
    DEED_STATUSES,
    STATUS_ACTIVE,
    STATUS_TRANSFERRED,
    DeedModel,
)
from deed_registry.integrity.models import LedgerEntryModel
from deed_registry.lands.service import LandService
from deed_registry.owners.service import OwnerService

logger = get_logger("deeds")

UPDATABLE_FIELDS = (
    "land_number",
    "owner_nic",
    "registration_date",
    "deed_type",
    "status",
    "notes",
    "notary_name",
    "survey_plan_number",
)

NULLABLE_FIELDS = frozenset({"notes"})


class DeedService:
    """Deed registry operations.

    Every method works inside the caller's session; the session boundary is
    the transaction, so a failure anywhere leaves no partial write behind.
    """

    def __init__(
        self,
        settings: RegistrySettings,
        lands: LandService,
        owners: OwnerService,
        audit_service=None,
        integrity_service=None,
    ):
        self.settings = settings
        self.lands = lands
        self.owners = owners
        self.audit_service = audit_service
        self.integrity_service = integrity_service

    # ── Numbering ──

    async def allocate_deed_number(
        self, session: AsyncSession, previous: str | None = None,
    ) -> str:
        """Next deed number, computed against the identifiers in this transaction.

        Numbers that were sealed in the ledger stay taken even after their
        deed is deleted, so they are part of the existing set.
        """
        if previous:
            chain_prefix = f"{previous}-"
            deed_filter = DeedModel.deed_number.startswith(chain_prefix, autoescape=True)
            ledger_filter = LedgerEntryModel.deed_number.startswith(
                chain_prefix, autoescape=True
            )
        else:
            deed_filter = ~DeedModel.deed_number.contains("-")
            ledger_filter = ~LedgerEntryModel.deed_number.contains("-")

        deed_rows = await session.execute(select(DeedModel.deed_number).where(deed_filter))
        ledger_rows = await session.execute(
            select(LedgerEntryModel.deed_number).where(ledger_filter)
        )
        existing = set(deed_rows.scalars().all()) | set(ledger_rows.scalars().all())
        return next_deed_number(existing, previous)

    # ── Create ──

    async def create_deed(
        self,
        session: AsyncSession,
        land_number: str,
        owner_nic: str,
        registration_date: date,
        deed_type: str,
        deed_number: str | None = None,
        status: str = STATUS_ACTIVE,
        notes: str | None = None,
        notary_name: str = "",
        survey_plan_number: str = "",
        actor: str | None = None,
    ) -> DeedModel:
        """Register a deed over an existing land for an existing owner."""
        require_text(
            land_number=land_number, owner_nic=owner_nic, deed_type=deed_type,
            registration_date=registration_date,
        )
        if status not in DEED_STATUSES:
            raise InvalidInputError(f"Unknown deed status: {status}")

        if not deed_number:
            deed_number = await self.allocate_deed_number(session)

        if await self.get_deed(session, deed_number) is not None:
            raise ConflictError(f"Deed {deed_number} already exists")
        await self.lands.require_land(session, land_number)
        await self.owners.require_owner(session, owner_nic)

        deed = await self.insert_deed(
            session,
            DeedModel(
                deed_number=deed_number,
                land_number=land_number,
                owner_nic=owner_nic,
                registration_date=registration_date,
                deed_type=deed_type,
                status=status,
                notes=notes,
                notary_name=notary_name,
                survey_plan_number=survey_plan_number,
            ),
        )

        if self.audit_service:
            await self.audit_service.record_event(
                session, ACTION_CREATE,
                f"Registered deed: {deed_number} for land {land_number}",
                user=actor,
            )
        logger.info("Registered deed %s for land %s", deed_number, land_number)
        return deed

    async def insert_deed(self, session: AsyncSession, deed: DeedModel) -> DeedModel:
        """Insert a validated deed and seal it in the ledger.

        A concurrent insert of the same number surfaces here as a unique-key
        violation and is reported as a conflict.
        """
        session.add(deed)
        try:
            await session.flush()
        except IntegrityError as exc:
            raise ConflictError(f"Deed {deed.deed_number} already exists") from exc

        if self.integrity_service:
            await self.integrity_service.seal(session, deed)
        return deed

    # ── Read ──

    async def get_deed(self, session: AsyncSession, deed_number: str) -> DeedModel | None:
        return await session.get(DeedModel, deed_number)

    async def require_deed(
        self, session: AsyncSession, deed_number: str, for_update: bool = False,
    ) -> DeedModel:
        query = select(DeedModel).where(DeedModel.deed_number == deed_number)
        if for_update:
            query = query.with_for_update()
        result = await session.execute(query)
        deed = result.scalar_one_or_none()
        if deed is None:
            raise NotFoundError(f"Deed {deed_number} does not exist")
        return deed

    async def list_deeds(
        self,
        session: AsyncSession,
        status: str | None = None,
        offset: int = 0,
        limit: int = 50,
    ) -> list[DeedModel]:
        query = select(DeedModel)
        if status:
            query = query.where(DeedModel.status == status)
        query = query.order_by(DeedModel.deed_number).offset(offset).limit(limit)
        result = await session.execute(query)
        return list(result.scalars().all())

    async def status_counts(self, session: AsyncSession) -> dict[str, int]:
        """Deed totals for the registry overview: all, ACTIVE and TRANSFERRED."""
        result = await session.execute(
            select(DeedModel.status, func.count()).group_by(DeedModel.status)
        )
        by_status = {status: count for status, count in result.all()}
        return {
            "total": sum(by_status.values()),
            "active": by_status.get(STATUS_ACTIVE, 0),
            "transferred": by_status.get(STATUS_TRANSFERRED, 0),
        }

    async def search_deeds(
        self, session: AsyncSession, query: str, actor: str | None = None,
    ) -> list[DeedModel]:
        """Case-insensitive substring match on deed number, land number and owner NIC.

        A blank query matches nothing.
        """
        if not query or not query.strip():
            return []

        needle = query.lower()
        result = await session.execute(
            select(DeedModel)
            .where(
                or_(
                    func.lower(DeedModel.deed_number).contains(needle, autoescape=True),
                    func.lower(DeedModel.land_number).contains(needle, autoescape=True),
                    func.lower(DeedModel.owner_nic).contains(needle, autoescape=True),
                )
            )
            .order_by(DeedModel.deed_number)
        )
        deeds = list(result.scalars().all())

        if self.audit_service:
            await self.audit_service.record_event(
                session, ACTION_SEARCH,
                f"Searched deeds for '{query}' ({len(deeds)} results)",
                user=actor,
            )
        return deeds

    # ── Update / Delete ──

    async def update_deed(
        self,
        session: AsyncSession,
        deed_number: str,
        actor: str | None = None,
        **updates: Any,
    ) -> DeedModel:
        """Replace the mutable fields of a deed.

        Only the fields passed are changed. ``None`` clears a nullable field
        and is rejected for a required one.

        The sealed digest is left untouched, so an edit to any sealed field
        shows up as a failed verification afterwards.
        """
        deed = await self.require_deed(session, deed_number, for_update=True)
        changes = {
            field: updates[field] for field in UPDATABLE_FIELDS if field in updates
        }
        for field, value in changes.items():
            if value is None and field not in NULLABLE_FIELDS:
                raise InvalidInputError(f"Field '{field}' is required")

        if "land_number" in changes:
            await self.lands.require_land(session, changes["land_number"])
        if "owner_nic" in changes:
            await self.owners.require_owner(session, changes["owner_nic"])
        if "status" in changes:
            new_status = changes["status"]
            if new_status not in DEED_STATUSES:
                raise InvalidInputError(f"Unknown deed status: {new_status}")
            if deed.status == STATUS_TRANSFERRED and new_status != STATUS_TRANSFERRED:
                raise InvalidStateError(
                    f"Deed {deed_number} has been transferred and cannot be reactivated"
                )

        for field, value in changes.items():
            setattr(deed, field, value)
        await session.flush()

        if self.audit_service:
            changed = ", ".join(sorted(changes)) or "no fields"
            await self.audit_service.record_event(
                session, ACTION_UPDATE, f"Updated deed: {deed_number} ({changed})",
                user=actor,
            )
        return deed

    async def delete_deed(
        self, session: AsyncSession, deed_number: str, actor: str | None = None,
    ) -> DeedModel:
        """Remove a deed. Its ledger entry is kept."""
        deed = await self.require_deed(session, deed_number, for_update=True)
        land_number, owner_nic = deed.land_number, deed.owner_nic

        await session.delete(deed)
        await session.flush()

        if self.audit_service:
            await self.audit_service.record_event(
                session, ACTION_DELETE,
                f"Deleted deed: {deed_number} (land {land_number}, owner {owner_nic})",
                user=actor,
            )
        logger.info("Deleted deed %s", deed_number)
        return deed
