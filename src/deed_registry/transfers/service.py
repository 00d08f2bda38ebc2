"""Ownership transfer workflow."""

from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from deed_registry.audit.models import ACTION_TRANSFER
from deed_registry.common.exceptions import ConflictError, InvalidStateError, require_text
from deed_registry.common.logging import get_logger
from deed_registry.deeds.models import STATUS_ACTIVE, STATUS_TRANSFERRED, DeedModel
from deed_registry.deeds.service import DeedService

logger = get_logger("transfers")


class TransferService:
    """Retires an ACTIVE deed and issues its successor in one transaction.

    All checks run before the first write. Run it inside a single
    ``DatabaseManager.get_session()`` block: any exception rolls the whole
    transfer back, so the old deed is never left TRANSFERRED without a new
    ACTIVE deed, nor the reverse.
    """

    def __init__(self, deeds: DeedService, audit_service=None):
        self.deeds = deeds
        self.audit_service = audit_service

    async def transfer(
        self,
        session: AsyncSession,
        old_deed_number: str,
        owner_nic: str,
        registration_date: date,
        deed_type: str,
        deed_number: str | None = None,
        notes: str | None = None,
        notary_name: str = "",
        survey_plan_number: str | None = None,
        actor: str | None = None,
    ) -> DeedModel:
        """Transfer a land to a new owner.

        Returns:
            The new ACTIVE deed, referencing the superseded one.

        Raises:
            NotFoundError: the old deed or the new owner does not exist
            InvalidStateError: the old deed is not ACTIVE
            ConflictError: the new deed number is already taken
        """
        require_text(
            owner_nic=owner_nic, deed_type=deed_type,
            registration_date=registration_date,
        )

        old = await self.deeds.require_deed(session, old_deed_number, for_update=True)
        if old.status != STATUS_ACTIVE:
            raise InvalidStateError(f"Deed {old_deed_number} is not active")

        await self.deeds.owners.require_owner(session, owner_nic)

        if not deed_number:
            deed_number = await self.deeds.allocate_deed_number(
                session, previous=old_deed_number
            )
        if await self.deeds.get_deed(session, deed_number) is not None:
            raise ConflictError(f"Deed {deed_number} already exists")

        # Snapshot before the old deed is touched
        previous_owner_nic = old.owner_nic
        previous_registration_date = old.registration_date

        old.status = STATUS_TRANSFERRED
        new_deed = await self.deeds.insert_deed(
            session,
            DeedModel(
                deed_number=deed_number,
                land_number=old.land_number,
                owner_nic=owner_nic,
                registration_date=registration_date,
                deed_type=deed_type,
                status=STATUS_ACTIVE,
                notary_name=notary_name,
                survey_plan_number=(
                    old.survey_plan_number if survey_plan_number is None
                    else survey_plan_number
                ),
                previous_deed_number=old_deed_number,
                previous_owner_nic=previous_owner_nic,
                previous_registration_date=previous_registration_date,
                notes=notes,
            ),
        )

        if self.audit_service:
            await self.audit_service.record_event(
                session, ACTION_TRANSFER,
                f"Transferred ownership from deed {old_deed_number} to {deed_number}",
                user=actor,
            )
        logger.info(
            "Transferred land %s: deed %s -> %s",
            old.land_number, old_deed_number, deed_number,
        )
        return new_deed
