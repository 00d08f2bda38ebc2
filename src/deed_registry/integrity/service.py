"""Integrity service: seal deeds at registration and verify them later."""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from deed_registry.common.exceptions import NotFoundError
from deed_registry.common.logging import get_logger
from deed_registry.common.models import utcnow
from deed_registry.deeds.models import DeedModel
from deed_registry.integrity.hasher import DeedFields, compute_digest, verify_digest
from deed_registry.integrity.ledger import LedgerService
from deed_registry.integrity.models import LedgerEntryModel
from deed_registry.lands.models import LandModel
from deed_registry.owners.models import OwnerModel

logger = get_logger("integrity")


@dataclass
class VerificationResult:
    deed_number: str
    is_valid: bool
    current_digest: str
    recorded_digest: str
    sequence_number: int
    recorded_at: datetime


def build_deed_fields(deed: DeedModel, land: LandModel, owner: OwnerModel) -> DeedFields:
    """Project the stored deed, its land and its owner onto the digest fields."""
    return DeedFields(
        deed_number=deed.deed_number,
        owner_name=owner.full_name,
        owner_nic=deed.owner_nic,
        land_extent=land.extent,
        land_location=land.map_reference or "",
        district=land.district,
        divisional_secretariat=land.division,
        grama_niladhari_division=land.local_division or "",
        survey_plan_number=deed.survey_plan_number or "",
        notary_name=deed.notary_name or "",
        registration_date=deed.registration_date.isoformat(),
        previous_owner=owner.previous_owner or "",
    )


class IntegrityService:
    """Digest sealing and tamper verification against the ledger."""

    def __init__(self, ledger: LedgerService):
        self.ledger = ledger

    async def _load_fields(self, session: AsyncSession, deed: DeedModel) -> DeedFields:
        land = await session.get(LandModel, deed.land_number)
        if land is None:
            raise NotFoundError(f"Land {deed.land_number} does not exist")
        owner = await session.get(OwnerModel, deed.owner_nic)
        if owner is None:
            raise NotFoundError(f"Owner {deed.owner_nic} does not exist")
        return build_deed_fields(deed, land, owner)

    async def seal(self, session: AsyncSession, deed: DeedModel) -> LedgerEntryModel:
        """Digest a freshly registered deed and append it to the ledger."""
        digest = compute_digest(await self._load_fields(session, deed))
        entry = await self.ledger.append(session, deed.deed_number, digest)
        logger.info(
            "Sealed deed %s at sequence %d", deed.deed_number, entry.sequence_number
        )
        return entry

    async def verify(self, session: AsyncSession, deed_number: str) -> VerificationResult:
        """Recompute the digest from current data and compare with the ledger.

        The outcome and time of the check are stored on the deed.
        """
        deed = await session.get(DeedModel, deed_number)
        if deed is None:
            raise NotFoundError(f"Deed {deed_number} does not exist")
        entry = await self.ledger.lookup(session, deed_number)
        if entry is None:
            raise NotFoundError(f"Deed {deed_number} has no ledger record")

        deed_fields = await self._load_fields(session, deed)
        current = compute_digest(deed_fields)
        is_valid = verify_digest(deed_fields, entry.digest)
        deed.last_verified_at = utcnow()
        deed.last_verification_valid = is_valid
        await session.flush()
        if not is_valid:
            logger.warning(
                "Deed %s failed integrity check (sealed at sequence %d)",
                deed_number, entry.sequence_number,
            )

        return VerificationResult(
            deed_number=deed_number,
            is_valid=is_valid,
            current_digest=current,
            recorded_digest=entry.digest,
            sequence_number=entry.sequence_number,
            recorded_at=entry.recorded_at,
        )
