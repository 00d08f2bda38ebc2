"""Append-only ledger of sealed deed digests."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from deed_registry.common.exceptions import ConflictError
from deed_registry.integrity.models import LedgerEntryModel


class LedgerService:
    """Write-once store mapping a deed number to its sealed digest.

    Entries are never updated or deleted. The sequence number is
    derived from the table's auto-increment key, so concurrent appends are
    ordered by the database and never share a number.
    """

    async def append(
        self, session: AsyncSession, deed_number: str, digest: str,
    ) -> LedgerEntryModel:
        """Seal a digest for a deed. A deed is sealed exactly once."""
        if await self.lookup(session, deed_number) is not None:
            raise ConflictError(f"Deed {deed_number} is already sealed in the ledger")

        entry = LedgerEntryModel(deed_number=deed_number, digest=digest)
        session.add(entry)
        try:
            await session.flush()
        except IntegrityError as exc:
            raise ConflictError(
                f"Deed {deed_number} is already sealed in the ledger"
            ) from exc
        return entry

    async def lookup(
        self, session: AsyncSession, deed_number: str,
    ) -> LedgerEntryModel | None:
        result = await session.execute(
            select(LedgerEntryModel).where(LedgerEntryModel.deed_number == deed_number)
        )
        return result.scalar_one_or_none()

    async def all_entries(
        self, session: AsyncSession, limit: int | None = None, offset: int = 0,
    ) -> list[LedgerEntryModel]:
        """Entries in sealing order, oldest first."""
        query = select(LedgerEntryModel).order_by(LedgerEntryModel.id.asc()).offset(offset)
        if limit is not None:
            query = query.limit(limit)
        result = await session.execute(query)
        return list(result.scalars().all())
