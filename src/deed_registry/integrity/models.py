"""SQLAlchemy model for the append-only deed ledger."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, event
from sqlalchemy.orm import Mapped, mapped_column

from deed_registry.common.exceptions import LedgerImmutableError
from deed_registry.common.models import Base, utcnow

# Sequence numbers are reported relative to this base; the first entry is 1001.
LEDGER_GENESIS_SEQUENCE = 1000


class LedgerEntryModel(Base):
    __tablename__ = "ledger_entries"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    deed_number: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    digest: Mapped[str] = mapped_column(String(64), nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    @property
    def sequence_number(self) -> int:
        return LEDGER_GENESIS_SEQUENCE + self.id


@event.listens_for(LedgerEntryModel, "before_update")
def _reject_update(mapper, connection, target):
    raise LedgerImmutableError(
        f"Ledger entry for deed {target.deed_number} cannot be modified"
    )


@event.listens_for(LedgerEntryModel, "before_delete")
def _reject_delete(mapper, connection, target):
    raise LedgerImmutableError(
        f"Ledger entry for deed {target.deed_number} cannot be removed"
    )
