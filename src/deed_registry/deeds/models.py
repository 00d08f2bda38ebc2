"""SQLAlchemy model for deeds."""

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from deed_registry.common.models import Base, TimestampMixin

STATUS_ACTIVE = "ACTIVE"
STATUS_TRANSFERRED = "TRANSFERRED"

DEED_STATUSES: frozenset[str] = frozenset({STATUS_ACTIVE, STATUS_TRANSFERRED})


class DeedModel(Base, TimestampMixin):
    __tablename__ = "deeds"

    deed_number: Mapped[str] = mapped_column(String(50), primary_key=True)
    land_number: Mapped[str] = mapped_column(
        String(50), ForeignKey("lands.land_number"), nullable=False, index=True
    )
    owner_nic: Mapped[str] = mapped_column(
        String(20), ForeignKey("owners.nic"), nullable=False, index=True
    )
    registration_date: Mapped[date] = mapped_column(Date, nullable=False)
    deed_type: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=STATUS_ACTIVE, nullable=False, index=True
    )
    notary_name: Mapped[str] = mapped_column(String(255), default="")
    survey_plan_number: Mapped[str] = mapped_column(String(50), default="")

    # Snapshot of the superseded deed, written once by a transfer
    previous_deed_number: Mapped[str | None] = mapped_column(
        String(50), nullable=True, index=True
    )
    previous_owner_nic: Mapped[str | None] = mapped_column(String(20), nullable=True)
    previous_registration_date: Mapped[date | None] = mapped_column(
        Date, nullable=True
    )

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Outcome of the most recent integrity check
    last_verified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    last_verification_valid: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
