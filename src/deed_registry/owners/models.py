"""SQLAlchemy model for land owners."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from deed_registry.common.models import Base, TimestampMixin


class OwnerModel(Base, TimestampMixin):
    __tablename__ = "owners"

    nic: Mapped[str] = mapped_column(String(20), primary_key=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    address: Mapped[str] = mapped_column(Text, default="")
    contact_number: Mapped[str] = mapped_column(String(30), default="")
    # Free text, not a foreign key: earlier owners may predate the registry.
    previous_owner: Mapped[str | None] = mapped_column(String(255), nullable=True)
