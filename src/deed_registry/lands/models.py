"""SQLAlchemy model for registered lands."""

from sqlalchemy import Float, String
from sqlalchemy.orm import Mapped, mapped_column

from deed_registry.common.models import Base, TimestampMixin


class LandModel(Base, TimestampMixin):
    __tablename__ = "lands"

    land_number: Mapped[str] = mapped_column(String(50), primary_key=True)
    district: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    division: Mapped[str] = mapped_column(String(100), nullable=False)
    local_division: Mapped[str] = mapped_column(String(100), default="")
    area: Mapped[float] = mapped_column(Float, nullable=False)
    area_unit: Mapped[str] = mapped_column(String(30), nullable=False)
    map_reference: Mapped[str] = mapped_column(String(255), default="")

    @property
    def extent(self) -> str:
        """Area rendered the way it is written on a deed, e.g. ``10 Perches``.

        The number is the shortest exact round-trip form of the stored float,
        so two different areas never render the same.
        """
        amount = repr(float(self.area))
        if amount.endswith(".0"):
            amount = amount[:-2]
        return f"{amount} {self.area_unit}"
