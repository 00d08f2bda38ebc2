"""SQLAlchemy model for the append-only audit log."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from deed_registry.common.models import Base, utcnow

ACTION_CREATE = "CREATE"
ACTION_UPDATE = "UPDATE"
ACTION_TRANSFER = "TRANSFER"
ACTION_DELETE = "DELETE"
ACTION_SEARCH = "SEARCH"

AUDIT_ACTIONS: frozenset[str] = frozenset({
    ACTION_CREATE,
    ACTION_UPDATE,
    ACTION_TRANSFER,
    ACTION_DELETE,
    ACTION_SEARCH,
})


class AuditLogModel(Base):
    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    user: Mapped[str] = mapped_column(String(255), nullable=False, default="system")
    action: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    details: Mapped[str] = mapped_column(Text, default="")
