"""Pydantic schemas for audit log API responses."""

from datetime import datetime

from pydantic import BaseModel


class AuditLogResponse(BaseModel):
    id: int
    timestamp: datetime
    user: str
    action: str
    details: str

    model_config = {"from_attributes": True}
