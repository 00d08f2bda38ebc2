"""Pydantic schemas for ledger and verification responses."""

from datetime import datetime

from pydantic import BaseModel


class LedgerEntryResponse(BaseModel):
    deed_number: str
    digest: str
    sequence_number: int
    recorded_at: datetime

    model_config = {"from_attributes": True}


class VerificationResponse(BaseModel):
    deed_number: str
    is_valid: bool
    current_digest: str
    recorded_digest: str
    sequence_number: int
    recorded_at: datetime

    model_config = {"from_attributes": True}
