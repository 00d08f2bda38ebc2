"""Pydantic schemas for owner endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class OwnerCreate(BaseModel):
    nic: str = Field(..., min_length=1, max_length=20)
    full_name: str = Field(..., min_length=1, max_length=255)
    address: str = ""
    contact_number: str = Field(default="", max_length=30)
    previous_owner: Optional[str] = Field(default=None, max_length=255)


class OwnerResponse(BaseModel):
    nic: str
    full_name: str
    address: str
    contact_number: str
    previous_owner: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
