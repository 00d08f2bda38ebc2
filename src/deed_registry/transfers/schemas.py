"""Pydantic schemas for the transfer endpoint."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class TransferRequest(BaseModel):
    """Details of the successor deed. The land is carried over from the old deed."""

    deed_number: Optional[str] = Field(default=None, min_length=1, max_length=50)
    owner_nic: str = Field(..., min_length=1, max_length=20)
    registration_date: date
    deed_type: str = Field(default="Sale", min_length=1, max_length=50)
    notary_name: str = Field(default="", max_length=255)
    survey_plan_number: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = None
