"""Pydantic schemas for deed endpoints."""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

DeedStatus = Literal["ACTIVE", "TRANSFERRED"]


class DeedCreate(BaseModel):
    deed_number: Optional[str] = Field(default=None, min_length=1, max_length=50)
    land_number: str = Field(..., min_length=1, max_length=50)
    owner_nic: str = Field(..., min_length=1, max_length=20)
    registration_date: date
    deed_type: str = Field(..., min_length=1, max_length=50)
    status: DeedStatus = "ACTIVE"
    notary_name: str = Field(default="", max_length=255)
    survey_plan_number: str = Field(default="", max_length=50)
    notes: Optional[str] = None


class DeedUpdate(BaseModel):
    land_number: Optional[str] = Field(default=None, min_length=1, max_length=50)
    owner_nic: Optional[str] = Field(default=None, min_length=1, max_length=20)
    registration_date: Optional[date] = None
    deed_type: Optional[str] = Field(default=None, min_length=1, max_length=50)
    status: Optional[DeedStatus] = None
    notary_name: Optional[str] = Field(default=None, max_length=255)
    survey_plan_number: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = None


class DeedResponse(BaseModel):
    deed_number: str
    land_number: str
    owner_nic: str
    registration_date: date
    deed_type: str
    status: str
    notary_name: str
    survey_plan_number: str
    previous_deed_number: Optional[str] = None
    previous_owner_nic: Optional[str] = None
    previous_registration_date: Optional[date] = None
    notes: Optional[str] = None
    last_verified_at: Optional[datetime] = None
    last_verification_valid: Optional[bool] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class DeedStatsResponse(BaseModel):
    total: int
    active: int
    transferred: int


class NextDeedNumberResponse(BaseModel):
    deed_number: str
    previous: Optional[str] = None
