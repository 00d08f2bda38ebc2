"""Pydantic schemas for land endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class LandCreate(BaseModel):
    land_number: str = Field(..., min_length=1, max_length=50)
    district: str = Field(..., min_length=1, max_length=100)
    division: str = Field(..., min_length=1, max_length=100)
    local_division: str = Field(default="", max_length=100)
    area: float = Field(..., gt=0)
    area_unit: str = Field(..., min_length=1, max_length=30)
    map_reference: str = Field(default="", max_length=255)


class LandResponse(BaseModel):
    land_number: str
    district: str
    division: str
    local_division: str
    area: float
    area_unit: str
    map_reference: str
    created_at: datetime

    model_config = {"from_attributes": True}
