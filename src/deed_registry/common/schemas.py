"""Shared Pydantic schemas for the deed registry."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    service: str = "deed-registry"


class ErrorResponse(BaseModel):
    error: str
    code: str
    detail: str = ""


class MessageResponse(BaseModel):
    message: str
