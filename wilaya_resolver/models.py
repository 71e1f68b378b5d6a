"""Pydantic models for request/response payloads."""
from __future__ import annotations

from pydantic import BaseModel, Field


class ResolveResponse(BaseModel):
    name: str
    normalized: str
    hint: int | None = None
    wilaya_id: int = Field(..., ge=1, le=58)
    wilaya_fr: str
    wilaya_ar: str


class CommuneName(BaseModel):
    fr: str
    ar: str = ""


class CommuneList(BaseModel):
    wilaya_id: int
    wilaya_fr: str
    communes: list[CommuneName]


class CommuneNameResponse(BaseModel):
    name: str
    resolved: str | None = None


class HealthResponse(BaseModel):
    index_path: str
    communes: int
