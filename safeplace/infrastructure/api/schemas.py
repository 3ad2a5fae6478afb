"""Request bodies for the routing endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ClassifyRequest(BaseModel):
    text: str = Field(default="", description="Free-text situation description")


class AllocateRequest(BaseModel):
    category: str
    intake_summary: str = Field(default="", max_length=5000)


class TransferRequest(BaseModel):
    victim_id: str
    new_category: str
    reason: str = Field(default="", max_length=2000)
