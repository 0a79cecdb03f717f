"""Pydantic schemas for lt_draw API."""

from pydantic import BaseModel, Field


class MaintenanceRequest(BaseModel):
    days: int | None = Field(None, ge=1, le=60, description="Days of draws to keep scheduled")


class MaintenanceResponse(BaseModel):
    created_count: int
    closed_draw_ids: list[int]
