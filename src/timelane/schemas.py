"""Pydantic schemas for tracker YAML data validation."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field, field_validator, model_validator

from .models import Priority, TrackerType


class TrackerSchema(BaseModel):
    """Schema for a single tracker entry."""

    id: str
    title: str
    type: TrackerType = TrackerType.FEATURE
    start_date: date
    end_date: date
    priority: Priority = Priority.MEDIUM
    status: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: object) -> object:
        """Allow numeric ids in YAML."""
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("status", mode="before")
    @classmethod
    def empty_status(cls, v: object) -> object:
        if v is None:
            return ""
        return v

    @model_validator(mode="after")
    def validate_end_after_start(self) -> TrackerSchema:
        """Ensure the range is not reversed."""
        if self.end_date < self.start_date:
            raise ValueError(f"tracker '{self.id}': end_date must not be before start_date")
        return self


class TrackerFileSchema(BaseModel):
    """Schema for a complete tracker file."""

    trackers: list[TrackerSchema] = Field(default_factory=list)
