"""Pydantic schemas for the snapshot service requests and responses."""

import math
from typing import Any

from pydantic import BaseModel, Field, StrictFloat, StrictInt, field_validator


class SnapshotCreate(BaseModel):
    """POST /snapshots request body."""

    episode: StrictInt | StrictFloat = Field(..., description="Completed episode number")
    stats: dict[str, Any] = Field(..., description="score, reward, frames, epsilon")
    snapshot: dict[str, Any] = Field(..., description="Serialized agent state")

    @field_validator("episode")
    @classmethod
    def episode_not_nan(cls, value):
        if isinstance(value, float) and math.isnan(value):
            raise ValueError("episode must be a number")
        return value


class SnapshotCreated(BaseModel):
    """POST /snapshots response."""

    id: str
    timestamp: str


class SnapshotSummary(BaseModel):
    """One entry of GET /snapshots; the snapshot payload is omitted."""

    id: str
    timestamp: str
    episode: int | float
    stats: dict[str, Any]


class SnapshotRecord(SnapshotSummary):
    """GET /snapshots/latest response."""

    snapshot: dict[str, Any]


class Message(BaseModel):
    message: str
