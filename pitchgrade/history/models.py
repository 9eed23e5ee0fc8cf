"""Data models for the saved-pitch history."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from pitchgrade.pitch_config import PitchMode


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SavedPitch(BaseModel):
    """An immutable record of one completed pitch run."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    business_name: str
    created_at: datetime = Field(default_factory=utc_now)
    mode: PitchMode
    summary: str
    score: int
