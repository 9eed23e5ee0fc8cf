"""History and catalogue endpoints."""

from __future__ import annotations

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends

from pitchgrade.api.dependencies import get_history_store, to_http_exception
from pitchgrade.api.models import (
    DurationOptionResponse,
    OptionResponse,
    OptionsResponse,
    QuestionResponse,
)
from pitchgrade.errors import HistoryStoreError
from pitchgrade.history.models import SavedPitch
from pitchgrade.history.storage import HistoryStore
from pitchgrade.pitch_config import QUESTIONS, PitchDuration, PitchMode, PitchStyle

router = APIRouter()


@router.get("/api/history", response_model=list[SavedPitch])
async def list_history(
    store: Annotated[HistoryStore, Depends(get_history_store)],
) -> list[SavedPitch]:
    """List saved pitches, newest first."""
    try:
        pitches = await asyncio.to_thread(store.load_all)
    except HistoryStoreError as exc:
        raise to_http_exception(exc) from exc
    return list(reversed(pitches))


@router.get("/api/options", response_model=OptionsResponse)
async def list_options() -> OptionsResponse:
    return OptionsResponse(
        modes=list(PitchMode),
        durations=[
            DurationOptionResponse(value=d.value, description=d.description, seconds=d.seconds)
            for d in PitchDuration
        ],
        styles=[OptionResponse(value=s.value, description=s.description) for s in PitchStyle],
        questions=[
            QuestionResponse(field=q.field, title=q.title, description=q.description)
            for q in QUESTIONS
        ],
    )
