"""Shared fakes and fixtures (no external APIs required)."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from pitchgrade.analysis.models import PitchAnalysis, PitchIdea
from pitchgrade.history.models import SavedPitch

ANSWERS: dict[str, str] = {
    "business_name": "GreenLoop",
    "industry": "Climate tech",
    "problem_statement": "Restaurants throw away tonnes of compostable waste",
    "solution": "Pick-up subscription that turns waste into soil",
    "target_market": "Independent restaurants in large cities",
    "business_model": "Monthly subscription per location",
}

PITCH_TEXT = (
    "Hi, we're GreenLoop. Every week restaurants throw away tonnes of food waste. "
    "We collect it and turn it into soil that we sell back to urban farms."
)


def analysis_payload(
    clarity: int = 90,
    delivery: int = 85,
    communication: int = 80,
    timing: int = 95,
    overall: int = 88,
) -> dict[str, Any]:
    """A well-formed analysis object in wire (camelCase) form."""

    def section(score: int, name: str) -> dict[str, Any]:
        return {
            "score": score,
            "feedback": f"{name} feedback",
            "examples": [f"{name} example"],
            "recommendations": [f"{name} recommendation"],
        }

    return {
        "clarity": section(clarity, "Clarity"),
        "deliveryStyle": section(delivery, "Delivery"),
        "communicationEffectiveness": section(communication, "Communication"),
        "timeManagement": section(timing, "Timing"),
        "overallScore": overall,
        "overallFeedback": "A confident, well-paced pitch.",
        "improvements": ["Open with a sharper hook", "Quantify the market"],
    }


class FakeAnalyzer:
    """Records calls; optionally holds responses until ``release()`` is called."""

    def __init__(self) -> None:
        self.summary = "GreenLoop turns restaurant waste into soil."
        self.analysis: PitchAnalysis = PitchAnalysis.model_validate(analysis_payload())
        self.summary_error: Exception | None = None
        self.analysis_error: Exception | None = None
        self.hold = False
        self.summary_calls: list[PitchIdea] = []
        self.analysis_calls: list[str] = []
        self._gate: asyncio.Event | None = None

    def release(self) -> None:
        self.hold = False
        if self._gate is not None:
            self._gate.set()

    async def _maybe_wait(self) -> None:
        if self.hold:
            if self._gate is None:
                self._gate = asyncio.Event()
            await self._gate.wait()

    async def generate_summary(self, idea: PitchIdea) -> str:
        self.summary_calls.append(idea)
        await self._maybe_wait()
        if self.summary_error is not None:
            raise self.summary_error
        return self.summary

    async def analyze_text(self, pitch_text: str) -> PitchAnalysis:
        self.analysis_calls.append(pitch_text)
        await self._maybe_wait()
        if self.analysis_error is not None:
            raise self.analysis_error
        return self.analysis


class MemoryHistoryStore:
    storage_name = "memory"

    def __init__(self) -> None:
        self.pitches: list[SavedPitch] = []

    def load_all(self) -> list[SavedPitch]:
        return list(self.pitches)

    def save_all(self, pitches: list[SavedPitch]) -> None:
        self.pitches = list(pitches)

    def append(self, pitch: SavedPitch) -> None:
        self.pitches.append(pitch)


@pytest.fixture
def analyzer() -> FakeAnalyzer:
    return FakeAnalyzer()


@pytest.fixture
def store() -> MemoryHistoryStore:
    return MemoryHistoryStore()
