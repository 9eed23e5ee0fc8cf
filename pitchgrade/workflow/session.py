"""Workflow steps and the mutable per-session state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from pitchgrade.analysis.models import PitchAnalysis, PitchIdea
from pitchgrade.errors import ErrorKind
from pitchgrade.history.models import SavedPitch
from pitchgrade.pitch_config import PitchDuration, PitchMode, PitchStyle


class PitchStep(StrEnum):
    """Steps of the pitch workflow, in happy-path order."""

    SELECT_MODE = "select_mode"
    QUESTIONNAIRE = "questionnaire"
    CONFIRM_IDEA = "confirm_idea"
    SUMMARY_REVIEW = "summary_review"
    SELECT_DURATION = "select_duration"
    SELECT_STYLE = "select_style"
    CAPTURE = "capture"
    ANALYSIS = "analysis"


@dataclass(frozen=True)
class AnalysisFailure:
    """Why the last analysis attempt failed."""

    kind: ErrorKind
    message: str


@dataclass
class PitchSession:
    step: PitchStep = PitchStep.SELECT_MODE
    mode: PitchMode | None = None
    idea: PitchIdea = field(default_factory=PitchIdea)
    answered: set[str] = field(default_factory=set)
    duration: PitchDuration | None = None
    style: PitchStyle | None = None
    summary: str | None = None
    analysis: PitchAnalysis | None = None
    analysis_error: AnalysisFailure | None = None
    live_transcript: str = ""
    capture_complete: bool = False
    saved_pitch: SavedPitch | None = None
    # Bumped whenever in-flight results must no longer land in this session.
    generation: int = 0
