"""Pydantic request/response schemas for the PitchGrade API."""

from __future__ import annotations

import dataclasses

from pydantic import BaseModel

from pitchgrade.analysis.models import PitchAnalysis
from pitchgrade.errors import ErrorKind
from pitchgrade.history.models import SavedPitch
from pitchgrade.pitch_config import QUESTION_FIELDS, PitchDuration, PitchMode, PitchStyle
from pitchgrade.workflow.machine import PitchWorkflow
from pitchgrade.workflow.session import PitchStep


class ModeRequest(BaseModel):
    mode: PitchMode


class AnswersRequest(BaseModel):
    """Questionnaire answers keyed by PitchIdea field name."""

    answers: dict[str, str]


class DurationRequest(BaseModel):
    duration: PitchDuration


class StyleRequest(BaseModel):
    style: PitchStyle


class CaptureRequest(BaseModel):
    """Text produced by an external recogniser, in the order it was captured."""

    segments: list[str]


class AnalyzeRequest(BaseModel):
    text: str


class PitchIdeaResponse(BaseModel):
    business_name: str
    industry: str
    problem_statement: str
    solution: str
    target_market: str
    business_model: str
    pitch_text: str


class AnalysisFailureResponse(BaseModel):
    kind: ErrorKind
    message: str


class SessionResponse(BaseModel):
    """Snapshot of one pitch workflow session."""

    session_id: str
    step: PitchStep
    mode: PitchMode | None = None
    duration: PitchDuration | None = None
    style: PitchStyle | None = None
    idea: PitchIdeaResponse
    unanswered: list[str] = []
    summary: str | None = None
    summary_pending: bool = False
    live_transcript: str = ""
    analysis: PitchAnalysis | None = None
    analysis_pending: bool = False
    analysis_error: AnalysisFailureResponse | None = None
    saved_pitch: SavedPitch | None = None

    @classmethod
    def from_workflow(cls, session_id: str, workflow: PitchWorkflow) -> SessionResponse:
        session = workflow.session
        error = session.analysis_error
        return cls(
            session_id=session_id,
            step=session.step,
            mode=session.mode,
            duration=session.duration,
            style=session.style,
            idea=PitchIdeaResponse(**dataclasses.asdict(session.idea)),
            unanswered=[f for f in QUESTION_FIELDS if f not in session.answered],
            summary=session.summary,
            summary_pending=workflow.summary_pending,
            live_transcript=session.live_transcript,
            analysis=session.analysis,
            analysis_pending=workflow.analysis_pending,
            analysis_error=(
                AnalysisFailureResponse(kind=error.kind, message=error.message) if error else None
            ),
            saved_pitch=session.saved_pitch,
        )


class OptionResponse(BaseModel):
    value: str
    description: str


class DurationOptionResponse(OptionResponse):
    seconds: int


class QuestionResponse(BaseModel):
    field: str
    title: str
    description: str


class OptionsResponse(BaseModel):
    """Everything a client needs to render the selection steps."""

    modes: list[PitchMode]
    durations: list[DurationOptionResponse]
    styles: list[OptionResponse]
    questions: list[QuestionResponse]
