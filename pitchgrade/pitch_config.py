"""Pitch configuration: capture mode, duration and style enums plus the questionnaire."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class PitchMode(StrEnum):
    """How the pitch text is captured."""

    CAMERA = "camera"
    VOICE = "voice"


class PitchDuration(StrEnum):
    """Target length of the delivered pitch."""

    ELEVATOR = "30 Seconds"
    ONE_MINUTE = "1 Minute"
    TWO_MINUTES = "2 Minutes"
    FIVE_MINUTES = "5 Minutes"
    SEVEN_MINUTES = "7 Minutes"

    @property
    def seconds(self) -> int:
        return _DURATION_SECONDS[self]

    @property
    def description(self) -> str:
        return _DURATION_DESCRIPTIONS[self]


_DURATION_SECONDS: dict[PitchDuration, int] = {
    PitchDuration.ELEVATOR: 30,
    PitchDuration.ONE_MINUTE: 60,
    PitchDuration.TWO_MINUTES: 120,
    PitchDuration.FIVE_MINUTES: 300,
    PitchDuration.SEVEN_MINUTES: 420,
}

_DURATION_DESCRIPTIONS: dict[PitchDuration, str] = {
    PitchDuration.ELEVATOR: "Perfect for quick introductions",
    PitchDuration.ONE_MINUTE: "Brief but comprehensive",
    PitchDuration.TWO_MINUTES: "Detailed presentation",
    PitchDuration.FIVE_MINUTES: "Full pitch with details",
    PitchDuration.SEVEN_MINUTES: "Complete investor pitch",
}


class PitchStyle(StrEnum):
    """Presentation style the user wants to emulate."""

    PETER_THIEL = "Peter Thiel Style"
    STEVE_JOBS = "Steve Jobs Style"
    ELON_MUSK = "Elon Musk Style"
    TRADITIONAL = "Traditional"
    STORYTELLING = "Storytelling"

    @property
    def description(self) -> str:
        return _STYLE_DESCRIPTIONS[self]


_STYLE_DESCRIPTIONS: dict[PitchStyle, str] = {
    PitchStyle.PETER_THIEL: "Direct, analytical approach focusing on unique insights",
    PitchStyle.STEVE_JOBS: "Storytelling with emphasis on revolutionary impact",
    PitchStyle.ELON_MUSK: "Vision-driven approach focusing on ambitious goals",
    PitchStyle.TRADITIONAL: "Structured approach with market metrics",
    PitchStyle.STORYTELLING: "Narrative-focused emotional connection",
}


@dataclass(frozen=True)
class Question:
    """A single questionnaire prompt bound to a PitchIdea field."""

    field: str
    title: str
    description: str


QUESTIONS: tuple[Question, ...] = (
    Question("business_name", "Business Name", "What's your startup or business called?"),
    Question("industry", "Industry", "What industry are you in?"),
    Question("problem_statement", "Problem", "What problem are you solving?"),
    Question("solution", "Solution", "How does your solution work?"),
    Question("target_market", "Target Market", "Who are your target customers?"),
    Question("business_model", "Business Model", "How will you make money?"),
)

QUESTION_FIELDS: tuple[str, ...] = tuple(q.field for q in QUESTIONS)
