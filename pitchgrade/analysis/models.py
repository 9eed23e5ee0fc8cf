"""Data models for pitch ideas and the structured analysis report."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr
from pydantic.alias_generators import to_camel

# Decoding fails closed: unknown keys, missing keys and type coercion are all rejected.
_STRICT_REPORT = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="forbid",
    frozen=True,
)


@dataclass
class PitchIdea:
    """Questionnaire answers plus the captured pitch transcript."""

    business_name: str = ""
    industry: str = ""
    problem_statement: str = ""
    solution: str = ""
    target_market: str = ""
    business_model: str = ""
    pitch_text: str = ""


class SectionAnalysis(BaseModel):
    """Score and feedback for a single evaluation dimension."""

    model_config = _STRICT_REPORT

    score: StrictInt = Field(ge=0, le=100)
    feedback: StrictStr
    examples: list[StrictStr]
    recommendations: list[StrictStr]


SECTION_TITLES: dict[str, str] = {
    "clarity": "Clarity & Structure",
    "delivery_style": "Delivery Style",
    "communication_effectiveness": "Communication Effectiveness",
    "time_management": "Time Management",
}


class PitchAnalysis(BaseModel):
    """The scored report returned by the analysis model.

    Wire keys are camelCase (``overallScore``, ``deliveryStyle`` ...) to match
    the JSON shape requested in the evaluation prompt.
    """

    model_config = _STRICT_REPORT

    clarity: SectionAnalysis
    delivery_style: SectionAnalysis
    communication_effectiveness: SectionAnalysis
    time_management: SectionAnalysis
    overall_score: StrictInt = Field(ge=0, le=100)
    overall_feedback: StrictStr
    improvements: list[StrictStr]

    @property
    def sections(self) -> list[tuple[str, SectionAnalysis]]:
        """Sections in display order, paired with their titles."""
        return [(title, getattr(self, name)) for name, title in SECTION_TITLES.items()]
