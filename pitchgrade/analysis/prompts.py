"""Prompt templates for summary generation and pitch evaluation."""

from __future__ import annotations

from pitchgrade.analysis.models import PitchIdea

MISSING_FIELD_PLACEHOLDER = "(not provided)"

SUMMARY_SYSTEM_PROMPT = (
    "You are an expert business analyst who creates clear and compelling pitch summaries."
)

ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert pitch coach. You evaluate how a startup pitch is delivered "
    "and respond only with a single JSON object, without markdown fences or commentary."
)

ANALYSIS_RESPONSE_SHAPE = """{
  "clarity": {"score": 0, "feedback": "", "examples": [], "recommendations": []},
  "deliveryStyle": {"score": 0, "feedback": "", "examples": [], "recommendations": []},
  "communicationEffectiveness": {"score": 0, "feedback": "", "examples": [], "recommendations": []},
  "timeManagement": {"score": 0, "feedback": "", "examples": [], "recommendations": []},
  "overallScore": 0,
  "overallFeedback": "",
  "improvements": []
}"""


def _field(value: str) -> str:
    value = value.strip()
    return value if value else MISSING_FIELD_PLACEHOLDER


def build_summary_prompt(idea: PitchIdea) -> str:
    """Embed every idea field in the summary request; blanks become a placeholder."""
    return (
        "Generate a concise summary of the following business pitch:\n\n"
        f"Business Name: {_field(idea.business_name)}\n"
        f"Industry: {_field(idea.industry)}\n"
        f"Problem: {_field(idea.problem_statement)}\n"
        f"Solution: {_field(idea.solution)}\n"
        f"Target Market: {_field(idea.target_market)}\n"
        f"Business Model: {_field(idea.business_model)}\n"
        f"Additional Details: {_field(idea.pitch_text)}\n\n"
        "Please provide a professional and engaging summary that highlights the key "
        "aspects of this business idea."
    )


def build_analysis_prompt(pitch_text: str) -> str:
    return (
        "Evaluate the delivery of the following startup pitch across exactly four "
        "dimensions:\n"
        "1. clarity: clarity and structure of the message\n"
        "2. deliveryStyle: tone, confidence and presence\n"
        "3. communicationEffectiveness: how well the value proposition lands\n"
        "4. timeManagement: pacing and use of the available time\n\n"
        "Every score is an integer from 0 to 100. \"examples\" quote or paraphrase "
        "moments from the pitch; \"recommendations\" are concrete next steps. "
        "\"overallScore\" is your holistic score and \"improvements\" lists the key "
        "areas to work on.\n\n"
        "Respond with JSON in exactly this shape:\n"
        f"{ANALYSIS_RESPONSE_SHAPE}\n\n"
        f"Pitch:\n{pitch_text}"
    )
