"""One-shot analysis endpoint: score text that was captured outside a session."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from pitchgrade.analysis.models import PitchAnalysis
from pitchgrade.api.dependencies import get_analyzer, to_http_exception
from pitchgrade.api.models import AnalyzeRequest
from pitchgrade.errors import PitchGradeError
from pitchgrade.workflow.machine import PitchAnalyzer

router = APIRouter()


@router.post("/api/analyze", response_model=PitchAnalysis)
async def analyze(
    body: AnalyzeRequest,
    analyzer: Annotated[PitchAnalyzer, Depends(get_analyzer)],
) -> PitchAnalysis:
    """Analyze pitch text directly, e.g. text recognised from a photographed pitch."""
    try:
        return await analyzer.analyze_text(body.text)
    except PitchGradeError as exc:
        raise to_http_exception(exc) from exc
