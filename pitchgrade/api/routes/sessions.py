"""Session endpoints: drive one pitch workflow from mode selection to analysis."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response

from pitchgrade.api.dependencies import (
    get_analyzer,
    get_registry,
    get_workflow,
    to_http_exception,
)
from pitchgrade.api.models import (
    AnswersRequest,
    CaptureRequest,
    DurationRequest,
    ModeRequest,
    SessionResponse,
    StyleRequest,
)
from pitchgrade.capture.adapters import TextCaptureAdapter
from pitchgrade.errors import PitchGradeError
from pitchgrade.workflow.machine import PitchAnalyzer, PitchWorkflow
from pitchgrade.workflow.registry import SessionRegistry
from pitchgrade.workflow.session import PitchStep

router = APIRouter(prefix="/api/sessions")

Registry = Annotated[SessionRegistry, Depends(get_registry)]
Workflow = Annotated[PitchWorkflow, Depends(get_workflow)]


@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(
    registry: Registry,
    _analyzer: Annotated[PitchAnalyzer, Depends(get_analyzer)],
) -> SessionResponse:
    session_id, workflow = registry.create()
    return SessionResponse.from_workflow(session_id, workflow)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, workflow: Workflow) -> SessionResponse:
    return SessionResponse.from_workflow(session_id, workflow)


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, registry: Registry, _workflow: Workflow) -> Response:
    await registry.remove(session_id)
    return Response(status_code=204)


@router.post("/{session_id}/mode", response_model=SessionResponse)
async def select_mode(session_id: str, body: ModeRequest, workflow: Workflow) -> SessionResponse:
    workflow.select_mode(body.mode)
    return SessionResponse.from_workflow(session_id, workflow)


@router.post("/{session_id}/answers", response_model=SessionResponse)
async def submit_answers(
    session_id: str, body: AnswersRequest, workflow: Workflow
) -> SessionResponse:
    try:
        workflow.submit_answers(body.answers)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return SessionResponse.from_workflow(session_id, workflow)


@router.post("/{session_id}/duration", response_model=SessionResponse)
async def select_duration(
    session_id: str, body: DurationRequest, workflow: Workflow
) -> SessionResponse:
    workflow.select_duration(body.duration)
    return SessionResponse.from_workflow(session_id, workflow)


@router.post("/{session_id}/style", response_model=SessionResponse)
async def select_style(session_id: str, body: StyleRequest, workflow: Workflow) -> SessionResponse:
    workflow.select_style(body.style)
    return SessionResponse.from_workflow(session_id, workflow)


@router.post("/{session_id}/capture", response_model=SessionResponse)
async def capture(session_id: str, body: CaptureRequest, workflow: Workflow) -> SessionResponse:
    """Feed externally recognised text through the capture step."""
    try:
        await workflow.run_capture(TextCaptureAdapter(body.segments))
    except PitchGradeError as exc:
        raise to_http_exception(exc) from exc
    return SessionResponse.from_workflow(session_id, workflow)


@router.post("/{session_id}/advance", response_model=SessionResponse)
async def advance(session_id: str, workflow: Workflow) -> SessionResponse:
    """Move forward one step.

    Returns 409 when the current step's guard is not satisfied yet (no mode,
    unanswered questions, no duration/style, no capture, or no finished analysis).
    At the analysis step a failed analysis is re-submitted instead.
    """
    before = workflow.step
    was_pending = workflow.analysis_pending
    try:
        after = await workflow.advance()
    except PitchGradeError as exc:
        raise to_http_exception(exc) from exc

    finished = after is PitchStep.ANALYSIS and workflow.session.saved_pitch is not None
    retried = workflow.analysis_pending and not was_pending
    if after is before and not (finished or retried):
        raise HTTPException(status_code=409, detail=f"Cannot leave step '{before}' yet")
    return SessionResponse.from_workflow(session_id, workflow)


@router.post("/{session_id}/edit", response_model=SessionResponse)
async def edit_answers(session_id: str, workflow: Workflow) -> SessionResponse:
    """Return from the summary review to the questionnaire."""
    if workflow.step is not PitchStep.SUMMARY_REVIEW:
        raise HTTPException(
            status_code=409, detail="Answers can only be edited from the summary review"
        )
    workflow.edit_answers()
    return SessionResponse.from_workflow(session_id, workflow)


@router.post("/{session_id}/retry-analysis", response_model=SessionResponse)
async def retry_analysis(session_id: str, workflow: Workflow) -> SessionResponse:
    """Re-submit the captured pitch after a failed analysis."""
    if not workflow.retry_analysis():
        raise HTTPException(status_code=409, detail="There is no failed analysis to retry")
    return SessionResponse.from_workflow(session_id, workflow)


@router.post("/{session_id}/recapture", response_model=SessionResponse)
async def recapture(session_id: str, workflow: Workflow) -> SessionResponse:
    """Return from an unsaved analysis to the capture step to record again."""
    if workflow.step is not PitchStep.ANALYSIS or workflow.recapture() is not PitchStep.CAPTURE:
        raise HTTPException(
            status_code=409, detail="The pitch can only be re-recorded from an unsaved analysis"
        )
    return SessionResponse.from_workflow(session_id, workflow)


@router.post("/{session_id}/reset", response_model=SessionResponse)
async def reset(session_id: str, workflow: Workflow) -> SessionResponse:
    workflow.reset()
    return SessionResponse.from_workflow(session_id, workflow)
