"""FastAPI dependencies and error translation shared by the routers."""

from __future__ import annotations

from fastapi import HTTPException, Request

from pitchgrade.errors import ErrorKind, PitchGradeError
from pitchgrade.history.storage import HistoryStore
from pitchgrade.workflow.machine import PitchAnalyzer, PitchWorkflow
from pitchgrade.workflow.registry import SessionRegistry

ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.EMPTY_INPUT: 400,
    ErrorKind.PERMISSION_DENIED: 403,
    ErrorKind.CAPTURE: 409,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.AUTHENTICATION: 502,
    ErrorKind.API_ERROR: 502,
    ErrorKind.MALFORMED_RESPONSE: 502,
    ErrorKind.NETWORK: 503,
    ErrorKind.STORAGE: 500,
}

NOT_CONFIGURED_DETAIL = "Pitch analysis is not configured. Set OPENAI_API_KEY to enable it."


def to_http_exception(exc: PitchGradeError) -> HTTPException:
    """Map a PitchGrade error onto an HTTP status, keeping the kind for clients."""
    return HTTPException(
        status_code=ERROR_STATUS.get(exc.kind, 500),
        detail={"kind": exc.kind.value, "message": exc.message},
    )


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry  # type: ignore[no-any-return]


def get_history_store(request: Request) -> HistoryStore:
    return request.app.state.registry.store  # type: ignore[no-any-return]


def get_analyzer(request: Request) -> PitchAnalyzer:
    analyzer = request.app.state.registry.analyzer
    if analyzer is None:
        raise HTTPException(status_code=501, detail=NOT_CONFIGURED_DETAIL)
    return analyzer  # type: ignore[no-any-return]


def get_workflow(session_id: str, request: Request) -> PitchWorkflow:
    try:
        return get_registry(request).get(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Session not found") from None
