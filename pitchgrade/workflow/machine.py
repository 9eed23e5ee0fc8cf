"""The pitch workflow state machine.

A ``PitchWorkflow`` owns one ``PitchSession`` and walks it through
``select_mode -> questionnaire -> confirm_idea -> summary_review ->
select_duration -> select_style -> capture -> analysis``.

All methods must be called from the event loop that owns the session.
Summary and analysis requests run as tasks on that loop; each one remembers
the session generation it was issued under and its result is dropped if the
session has since been reset or sent back to the questionnaire.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Coroutine, Mapping
from typing import Any, Protocol

from pitchgrade.analysis.models import PitchAnalysis, PitchIdea
from pitchgrade.capture.adapters import CaptureAdapter, CaptureConfig
from pitchgrade.errors import CaptureError, PermissionDeniedError, PitchGradeError
from pitchgrade.history.models import SavedPitch
from pitchgrade.history.storage import HistoryStore
from pitchgrade.pitch_config import QUESTION_FIELDS, PitchDuration, PitchMode, PitchStyle
from pitchgrade.workflow.session import AnalysisFailure, PitchSession, PitchStep

logger = logging.getLogger(__name__)

SUMMARY_FAILURE_MESSAGE = "Failed to generate summary. Please try again."


class PitchAnalyzer(Protocol):
    async def generate_summary(self, idea: PitchIdea) -> str:
        pass

    async def analyze_text(self, pitch_text: str) -> PitchAnalysis:
        pass


class PitchWorkflow:
    def __init__(
        self,
        analyzer: PitchAnalyzer,
        store: HistoryStore,
        session: PitchSession | None = None,
    ) -> None:
        self._analyzer = analyzer
        self._store = store
        self._session = session or PitchSession()
        self._tasks: dict[str, asyncio.Task[None]] = {}
        # every unfinished task, including ones superseded after a reset
        self._running: set[asyncio.Task[None]] = set()

    @property
    def session(self) -> PitchSession:
        return self._session

    @property
    def step(self) -> PitchStep:
        return self._session.step

    @property
    def summary_pending(self) -> bool:
        return self._is_running("summary")

    @property
    def analysis_pending(self) -> bool:
        return self._is_running("analysis")

    # ------------------------------------------------------------------
    # Inputs (never move the step on their own)
    # ------------------------------------------------------------------

    def select_mode(self, mode: PitchMode) -> None:
        self._session.mode = mode

    def submit_answers(self, answers: Mapping[str, str]) -> None:
        """Record questionnaire answers; partial submissions accumulate."""
        unknown = set(answers) - set(QUESTION_FIELDS)
        if unknown:
            raise ValueError(f"Unknown questionnaire fields: {', '.join(sorted(unknown))}")
        for name, value in answers.items():
            setattr(self._session.idea, name, value)
            self._session.answered.add(name)

    def select_duration(self, duration: PitchDuration) -> None:
        self._session.duration = duration

    def select_style(self, style: PitchStyle) -> None:
        self._session.style = style

    def submit_capture(self, text: str) -> None:
        """Store the final transcript produced by a capture."""
        if self._session.step is not PitchStep.CAPTURE:
            raise CaptureError("Pitch text can only be captured at the capture step")
        self._session.idea.pitch_text = text
        self._session.live_transcript = text
        self._session.capture_complete = True

    async def run_capture(self, adapter: CaptureAdapter) -> str:
        """Drive a capture adapter to completion and store its transcript.

        Raises:
            PermissionDeniedError: If the adapter is not allowed to capture.
            CaptureError: If the adapter is already capturing or we are not
                at the capture step.
        """
        if self._session.step is not PitchStep.CAPTURE:
            raise CaptureError("Capture is only available at the capture step")
        if adapter.is_active:
            raise CaptureError("A capture is already in progress")
        if not await adapter.request_permission():
            raise PermissionDeniedError(
                "Microphone and Speech Recognition access is required"
                if self._session.mode is PitchMode.VOICE
                else "Camera access is required"
            )

        config = CaptureConfig(
            mode=self._session.mode or PitchMode.VOICE,
            duration=self._session.duration,
        )
        limit = config.time_limit_seconds
        try:
            async with asyncio.timeout(limit):
                async for partial in adapter.start_capture(config):
                    self._session.live_transcript = partial
        except TimeoutError:
            logger.info("Capture stopped at the %ss time limit", limit)
        text = await adapter.stop_capture()
        self.submit_capture(text)
        return text

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def advance(self) -> PitchStep:
        """Move one step forward if the current step's guard allows it.

        Returns:
            The step the session is on afterwards. An unsatisfied guard leaves
            the session untouched and returns the current step.
        """
        session = self._session
        current = session.step
        target: PitchStep | None = None

        if current is PitchStep.SELECT_MODE:
            if session.mode is not None:
                target = PitchStep.QUESTIONNAIRE
        elif current is PitchStep.QUESTIONNAIRE:
            if session.answered.issuperset(QUESTION_FIELDS):
                target = PitchStep.CONFIRM_IDEA
        elif current is PitchStep.CONFIRM_IDEA:
            target = PitchStep.SUMMARY_REVIEW
        elif current is PitchStep.SUMMARY_REVIEW:
            target = PitchStep.SELECT_DURATION
        elif current is PitchStep.SELECT_DURATION:
            if session.duration is not None:
                target = PitchStep.SELECT_STYLE
        elif current is PitchStep.SELECT_STYLE:
            if session.style is not None:
                target = PitchStep.CAPTURE
        elif current is PitchStep.CAPTURE:
            if session.capture_complete:
                target = PitchStep.ANALYSIS
        elif current is PitchStep.ANALYSIS:
            if session.analysis_error is not None:
                self.retry_analysis()
            else:
                await self._finish()
            return session.step

        if target is None:
            logger.debug("Guard blocked transition out of %s", current)
            return current

        session.step = target
        logger.info("Workflow moved %s -> %s", current, target)

        if target is PitchStep.SUMMARY_REVIEW:
            session.summary = None
            idea = dataclasses.replace(session.idea)
            self._schedule("summary", self._generate_summary(session.generation, idea))
        elif target is PitchStep.ANALYSIS:
            self._start_analysis()

        return session.step

    def retry_analysis(self) -> bool:
        """Re-submit the captured text after a failed analysis.

        Returns:
            True if a new analysis request was issued. Nothing is issued outside
            the analysis step, while a request is in flight, or once an analysis
            has succeeded.
        """
        session = self._session
        if (
            session.step is not PitchStep.ANALYSIS
            or self.analysis_pending
            or session.analysis is not None
        ):
            return False
        logger.info("Retrying pitch analysis")
        self._start_analysis()
        return True

    def recapture(self) -> PitchStep:
        """Go back from the analysis step to record the pitch again.

        Not available once the run has been saved.
        """
        session = self._session
        if session.step is not PitchStep.ANALYSIS or session.saved_pitch is not None:
            return session.step
        session.generation += 1
        session.analysis = None
        session.analysis_error = None
        session.idea.pitch_text = ""
        session.live_transcript = ""
        session.capture_complete = False
        session.step = PitchStep.CAPTURE
        logger.info("Workflow moved %s -> %s", PitchStep.ANALYSIS, session.step)
        return session.step

    def edit_answers(self) -> PitchStep:
        """Go back from the summary review to the questionnaire."""
        session = self._session
        if session.step is not PitchStep.SUMMARY_REVIEW:
            return session.step
        session.generation += 1
        session.summary = None
        session.step = PitchStep.QUESTIONNAIRE
        logger.info("Workflow moved %s -> %s", PitchStep.SUMMARY_REVIEW, session.step)
        return session.step

    def reset(self) -> None:
        """Return to mode selection with every input and result cleared."""
        generation = self._session.generation + 1
        self._session = PitchSession(generation=generation)
        logger.info("Workflow reset (generation %d)", generation)

    async def wait_pending(self) -> None:
        """Wait for any in-flight summary or analysis request to settle."""
        tasks = [task for task in self._running if not task.done()]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def aclose(self) -> None:
        """Tear the session down, cancelling in-flight requests."""
        tasks = list(self._running)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._running.clear()
        self._tasks.clear()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _is_running(self, name: str) -> bool:
        task = self._tasks.get(name)
        return task is not None and not task.done()

    def _schedule(self, name: str, request: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(request, name=f"pitch-{name}")
        task.add_done_callback(_log_task_failure)
        task.add_done_callback(self._running.discard)
        self._running.add(task)
        self._tasks[name] = task

    def _start_analysis(self) -> None:
        session = self._session
        session.analysis = None
        session.analysis_error = None
        self._schedule("analysis", self._analyze(session.generation, session.idea.pitch_text))

    def _is_stale(self, generation: int, what: str) -> bool:
        if generation != self._session.generation:
            logger.info(
                "Discarding stale %s (issued for generation %d, session is at %d)",
                what,
                generation,
                self._session.generation,
            )
            return True
        return False

    async def _generate_summary(self, generation: int, idea: PitchIdea) -> None:
        try:
            summary = await self._analyzer.generate_summary(idea)
        except PitchGradeError as exc:
            logger.warning("Failed to generate summary: %s", exc.message)
            summary = SUMMARY_FAILURE_MESSAGE
        if self._is_stale(generation, "summary"):
            return
        self._session.summary = summary

    async def _analyze(self, generation: int, pitch_text: str) -> None:
        try:
            analysis = await self._analyzer.analyze_text(pitch_text)
        except PitchGradeError as exc:
            if self._is_stale(generation, "analysis error"):
                return
            logger.warning("Pitch analysis failed (%s): %s", exc.kind, exc.message)
            self._session.analysis_error = AnalysisFailure(kind=exc.kind, message=exc.message)
            return
        if self._is_stale(generation, "analysis"):
            return
        self._session.analysis = analysis

    async def _finish(self) -> None:
        session = self._session
        if session.analysis is None:
            logger.debug("Analysis not available yet; nothing to save")
            return
        if session.saved_pitch is not None:
            return

        record = SavedPitch(
            business_name=session.idea.business_name,
            mode=session.mode or PitchMode.CAMERA,
            summary=session.summary or "",
            score=session.analysis.overall_score,
        )
        # Claimed before the write so an overlapping finish sees it and stops.
        session.saved_pitch = record
        try:
            await asyncio.to_thread(self._store.append, record)
        except BaseException:
            session.saved_pitch = None
            raise
        logger.info("Saved pitch %s for %r", record.id, record.business_name)


def _log_task_failure(task: asyncio.Task[None]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Workflow task %s failed", task.get_name(), exc_info=exc)
