"""In-process registry of active pitch workflows, keyed by session ID."""

from __future__ import annotations

import logging
import uuid

from pitchgrade.history.storage import HistoryStore
from pitchgrade.workflow.machine import PitchAnalyzer, PitchWorkflow

logger = logging.getLogger(__name__)


class SessionRegistry:
    def __init__(self, analyzer: PitchAnalyzer | None, store: HistoryStore) -> None:
        self.analyzer = analyzer
        self.store = store
        self._sessions: dict[str, PitchWorkflow] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self) -> tuple[str, PitchWorkflow]:
        if self.analyzer is None:
            raise RuntimeError("No analyzer configured; cannot start a pitch session")
        session_id = str(uuid.uuid4())
        workflow = PitchWorkflow(self.analyzer, self.store)
        self._sessions[session_id] = workflow
        logger.info("Started pitch session %s", session_id)
        return session_id, workflow

    def get(self, session_id: str) -> PitchWorkflow:
        """Return the workflow for ``session_id``; raises KeyError if unknown."""
        return self._sessions[session_id]

    async def remove(self, session_id: str) -> None:
        workflow = self._sessions.pop(session_id)
        await workflow.aclose()
        logger.info("Closed pitch session %s", session_id)

    async def aclose(self) -> None:
        for session_id in list(self._sessions):
            await self.remove(session_id)
