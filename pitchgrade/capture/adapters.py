"""Capture adapters: the seam between the workflow and whatever produces pitch text.

Speech recognition and OCR live outside this package. An adapter only has to
report permission, stream partial text while active, and hand back the final
transcript when stopped.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable
from dataclasses import dataclass
from typing import Protocol

from pitchgrade.errors import CaptureError
from pitchgrade.pitch_config import PitchDuration, PitchMode


@dataclass(frozen=True)
class CaptureConfig:
    """What the capture step was configured with."""

    mode: PitchMode
    duration: PitchDuration | None = None

    @property
    def time_limit_seconds(self) -> int | None:
        return self.duration.seconds if self.duration is not None else None


class CaptureAdapter(Protocol):
    is_active: bool

    async def request_permission(self) -> bool:
        pass

    def start_capture(self, config: CaptureConfig) -> AsyncIterator[str]:
        pass

    async def stop_capture(self) -> str:
        pass


class TextCaptureAdapter:
    """Capture adapter fed with text produced elsewhere (typed, pasted or pre-transcribed).

    Each segment is emitted as a growing partial transcript, the way a live
    recogniser reports progress.
    """

    def __init__(self, segments: Iterable[str], *, permission_granted: bool = True) -> None:
        self._segments = [s for s in segments if s.strip()]
        self._permission_granted = permission_granted
        self._transcript = ""
        self.is_active = False

    async def request_permission(self) -> bool:
        return self._permission_granted

    async def start_capture(self, config: CaptureConfig) -> AsyncIterator[str]:
        if self.is_active:
            raise CaptureError("A capture is already in progress")
        self.is_active = True
        self._transcript = ""
        for segment in self._segments:
            if not self.is_active:
                break
            self._transcript = f"{self._transcript} {segment.strip()}".strip()
            yield self._transcript

    async def stop_capture(self) -> str:
        if not self.is_active:
            raise CaptureError("No capture is in progress")
        self.is_active = False
        return self._transcript
