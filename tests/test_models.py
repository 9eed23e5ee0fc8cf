"""Tests for pitch configuration enums and the analysis / history data models."""

from __future__ import annotations

import json
import uuid
from datetime import datetime

import pytest
from conftest import analysis_payload
from pydantic import ValidationError

from pitchgrade.analysis.models import PitchAnalysis, PitchIdea
from pitchgrade.history.models import SavedPitch
from pitchgrade.pitch_config import (
    QUESTION_FIELDS,
    QUESTIONS,
    PitchDuration,
    PitchMode,
    PitchStyle,
)

# ---------------------------------------------------------------------------
# Enum tests
# ---------------------------------------------------------------------------


class TestPitchMode:
    def test_values(self) -> None:
        assert PitchMode.CAMERA.value == "camera"
        assert PitchMode.VOICE.value == "voice"

    def test_invalid_raises(self) -> None:
        with pytest.raises(ValueError):
            PitchMode("video")


class TestPitchDuration:
    @pytest.mark.parametrize(
        ("duration", "seconds"),
        [
            (PitchDuration.ELEVATOR, 30),
            (PitchDuration.ONE_MINUTE, 60),
            (PitchDuration.TWO_MINUTES, 120),
            (PitchDuration.FIVE_MINUTES, 300),
            (PitchDuration.SEVEN_MINUTES, 420),
        ],
    )
    def test_seconds(self, duration: PitchDuration, seconds: int) -> None:
        assert duration.seconds == seconds

    def test_from_display_string(self) -> None:
        assert PitchDuration("30 Seconds") is PitchDuration.ELEVATOR

    def test_every_duration_has_a_description(self) -> None:
        assert all(d.description for d in PitchDuration)


class TestPitchStyle:
    def test_from_display_string(self) -> None:
        assert PitchStyle("Steve Jobs Style") is PitchStyle.STEVE_JOBS

    def test_is_str_subclass(self) -> None:
        """Enum values behave as plain strings for JSON serialization."""
        assert isinstance(PitchStyle.TRADITIONAL, str)

    def test_every_style_has_a_description(self) -> None:
        assert len(list(PitchStyle)) == 5
        assert all(s.description for s in PitchStyle)


class TestQuestionnaire:
    def test_fields_match_pitch_idea(self) -> None:
        idea_fields = set(PitchIdea.__dataclass_fields__) - {"pitch_text"}
        assert set(QUESTION_FIELDS) == idea_fields

    def test_question_order(self) -> None:
        assert [q.title for q in QUESTIONS] == [
            "Business Name",
            "Industry",
            "Problem",
            "Solution",
            "Target Market",
            "Business Model",
        ]


# ---------------------------------------------------------------------------
# PitchAnalysis tests
# ---------------------------------------------------------------------------


class TestPitchAnalysis:
    def test_decode_from_wire_json(self) -> None:
        analysis = PitchAnalysis.model_validate_json(json.dumps(analysis_payload()))
        assert analysis.overall_score == 88
        assert analysis.overall_feedback == "A confident, well-paced pitch."
        assert analysis.delivery_style.feedback == "Delivery feedback"

    def test_sections_in_display_order(self) -> None:
        analysis = PitchAnalysis.model_validate(analysis_payload())
        titles = [title for title, _ in analysis.sections]
        assert titles == [
            "Clarity & Structure",
            "Delivery Style",
            "Communication Effectiveness",
            "Time Management",
        ]
        assert [s.score for _, s in analysis.sections] == [90, 85, 80, 95]

    def test_dump_uses_wire_keys(self) -> None:
        analysis = PitchAnalysis.model_validate(analysis_payload())
        assert analysis.model_dump(by_alias=True) == analysis_payload()

    def test_immutable(self) -> None:
        analysis = PitchAnalysis.model_validate(analysis_payload())
        with pytest.raises(ValidationError):
            analysis.overall_score = 10  # type: ignore[misc]

    def test_missing_recommendations_rejected(self) -> None:
        payload = analysis_payload()
        del payload["clarity"]["recommendations"]
        with pytest.raises(ValidationError):
            PitchAnalysis.model_validate(payload)

    def test_float_score_rejected(self) -> None:
        payload = analysis_payload()
        payload["clarity"]["score"] = 90.5
        with pytest.raises(ValidationError):
            PitchAnalysis.model_validate_json(json.dumps(payload))

    @pytest.mark.parametrize("score", [0, 100])
    def test_boundary_scores_accepted(self, score: int) -> None:
        analysis = PitchAnalysis.model_validate(analysis_payload(overall=score, timing=score))
        assert analysis.overall_score == score
        assert analysis.time_management.score == score


# ---------------------------------------------------------------------------
# SavedPitch tests
# ---------------------------------------------------------------------------


class TestSavedPitch:
    def test_defaults(self) -> None:
        pitch = SavedPitch(business_name="GreenLoop", mode=PitchMode.VOICE, summary="s", score=88)
        assert isinstance(pitch.id, uuid.UUID)
        assert isinstance(pitch.created_at, datetime)
        assert pitch.created_at.tzinfo is not None

    def test_unique_ids(self) -> None:
        a = SavedPitch(business_name="A", mode=PitchMode.CAMERA, summary="", score=1)
        b = SavedPitch(business_name="A", mode=PitchMode.CAMERA, summary="", score=1)
        assert a.id != b.id

    def test_immutable(self) -> None:
        pitch = SavedPitch(business_name="A", mode=PitchMode.CAMERA, summary="", score=1)
        with pytest.raises(ValidationError):
            pitch.score = 99  # type: ignore[misc]
