"""Tests for saved-pitch history stores (no Supabase required)."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from pitchgrade.config import Settings
from pitchgrade.errors import ErrorKind, HistoryStoreError
from pitchgrade.history.models import SavedPitch
from pitchgrade.history.storage import (
    HISTORY_KEY,
    POSITION_COLUMN,
    JsonFileHistoryStore,
    SupabaseHistoryStore,
    build_history_store,
)
from pitchgrade.pitch_config import PitchMode


def make_pitches(count: int) -> list[SavedPitch]:
    start = datetime(2024, 3, 1, 9, 30, 15, 123456, tzinfo=timezone.utc)
    return [
        SavedPitch(
            business_name=f"Startup {i}",
            created_at=start + timedelta(minutes=i),
            mode=PitchMode.VOICE if i % 2 else PitchMode.CAMERA,
            summary=f"Summary {i}",
            score=60 + i,
        )
        for i in range(count)
    ]


# ---------------------------------------------------------------------------
# JSON file store
# ---------------------------------------------------------------------------


class TestJsonFileHistoryStore:
    def test_missing_file_loads_empty(self, tmp_path: Path) -> None:
        store = JsonFileHistoryStore(tmp_path / "history.json")
        assert store.load_all() == []

    def test_round_trip_preserves_order_and_fields(self, tmp_path: Path) -> None:
        pitches = make_pitches(4)
        JsonFileHistoryStore(tmp_path / "history.json").save_all(pitches)

        reloaded = JsonFileHistoryStore(tmp_path / "history.json").load_all()

        assert reloaded == pitches
        assert [p.id for p in reloaded] == [p.id for p in pitches]
        assert [p.created_at for p in reloaded] == [p.created_at for p in pitches]
        assert [p.score for p in reloaded] == [60, 61, 62, 63]

    def test_append_keeps_existing_records(self, tmp_path: Path) -> None:
        store = JsonFileHistoryStore(tmp_path / "history.json")
        first, second = make_pitches(2)
        store.append(first)
        store.append(second)
        assert store.load_all() == [first, second]

    def test_records_live_under_fixed_key(self, tmp_path: Path) -> None:
        path = tmp_path / "history.json"
        path.write_text(json.dumps({"other_setting": True}), encoding="utf-8")

        JsonFileHistoryStore(path).save_all(make_pitches(1))

        document = json.loads(path.read_text(encoding="utf-8"))
        assert document["other_setting"] is True
        assert len(document[HISTORY_KEY]) == 1
        assert document[HISTORY_KEY][0]["business_name"] == "Startup 0"

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "dir" / "history.json"
        JsonFileHistoryStore(path).save_all(make_pitches(1))
        assert path.exists()

    def test_corrupt_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "history.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(HistoryStoreError) as exc_info:
            JsonFileHistoryStore(path).load_all()
        assert exc_info.value.kind is ErrorKind.STORAGE

    def test_invalid_records_raise(self, tmp_path: Path) -> None:
        path = tmp_path / "history.json"
        path.write_text(json.dumps({HISTORY_KEY: [{"business_name": "x"}]}), encoding="utf-8")
        with pytest.raises(HistoryStoreError):
            JsonFileHistoryStore(path).load_all()

    def test_non_object_document_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "history.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(HistoryStoreError):
            JsonFileHistoryStore(path).load_all()


# ---------------------------------------------------------------------------
# Supabase store
# ---------------------------------------------------------------------------


class TestSupabaseHistoryStore:
    def test_append_takes_next_position(self) -> None:
        client = MagicMock()
        last = client.table.return_value.select.return_value.order.return_value.limit.return_value
        last.execute.return_value.data = [{"position": 4}]
        pitch = make_pitches(1)[0]

        SupabaseHistoryStore(client).append(pitch)

        client.table.assert_called_with(HISTORY_KEY)
        row = client.table.return_value.insert.call_args.args[0]
        assert row["id"] == str(pitch.id)
        assert row["mode"] == "camera"
        assert row["score"] == 60
        assert row[POSITION_COLUMN] == 5

    def test_append_to_empty_table_starts_at_zero(self) -> None:
        client = MagicMock()
        last = client.table.return_value.select.return_value.order.return_value.limit.return_value
        last.execute.return_value.data = []

        SupabaseHistoryStore(client).append(make_pitches(1)[0])

        row = client.table.return_value.insert.call_args.args[0]
        assert row[POSITION_COLUMN] == 0

    def test_load_all_orders_by_position(self) -> None:
        newer, older = reversed(make_pitches(2))
        rows = [
            {**p.model_dump(mode="json"), POSITION_COLUMN: i}
            for i, p in enumerate([newer, older])
        ]
        client = MagicMock()
        query = client.table.return_value.select.return_value.order.return_value
        query.execute.return_value.data = rows

        loaded = SupabaseHistoryStore(client).load_all()

        client.table.return_value.select.return_value.order.assert_called_once_with(
            POSITION_COLUMN
        )
        assert loaded == [newer, older]

    def test_save_all_keeps_list_order_not_timestamp_order(self) -> None:
        pitches = list(reversed(make_pitches(3)))
        client = MagicMock()

        SupabaseHistoryStore(client).save_all(pitches)

        rows = client.table.return_value.upsert.call_args.args[0]
        assert [row["id"] for row in rows] == [str(p.id) for p in pitches]
        assert [row[POSITION_COLUMN] for row in rows] == [0, 1, 2]
        not_in = client.table.return_value.delete.return_value.not_.in_
        not_in.assert_called_once_with("id", [str(p.id) for p in pitches])

    def test_save_all_empty_list_clears_table(self) -> None:
        client = MagicMock()

        SupabaseHistoryStore(client).save_all([])

        client.table.return_value.upsert.assert_not_called()
        delete = client.table.return_value.delete.return_value
        delete.neq.assert_called_once_with("id", "00000000-0000-0000-0000-000000000000")
        delete.neq.return_value.execute.assert_called_once()

    def test_save_all_upserts_in_batches(self) -> None:
        client = MagicMock()
        SupabaseHistoryStore(client).save_all(make_pitches(120))
        upsert = client.table.return_value.upsert
        assert upsert.call_count == 3
        assert [len(c.args[0]) for c in upsert.call_args_list] == [50, 50, 20]
        assert upsert.call_args_list[2].args[0][-1][POSITION_COLUMN] == 119

    def test_invalid_rows_raise(self) -> None:
        client = MagicMock()
        query = client.table.return_value.select.return_value.order.return_value
        query.execute.return_value.data = [{"id": "not-a-uuid", POSITION_COLUMN: 0}]
        with pytest.raises(HistoryStoreError):
            SupabaseHistoryStore(client).load_all()


# ---------------------------------------------------------------------------
# Backend selection
# ---------------------------------------------------------------------------


class TestBuildHistoryStore:
    def test_file_backend(self, tmp_path: Path) -> None:
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            history_path=tmp_path / "h.json",
        )
        store = build_history_store(settings)
        assert isinstance(store, JsonFileHistoryStore)
        assert store.storage_name == "file"

    def test_supabase_backend(self) -> None:
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            history_backend="supabase",
            supabase_url="https://project.supabase.co",
            supabase_key="service-key",
        )
        with patch("pitchgrade.history.storage.create_client") as mock_create:
            store = build_history_store(settings)
        mock_create.assert_called_once_with("https://project.supabase.co", "service-key")
        assert isinstance(store, SupabaseHistoryStore)

    def test_supabase_backend_requires_credentials(self) -> None:
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            history_backend="supabase",
            supabase_url="",
            supabase_key="",
        )
        with pytest.raises(HistoryStoreError, match="SUPABASE_URL"):
            build_history_store(settings)

    def test_unknown_backend(self) -> None:
        settings = Settings(_env_file=None, history_backend="redis")  # type: ignore[call-arg]
        with pytest.raises(HistoryStoreError, match="redis"):
            build_history_store(settings)
