"""Saved-pitch history stores: a local JSON key-value file or a Supabase table."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
import uuid
from pathlib import Path
from typing import Any, Protocol, cast

from pydantic import TypeAdapter, ValidationError
from supabase import Client, create_client

from pitchgrade.config import Settings
from pitchgrade.errors import HistoryStoreError
from pitchgrade.history.models import SavedPitch

logger = logging.getLogger(__name__)

# Fixed key the history sequence lives under.
HISTORY_KEY = "saved_pitches"
POSITION_COLUMN = "position"

_PITCH_LIST = TypeAdapter(list[SavedPitch])


class HistoryStore(Protocol):
    storage_name: str

    def load_all(self) -> list[SavedPitch]:
        pass

    def save_all(self, pitches: list[SavedPitch]) -> None:
        pass

    def append(self, pitch: SavedPitch) -> None:
        pass


class JsonFileHistoryStore:
    """Stores the history as one ordered list under ``HISTORY_KEY`` in a JSON file."""

    storage_name = "file"

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    def _read_document(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            document = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise HistoryStoreError(f"Could not read history file {self._path}: {exc}") from exc
        if not isinstance(document, dict):
            raise HistoryStoreError(f"History file {self._path} is not a JSON object")
        return document

    def _write_document(self, document: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".history_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, indent=2)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise HistoryStoreError(f"Could not write history file {self._path}: {exc}") from exc

    def _load(self) -> list[SavedPitch]:
        raw = self._read_document().get(HISTORY_KEY, [])
        try:
            return _PITCH_LIST.validate_python(raw)
        except ValidationError as exc:
            raise HistoryStoreError(f"History file {self._path} holds invalid records") from exc

    def _save(self, pitches: list[SavedPitch]) -> None:
        document = self._read_document()
        document[HISTORY_KEY] = _PITCH_LIST.dump_python(pitches, mode="json")
        self._write_document(document)

    def load_all(self) -> list[SavedPitch]:
        with self._lock:
            return self._load()

    def save_all(self, pitches: list[SavedPitch]) -> None:
        with self._lock:
            self._save(pitches)

    def append(self, pitch: SavedPitch) -> None:
        with self._lock:
            pitches = self._load()
            pitches.append(pitch)
            self._save(pitches)


class SupabaseHistoryStore:
    """Stores one row per saved pitch in the ``saved_pitches`` table.

    Each row carries a ``position`` column holding its index in the history,
    so the table reads back in the order it was saved.
    """

    storage_name = "supabase"

    def __init__(self, client: Client) -> None:
        self._client = client

    def load_all(self) -> list[SavedPitch]:
        result = self._client.table(HISTORY_KEY).select("*").order(POSITION_COLUMN).execute()
        rows = cast(list[dict[str, Any]], result.data)
        records = [{k: v for k, v in row.items() if k != POSITION_COLUMN} for row in rows]
        try:
            return _PITCH_LIST.validate_python(records)
        except ValidationError as exc:
            raise HistoryStoreError("Supabase returned invalid saved-pitch rows") from exc

    def save_all(self, pitches: list[SavedPitch]) -> None:
        """Replace the table contents with ``pitches``, in order."""
        rows = _PITCH_LIST.dump_python(pitches, mode="json")
        for position, row in enumerate(rows):
            row[POSITION_COLUMN] = position

        # Upsert in batches of 50
        batch_size = 50
        for i in range(0, len(rows), batch_size):
            self._client.table(HISTORY_KEY).upsert(rows[i : i + batch_size]).execute()

        # Drop rows that are no longer part of the history
        delete = self._client.table(HISTORY_KEY).delete()
        if rows:
            delete.not_.in_("id", [row["id"] for row in rows]).execute()
        else:
            delete.neq("id", str(uuid.UUID(int=0))).execute()

    def append(self, pitch: SavedPitch) -> None:
        last = (
            self._client.table(HISTORY_KEY)
            .select(POSITION_COLUMN)
            .order(POSITION_COLUMN, desc=True)
            .limit(1)
            .execute()
        )
        data = cast(list[dict[str, Any]], last.data)
        row = pitch.model_dump(mode="json")
        row[POSITION_COLUMN] = data[0][POSITION_COLUMN] + 1 if data else 0
        self._client.table(HISTORY_KEY).insert(row).execute()


def build_history_store(settings: Settings) -> HistoryStore:
    """Pick the history backend named by ``settings.history_backend``."""
    backend = settings.history_backend.strip().lower()
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_key:
            raise HistoryStoreError(
                "SUPABASE_URL and SUPABASE_KEY are required for the supabase history backend"
            )
        return SupabaseHistoryStore(create_client(settings.supabase_url, settings.supabase_key))
    if backend == "file":
        return JsonFileHistoryStore(settings.history_path)
    raise HistoryStoreError(f"Unknown history backend: {settings.history_backend!r}")
