from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, List

from pydantic import ValidationError

from backend.errors import MeetingNotFoundError
from backend.models.meeting_model import Meeting, Poll

logger = logging.getLogger(__name__)


class MeetingRepository:
    """JSON-file backed document store for meetings."""

    def __init__(self, storage_path: Path | None = None):
        self.storage_path = storage_path or Path(__file__).resolve().parents[1] / "data" / "meetings.json"
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _read_raw(self) -> list[dict]:
        if not self.storage_path.exists():
            return []
        try:
            return json.loads(self.storage_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Meeting store %s is not valid JSON, treating as empty", self.storage_path)
            return []

    def _write_raw(self, payload: list[dict]) -> None:
        self.storage_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")

    def list_meetings(self, user_id: str | None = None) -> List[Meeting]:
        with self._lock:
            payload = self._read_raw()
        meetings = [Meeting.model_validate(item) for item in payload]
        if user_id is not None:
            meetings = [meeting for meeting in meetings if meeting.user_id == user_id]
        return sorted(meetings, key=lambda meeting: meeting.created_at, reverse=True)

    def get_meeting(self, meeting_id: str) -> Meeting | None:
        with self._lock:
            for item in self._read_raw():
                if item.get("_id") == meeting_id:
                    return Meeting.model_validate(item)
        return None

    def create_meeting(self, payload: dict[str, Any]) -> Meeting:
        try:
            meeting = Meeting.model_validate(payload)
        except ValidationError as exc:
            raise ValueError(_validation_message(exc)) from exc
        with self._lock:
            data = self._read_raw()
            data.append(meeting.to_document())
            self._write_raw(data)
        logger.info("Created meeting %s for user %s", meeting.id, meeting.user_id)
        return meeting

    def update_meeting(self, meeting_id: str, **updates: Any) -> Meeting:
        with self._lock:
            data = self._read_raw()
            return self._apply_update(data, meeting_id, lambda current: updates)

    def add_poll(self, meeting_id: str, poll: Poll) -> Meeting:
        # read-modify-write under a single lock
        with self._lock:
            data = self._read_raw()
            return self._apply_update(data, meeting_id, lambda current: {"polls": [*current.polls, poll]})

    def _apply_update(self, data: list[dict], meeting_id: str, changes) -> Meeting:
        for idx, item in enumerate(data):
            if item.get("_id") == meeting_id:
                current = Meeting.model_validate(item)
                try:
                    updated = Meeting.model_validate({**current.model_dump(), **changes(current)})
                except ValidationError as exc:
                    raise ValueError(_validation_message(exc)) from exc
                data[idx] = updated.to_document()
                self._write_raw(data)
                return updated
        raise MeetingNotFoundError(meeting_id)

    def delete_meeting(self, meeting_id: str) -> Meeting:
        with self._lock:
            data = self._read_raw()
            for idx, item in enumerate(data):
                if item.get("_id") == meeting_id:
                    removed = data.pop(idx)
                    self._write_raw(data)
                    logger.info("Deleted meeting %s", meeting_id)
                    return Meeting.model_validate(removed)
        raise MeetingNotFoundError(meeting_id)


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)
