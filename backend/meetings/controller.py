from __future__ import annotations

import logging
from typing import Any

from backend.config import Settings, get_settings
from backend.errors import MeetingNotFoundError, MissingCredentialsError, NoSpeechDetectedError
from backend.models.meeting_model import Meeting, MeetingUpdate, Poll, PollCreate, ShareOptions
from backend.services.google_calendar import GoogleCalendarClient, build_event
from backend.services.groq_client import GroqClient
from backend.services.repository import MeetingRepository
from backend.services.s3_storage import S3Storage
from backend.services.share_webhook import ShareWebhook, build_share_payload
from backend.services.summarizer import Summarizer, clean_summary

READ_ONLY_FIELDS = ("id", "_id", "userId", "user_id", "createdAt", "created_at")


class MeetingController:
    def __init__(
        self,
        repository: MeetingRepository | None = None,
        storage: S3Storage | None = None,
        groq: GroqClient | None = None,
        summarizer: Summarizer | None = None,
        calendar: GoogleCalendarClient | None = None,
        webhook: ShareWebhook | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.repository = repository or MeetingRepository(self.settings.meetings_store_path)
        self._storage = storage
        self.groq = groq or GroqClient(self.settings)
        self.summarizer = summarizer or Summarizer(self.settings, groq=self.groq)
        self.calendar = calendar or GoogleCalendarClient(self.settings)
        self.webhook = webhook or ShareWebhook(self.settings)
        self.logger = logging.getLogger(__name__)

    @property
    def storage(self) -> S3Storage:
        if self._storage is None:
            self._storage = S3Storage()
        return self._storage

    # --- CRUD ---

    def create_meeting(self, payload: dict[str, Any]) -> Meeting:
        if not payload.get("userId") or not payload.get("title"):
            raise ValueError("Missing fields")
        document = {key: value for key, value in payload.items() if key not in ("id", "_id", "createdAt")}
        return self.repository.create_meeting(document)

    def list_meetings(self, user_id: str | None) -> list[Meeting]:
        if not user_id:
            raise ValueError("No User ID")
        return self.repository.list_meetings(user_id=user_id)

    def get_meeting(self, meeting_id: str) -> Meeting:
        meeting = self.repository.get_meeting(meeting_id)
        if not meeting:
            raise MeetingNotFoundError(meeting_id)
        return meeting

    def update_meeting(self, payload: dict[str, Any]) -> Meeting:
        meeting_id = payload.get("id") or payload.get("_id")
        if not meeting_id:
            raise ValueError("Missing meeting id")
        changes = {key: value for key, value in payload.items() if key not in READ_ONLY_FIELDS}
        updates = MeetingUpdate.model_validate(changes).model_dump(exclude_unset=True)
        return self.repository.update_meeting(meeting_id, **updates)

    def delete_meeting(self, meeting_id: str | None) -> Meeting:
        if not meeting_id:
            raise ValueError("Missing meeting id")
        meeting = self.repository.delete_meeting(meeting_id)
        for prefix in (f"recordings/{meeting_id}/", f"presentations/{meeting_id}/"):
            removed = self.storage.delete_prefix(prefix)
            if removed:
                self.logger.info("Removed %d stored assets under %s", removed, prefix)
        return meeting

    # --- Assets ---

    def add_poll(self, meeting_id: str, payload: PollCreate) -> Meeting:
        question = payload.question.strip()
        options = [option.strip() for option in payload.options if option.strip()]
        if not question:
            raise ValueError("Poll question is required")
        if len(options) < 2:
            raise ValueError("A poll needs at least two options")
        return self.repository.add_poll(meeting_id, Poll(question=question, options=options))

    def attach_presentation(self, meeting_id: str, filename: str, data: bytes, content_type: str | None = None) -> Meeting:
        self.get_meeting(meeting_id)
        if not data:
            raise ValueError("No file uploaded")
        location = self.storage.write_bytes(
            f"presentations/{meeting_id}/{filename}", data, content_type or "application/octet-stream"
        )
        return self.repository.update_meeting(meeting_id, ppt_url=location)

    # --- Recording pipeline ---

    def process_recording(self, meeting_id: str, filename: str, audio: bytes, content_type: str | None = None) -> Meeting:
        """Transcribe, summarize and persist one uploaded recording; any failure aborts the lot."""
        self.get_meeting(meeting_id)
        if not audio:
            raise ValueError("No file uploaded")
        self.groq.ensure_configured()
        self.summarizer.ensure_configured()

        self.logger.info("Processing recording %s for meeting %s (%d bytes)", filename, meeting_id, len(audio))
        transcript = self.groq.transcribe(filename, audio)
        if not transcript:
            raise NoSpeechDetectedError()

        summary = clean_summary(self.summarizer.summarize(transcript))
        self.logger.info("Meeting %s summarized (%d words transcribed)", meeting_id, len(transcript.split()))

        updates: dict[str, Any] = {
            "transcription": transcript,
            "summary": summary,
            "status": "completed",
        }
        if self.settings.store_recordings:
            updates["recording_url"] = self.storage.write_bytes(
                f"recordings/{meeting_id}/{filename}", audio, content_type or "application/octet-stream"
            )
        return self.repository.update_meeting(meeting_id, **updates)

    # --- Calendar & sharing ---

    def schedule_in_calendar(self, meeting_id: str, authorization: str | None, time_zone: str = "UTC") -> Meeting:
        meeting = self.get_meeting(meeting_id)
        token = _bearer_token(authorization)
        if not token:
            raise MissingCredentialsError("Calendar access required.")
        event = self.calendar.create_event(token, build_event(meeting, time_zone))
        return self.repository.update_meeting(
            meeting_id,
            meeting_link=event.get("htmlLink"),
            calendar_event_id=event.get("id"),
            conference_link=event.get("hangoutLink"),
        )

    def share(self, meeting_id: str, options: ShareOptions | None = None) -> dict[str, Any]:
        meeting = self.get_meeting(meeting_id)
        payload = build_share_payload(meeting, options or ShareOptions())
        self.webhook.send(payload)
        return payload


def _bearer_token(authorization: str | None) -> str:
    if not authorization:
        return ""
    scheme, _sep, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()
