"""Create Google Calendar events on behalf of the signed-in user.

The browser hands us the user's OAuth access token (calendar.events scope);
the event is created on their calendar with a Meet conference attached and
invitations sent to every attendee.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any

import httpx

from backend.config import Settings, get_settings
from backend.errors import MissingCredentialsError, UpstreamServiceError
from backend.models.meeting_model import Meeting
from backend.utils.time_utils import with_seconds

logger = logging.getLogger(__name__)

EVENT_FOOTER = "\n\n--\nScheduled via MeetMind"


def build_event(meeting: Meeting, time_zone: str = "UTC") -> dict[str, Any]:
    return {
        "summary": meeting.title,
        "description": f"{meeting.description}{EVENT_FOOTER}",
        "start": {"dateTime": with_seconds(meeting.start_time), "timeZone": time_zone},
        "end": {"dateTime": with_seconds(meeting.end_time), "timeZone": time_zone},
        "attendees": [{"email": email} for email in meeting.attendee_emails()],
        "reminders": {
            "useDefault": False,
            "overrides": [
                {"method": "email", "minutes": 30},
                {"method": "popup", "minutes": 10},
            ],
        },
        "conferenceData": {
            "createRequest": {"requestId": uuid.uuid4().hex[:10]},
        },
    }


class GoogleCalendarClient:
    def __init__(self, settings: Settings | None = None, http_client: httpx.Client | None = None):
        self.settings = settings or get_settings()
        self.http_client = http_client

    def create_event(self, access_token: str, event: dict[str, Any]) -> dict[str, Any]:
        if not access_token:
            raise MissingCredentialsError("Calendar access required.")

        url = f"{self.settings.google_calendar_api_url}/calendars/{self.settings.google_calendar_id}/events"
        params = {"conferenceDataVersion": 1, "sendUpdates": "all"}
        headers = {"Authorization": f"Bearer {access_token}"}
        client = self.http_client or httpx.Client(timeout=self.settings.http_timeout_seconds)
        try:
            response = client.post(url, params=params, headers=headers, json=event)
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.exception("Google Calendar request failed")
            raise UpstreamServiceError(f"Schedule failed: {exc}", details=repr(exc)) from exc
        finally:
            if self.http_client is None:
                client.close()

        error = data.get("error") if isinstance(data, dict) else None
        if error or response.is_error:
            message = error.get("message") if isinstance(error, dict) else str(error or response.status_code)
            logger.error("Google Calendar rejected event: %s", message)
            raise UpstreamServiceError(f"Schedule failed: {message}", details=str(data))
        logger.info("Created calendar event %s", data.get("id"))
        return data
