from __future__ import annotations

import logging
from typing import Any

import httpx

from backend.config import Settings, get_settings
from backend.errors import UpstreamServiceError
from backend.models.meeting_model import Meeting, ShareOptions

logger = logging.getLogger(__name__)


def build_share_payload(meeting: Meeting, options: ShareOptions) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "meetingId": meeting.id,
        "title": meeting.title,
        "attendees": meeting.attendees,
    }
    if options.notes:
        payload["summary"] = meeting.summary or ""
        payload["transcription"] = meeting.transcription or ""
    if options.ppt:
        payload["pptUrl"] = meeting.ppt_url
    if options.video:
        payload["recordingUrl"] = meeting.recording_url or ""
    return payload


class ShareWebhook:
    """Posts meeting assets to the post-meeting automation webhook."""

    def __init__(self, settings: Settings | None = None, http_client: httpx.Client | None = None):
        self.settings = settings or get_settings()
        self.http_client = http_client

    def send(self, payload: dict[str, Any]) -> None:
        url = self.settings.post_meeting_webhook_url
        if not url:
            raise ValueError("Post-meeting webhook is not configured")

        client = self.http_client or httpx.Client(timeout=self.settings.http_timeout_seconds)
        try:
            response = client.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.exception("Post-meeting webhook failed for meeting %s", payload.get("meetingId"))
            raise UpstreamServiceError(f"Sharing failed: {exc}", details=repr(exc)) from exc
        finally:
            if self.http_client is None:
                client.close()
        logger.info("Shared meeting %s via webhook", payload.get("meetingId"))
