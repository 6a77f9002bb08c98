import sys
from pathlib import Path
from types import SimpleNamespace

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.config import Settings  # noqa: E402
from backend.meetings.controller import MeetingController  # noqa: E402
from backend.processing.controller import ProcessingController  # noqa: E402
from backend.services.google_calendar import GoogleCalendarClient  # noqa: E402
from backend.services.groq_client import GroqClient  # noqa: E402
from backend.services.repository import MeetingRepository  # noqa: E402
from backend.services.share_webhook import ShareWebhook  # noqa: E402

SUMMARY_HTML = "```html\n<h2>Executive Summary</h2><ul><li>Alice sends the report</li></ul>\n```"
TRANSCRIPT = "Alice will send the quarterly report by Friday. Bob owns the release checklist."


@pytest.fixture(autouse=True)
def _aws_env(monkeypatch):
    monkeypatch.setenv("AWS_REGION", "us-east-1")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "test")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "test")


class FakeOpenAI:
    """Stands in for the OpenAI SDK client pointed at Groq."""

    def __init__(self, transcript: str = TRANSCRIPT, summary: str = SUMMARY_HTML):
        self.transcript = transcript
        self.summary = summary
        self.transcribe_error: Exception | None = None
        self.chat_error: Exception | None = None
        self.calls: list[tuple[str, dict]] = []
        self.audio = SimpleNamespace(transcriptions=SimpleNamespace(create=self._transcribe))
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._complete))

    def _transcribe(self, **kwargs):
        self.calls.append(("transcribe", kwargs))
        if self.transcribe_error:
            raise self.transcribe_error
        return SimpleNamespace(text=self.transcript)

    def _complete(self, **kwargs):
        self.calls.append(("chat", kwargs))
        if self.chat_error:
            raise self.chat_error
        message = SimpleNamespace(content=self.summary)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class MemoryStorage:
    def __init__(self):
        self.objects: dict[str, bytes] = {}

    def write_bytes(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        self.objects[key] = data
        return f"memory://{key}"

    def delete_prefix(self, prefix: str) -> int:
        keys = [key for key in self.objects if key.startswith(prefix)]
        for key in keys:
            del self.objects[key]
        return len(keys)


class RecordingTransport:
    """httpx mock transport that records requests and replies with a canned JSON body."""

    def __init__(self, status_code: int = 200, body: dict | None = None):
        self.status_code = status_code
        self.body = body or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        groq_api_key="test-key",
        meetings_store_path=tmp_path / "meetings.json",
        max_upload_bytes=64 * 1024,
        post_meeting_webhook_url="https://hooks.example.com/meetmind",
    )


@pytest.fixture
def fake_openai() -> FakeOpenAI:
    return FakeOpenAI()


@pytest.fixture
def groq(settings, fake_openai) -> GroqClient:
    return GroqClient(settings, client=fake_openai)


@pytest.fixture
def repository(settings) -> MeetingRepository:
    return MeetingRepository(settings.meetings_store_path)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def calendar_transport() -> RecordingTransport:
    return RecordingTransport(
        body={
            "id": "evt-123",
            "htmlLink": "https://calendar.google.com/event?eid=evt-123",
            "hangoutLink": "https://meet.google.com/abc-defg-hij",
        }
    )


@pytest.fixture
def webhook_transport() -> RecordingTransport:
    return RecordingTransport(body={"status": "received"})


@pytest.fixture
def meeting_controller(settings, repository, storage, groq, calendar_transport, webhook_transport) -> MeetingController:
    return MeetingController(
        repository=repository,
        storage=storage,
        groq=groq,
        calendar=GoogleCalendarClient(settings, http_client=httpx.Client(transport=httpx.MockTransport(calendar_transport))),
        webhook=ShareWebhook(settings, http_client=httpx.Client(transport=httpx.MockTransport(webhook_transport))),
        settings=settings,
    )


@pytest.fixture
def processing_controller(settings, groq) -> ProcessingController:
    return ProcessingController(settings, groq=groq)


@pytest.fixture
def client(monkeypatch, meeting_controller, processing_controller):
    from fastapi.testclient import TestClient

    from backend.main import app
    from backend.meetings import routes as meeting_routes
    from backend.processing import routes as processing_routes

    monkeypatch.setattr(meeting_routes, "controller", meeting_controller)
    monkeypatch.setattr(processing_routes, "controller", processing_controller)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def meeting_payload() -> dict:
    return {
        "userId": "user-1",
        "title": "Sprint Planning",
        "description": "Plan sprint 42",
        "startTime": "2030-05-01T10:00",
        "endTime": "2030-05-01T11:00",
        "attendees": "alice@example.com, bob@example.com",
    }
