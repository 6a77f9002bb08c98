import uuid

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from backend.utils.time_utils import now_iso, schedule_status


def new_meeting_id() -> str:
    return uuid.uuid4().hex[:24]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Poll(_CamelModel):
    question: str
    options: list[str] = Field(default_factory=list)
    created_at: str = Field(default_factory=now_iso)


class PollCreate(_CamelModel):
    question: str = ""
    options: list[str] = Field(default_factory=list)


class Meeting(_CamelModel):
    id: str = Field(default_factory=new_meeting_id, alias="_id")
    user_id: str
    title: str
    description: str = ""
    # kept as the raw strings from HTML inputs
    start_time: str
    end_time: str
    attendees: str = ""
    ppt_url: str = ""
    polls: list[Poll] = Field(default_factory=list)
    status: str = "scheduled"
    meeting_link: str | None = None
    calendar_event_id: str | None = None
    conference_link: str | None = None
    recording_url: str | None = None
    transcription: str | None = None
    summary: str | None = None
    created_at: str = Field(default_factory=now_iso)

    def attendee_emails(self) -> list[str]:
        return [email.strip() for email in self.attendees.split(",") if email.strip()]

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)

    def to_response(self) -> dict:
        data = self.to_document()
        data["scheduleState"] = schedule_status(self.start_time, self.end_time)
        return data


class MeetingUpdate(_CamelModel):
    """Fields a client may change through ``PUT /api/meetings``."""

    title: str | None = None
    description: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    attendees: str | None = None
    ppt_url: str | None = None
    polls: list[Poll] | None = None
    status: str | None = None
    meeting_link: str | None = None
    recording_url: str | None = None
    transcription: str | None = None
    summary: str | None = None


class ShareOptions(_CamelModel):
    video: bool = True
    notes: bool = True
    ppt: bool = True
