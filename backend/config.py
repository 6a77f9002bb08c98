from functools import lru_cache
from pathlib import Path
from typing import List, Literal

from pydantic import AnyHttpUrl, field_validator
from pydantic_settings import BaseSettings

DEFAULT_SUMMARY_PROMPT = (
    "You are an expert meeting secretary. Create a concise executive summary "
    "(HTML format) and list key action items from the transcript provided."
)


class Settings(BaseSettings):
    app_name: str = "MeetMind API"
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = True
    log_level: str = "INFO"
    cors_origins: List[AnyHttpUrl] | List[str] = ["*"]

    groq_api_key: str | None = None
    groq_base_url: str = "https://api.groq.com/openai/v1"
    transcription_model: str = "whisper-large-v3"
    summary_model: str = "openai/gpt-oss-120b"
    summary_provider: Literal["groq", "bedrock"] = "groq"
    summary_system_prompt: str = DEFAULT_SUMMARY_PROMPT
    max_upload_bytes: int = 4 * 1024 * 1024
    llm_timeout_seconds: float = 120.0

    aws_region: str = "us-east-1"
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_endpoint_url: str | None = None
    s3_bucket_name: str = "meetmind-dev"
    bedrock_model_id: str = "anthropic.claude-3-haiku-20240307-v1:0"
    store_recordings: bool = True

    meetings_store_path: Path | None = None

    google_calendar_api_url: str = "https://www.googleapis.com/calendar/v3"
    google_calendar_id: str = "primary"
    post_meeting_webhook_url: str = ""
    http_timeout_seconds: float = 15.0

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors(cls, value: str | list[str]) -> list[str] | list[AnyHttpUrl]:
        if isinstance(value, str):
            items = [item.strip() for item in value.split(",") if item.strip()]
            default_value = cls.model_fields["cors_origins"].default  # type: ignore[index]
            return items or default_value
        return value

    class Config:
        env_file = str(Path(__file__).resolve().parents[1] / ".env")
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()
