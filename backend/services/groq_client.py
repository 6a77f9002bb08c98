"""Speech-to-text and chat completion against Groq's OpenAI-compatible API."""
from __future__ import annotations

import logging
from typing import Any

from openai import OpenAI, OpenAIError

from backend.config import Settings, get_settings
from backend.errors import ConfigurationError, UpstreamServiceError

logger = logging.getLogger(__name__)


class GroqClient:
    def __init__(self, settings: Settings | None = None, client: Any | None = None):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self) -> Any:
        """Lazily build the SDK client so a missing key only fails the calls that need it."""
        if self._client is None:
            self.ensure_configured()
            self._client = OpenAI(
                api_key=self.settings.groq_api_key,
                base_url=self.settings.groq_base_url,
                timeout=self.settings.llm_timeout_seconds,
                max_retries=0,
            )
        return self._client

    def ensure_configured(self) -> None:
        if self._client is None and not self.settings.groq_api_key:
            logger.error("GROQ_API_KEY is missing in environment variables")
            raise ConfigurationError("Server Configuration Error: GROQ_API_KEY is missing.")

    def transcribe(self, filename: str, audio: bytes) -> str:
        logger.info("Transcribing %s (%d bytes) with %s", filename, len(audio), self.settings.transcription_model)
        try:
            transcription = self.client.audio.transcriptions.create(
                file=(filename, audio),
                model=self.settings.transcription_model,
                response_format="json",
            )
        except OpenAIError as exc:
            logger.exception("Transcription request failed")
            raise UpstreamServiceError(str(exc), details=repr(exc)) from exc
        return (transcription.text or "").strip()

    def chat(self, system_prompt: str, user_message: str) -> str:
        try:
            completion = self.client.chat.completions.create(
                model=self.settings.summary_model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_message},
                ],
            )
        except OpenAIError as exc:
            logger.exception("Chat completion request failed")
            raise UpstreamServiceError(str(exc), details=repr(exc)) from exc
        return completion.choices[0].message.content or ""
