from __future__ import annotations

import logging

from backend.config import Settings, get_settings
from backend.services.groq_client import GroqClient
from backend.services.summarizer import Summarizer

TASKS = ("transcribe", "summarize")


class ProcessingController:
    """Single-call forwarders: one upload to speech-to-text, or one text to the LLM."""

    def __init__(
        self,
        settings: Settings | None = None,
        groq: GroqClient | None = None,
        summarizer: Summarizer | None = None,
    ):
        self.settings = settings or get_settings()
        self.groq = groq or GroqClient(self.settings)
        self.summarizer = summarizer or Summarizer(self.settings, groq=self.groq)
        self.logger = logging.getLogger(__name__)

    def ensure_configured(self, task: str | None) -> None:
        # bedrock summaries need no Groq key
        if task == "summarize":
            self.summarizer.ensure_configured()
        else:
            self.groq.ensure_configured()

    def transcribe(self, filename: str, audio: bytes) -> dict:
        if not audio:
            raise ValueError("No file uploaded")
        self.logger.info("File received: %s (%d bytes)", filename, len(audio))
        text = self.groq.transcribe(filename, audio)
        self.logger.info("Transcription complete for %s", filename)
        return {"text": text}

    def summarize(self, text: str | None) -> dict:
        if not text or not text.strip():
            raise ValueError("No text provided for summarization")
        summary = self.summarizer.summarize(text)
        self.logger.info("Summary complete (%d chars)", len(summary))
        return {"summary": summary}
