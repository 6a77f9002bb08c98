from __future__ import annotations

import re
from typing import Any

from backend.config import Settings, get_settings
from backend.services import bedrock_utils
from backend.services.groq_client import GroqClient

_FENCE_RE = re.compile(r"```(?:html)?")


def clean_summary(text: str | None) -> str:
    """Strip the markdown code fences models like to wrap HTML in."""
    if not text:
        return ""
    return _FENCE_RE.sub("", text).strip()


class Summarizer:
    """Sends a transcript to the configured LLM provider with the fixed secretary prompt."""

    def __init__(
        self,
        settings: Settings | None = None,
        groq: GroqClient | None = None,
        bedrock_client: Any | None = None,
    ):
        self.settings = settings or get_settings()
        self.groq = groq or GroqClient(self.settings)
        self.bedrock_client = bedrock_client

    def ensure_configured(self) -> None:
        if self.settings.summary_provider == "groq":
            self.groq.ensure_configured()

    def summarize(self, transcript: str) -> str:
        prompt = self.settings.summary_system_prompt
        if self.settings.summary_provider == "bedrock":
            return bedrock_utils.invoke_chat(
                prompt, transcript, model_id=self.settings.bedrock_model_id, client=self.bedrock_client
            )
        return self.groq.chat(prompt, transcript)
