from __future__ import annotations

import json
import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from backend.config import get_settings
from backend.errors import UpstreamServiceError
from backend.utils.auth_aws import aws_client

logger = logging.getLogger(__name__)


def _bedrock_client(client: Any | None = None):
    if client:
        return client
    return aws_client("bedrock-runtime")


def _load_json_body(response: dict[str, Any]) -> dict[str, Any]:
    body = response.get("body")
    if hasattr(body, "read"):
        raw = body.read()
    elif isinstance(body, (bytes, bytearray)):
        raw = body
    elif body is None:
        return {}
    else:
        raw = str(body).encode("utf-8")
    try:
        return json.loads(raw.decode("utf-8"))
    except json.JSONDecodeError:
        return {"outputText": raw.decode("utf-8")}


def _model_uses_messages(model_id: str) -> bool:
    return "claude-3" in (model_id or "").lower()


def _build_payload(model_id: str, system_prompt: str, user_message: str, max_tokens: int, temperature: float) -> dict[str, Any]:
    if _model_uses_messages(model_id):
        return {
            "anthropic_version": "bedrock-2023-05-31",
            "max_tokens": max_tokens,
            "temperature": temperature,
            "system": system_prompt,
            "messages": [
                {
                    "role": "user",
                    "content": [{"type": "text", "text": user_message}],
                }
            ],
        }
    # legacy text-completion models take a single prompt
    return {
        "prompt": f"\n\nHuman: {system_prompt}\n\n{user_message}\n\nAssistant:",
        "max_tokens_to_sample": max_tokens,
        "temperature": temperature,
    }


def _extract_text_from_content(content: dict[str, Any]) -> str:
    for key in ("outputText", "completion", "response"):
        value = content.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    message_content = content.get("content")
    if isinstance(message_content, list):
        pieces: list[str] = []
        for item in message_content:
            if not isinstance(item, dict):
                continue
            text = item.get("text")
            if isinstance(text, str) and text.strip():
                pieces.append(text.strip())
        if pieces:
            return "\n".join(pieces)
    return ""


def invoke_chat(
    system_prompt: str,
    user_message: str,
    max_tokens: int = 2048,
    temperature: float = 0.3,
    model_id: str | None = None,
    client: Any | None = None,
) -> str:
    model_id = model_id or get_settings().bedrock_model_id
    payload = _build_payload(model_id, system_prompt, user_message, max_tokens, temperature)
    try:
        response = _bedrock_client(client).invoke_model(
            modelId=model_id,
            contentType="application/json",
            accept="application/json",
            body=json.dumps(payload).encode("utf-8"),
        )
    except (BotoCoreError, ClientError) as exc:
        logger.exception("Bedrock invoke_model failed for %s", model_id)
        raise UpstreamServiceError(str(exc), details=repr(exc)) from exc
    content = _load_json_body(response)
    text = _extract_text_from_content(content)
    if not text:
        raise UpstreamServiceError(f"Bedrock model {model_id} returned no text", details=json.dumps(content))
    return text
