"""Wire codec — request shapes and text extraction for every backend.

Each backend wraps the generated text in a differently shaped envelope.
The ``extract_*`` functions take the decoded JSON body and return the text,
raising ``MissingContentError`` when nothing usable is there.
"""
import json
from typing import Any, Optional

from clipscribe.constants import (
    ANTHROPIC_MAX_TOKENS,
    CHAT_MAX_TOKENS,
    CHAT_TEMPERATURE,
    MSG_NO_CHOICES,
    MSG_NO_CONTENT,
    MSG_NO_TRANSCRIPT,
    MSG_NOT_JSON,
    RESPONSES_MAX_OUTPUT_TOKENS,
    TRANSCRIBE_MAX_OUTPUT_TOKENS,
    TRANSCRIBE_TEMPERATURE,
)
from clipscribe.errors import ApplicationError, MalformedResponseError, MissingContentError

_TEXT_TYPES = ("output_text", "text")


def _messages(system_instruction: str, user_text: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": system_instruction},
        {"role": "user", "content": user_text},
    ]


# ── requests ──────────────────────────────────────────────────────────────────


def chat_request(model: str, system_instruction: str, user_text: str) -> dict[str, Any]:
    return {
        "model": model,
        "messages": _messages(system_instruction, user_text),
        "max_tokens": CHAT_MAX_TOKENS,
        "temperature": CHAT_TEMPERATURE,
    }


def responses_request(model: str, system_instruction: str, user_text: str) -> dict[str, Any]:
    return {
        "model": model,
        "input": _messages(system_instruction, user_text),
        "max_output_tokens": RESPONSES_MAX_OUTPUT_TOKENS,
    }


def anthropic_request(model: str, system_instruction: str, user_text: str) -> dict[str, Any]:
    return {
        "model": model,
        "max_tokens": ANTHROPIC_MAX_TOKENS,
        "system": system_instruction,
        "messages": [{"role": "user", "content": user_text}],
    }


def generate_request(file_uri: str, mime_type: str, prompt: str) -> dict[str, Any]:
    return {
        "contents": [
            {
                "parts": [
                    {"fileData": {"mimeType": mime_type, "fileUri": file_uri}},
                    {"text": prompt},
                ]
            }
        ],
        "generationConfig": {
            "temperature": TRANSCRIBE_TEMPERATURE,
            "maxOutputTokens": TRANSCRIBE_MAX_OUTPUT_TOKENS,
        },
    }


# ── responses ─────────────────────────────────────────────────────────────────


def decode_body(body: str, url: Optional[str] = None, status: Optional[int] = None) -> dict[str, Any]:
    """Parse a response body into a JSON object, keeping the raw text on failure."""
    try:
        decoded = json.loads(body)
    except ValueError as exc:
        raise MalformedResponseError(MSG_NOT_JSON % exc, url=url, status=status, body=body) from exc
    match decoded:
        case dict():
            return decoded
        case _:
            raise MalformedResponseError(
                MSG_NOT_JSON % "expected a JSON object", url=url, status=status, body=body
            )


def raise_for_error_object(payload: dict[str, Any], url: Optional[str] = None, body: Optional[str] = None) -> None:
    """Raise ``ApplicationError`` when the backend reported an error object."""
    error = payload.get("error")
    if not error:
        return
    match error:
        case {"message": message, **rest}:
            code = str(rest.get("code") or rest.get("status") or rest.get("type") or "")
            raise ApplicationError(
                f"API error: {code} - {message}" if code else f"API error: {message}",
                code=code,
                url=url,
                body=body,
            )
        case other:
            raise ApplicationError(f"API error: {other}", url=url, body=body)


def extract_chat_text(payload: dict[str, Any]) -> str:
    match payload.get("choices"):
        case [{"message": {"content": str() as content}}, *_]:
            return content
        case [_, *_]:
            raise MissingContentError(MSG_NO_CONTENT)
        case _:
            raise MissingContentError(MSG_NO_CHOICES)


def extract_responses_text(payload: dict[str, Any]) -> str:
    for item in payload.get("output") or []:
        if item.get("type") != "message":
            continue
        for entry in item.get("content") or []:
            if entry.get("type") in _TEXT_TYPES:
                return entry.get("text") or ""
    raise MissingContentError(MSG_NO_CONTENT)


def extract_anthropic_text(payload: dict[str, Any]) -> str:
    texts = [
        block.get("text") or ""
        for block in payload.get("content") or []
        if block.get("type") == "text"
    ]
    match texts:
        case []:
            raise MissingContentError(MSG_NO_CONTENT)
        case [*_, last]:
            return last


def extract_generate_text(payload: dict[str, Any]) -> str:
    match payload.get("candidates"):
        case [{"content": {"parts": [first, *_]}}, *_]:
            return first.get("text") or ""
        case _:
            raise MissingContentError(MSG_NO_TRANSCRIPT)


def clean_fenced_json(text: str) -> str:
    """Strip optional markdown code fences (```json / ```) around model output."""
    s = text.strip()
    s = s.removeprefix("```json")
    s = s.removeprefix("```")
    s = s.removesuffix("```")
    return s.strip()
