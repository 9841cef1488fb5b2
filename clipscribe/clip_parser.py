"""ClipParser — natural-language clip requests into start/end timestamps."""
import asyncio
import json
import logging
import re
from typing import Callable, Optional

from clipscribe.constants import (
    CLIP_SYSTEM_PROMPT,
    MSG_BAD_CLIP_JSON,
    MSG_BAD_CLIP_SHAPE,
    MSG_CLIP_BAD_TIMESTAMP,
    MSG_CLIP_ORDER,
    MSG_CLIP_PAST_END,
    MSG_CLIP_REJECTED,
    MSG_CONNECTING,
    MSG_PARSED,
    MSG_PARSING,
    MSG_SENDING,
)
from clipscribe.errors import ClipRequestRejected, MalformedResponseError
from clipscribe.llm.client import TextClient
from clipscribe.llm.codec import clean_fenced_json
from clipscribe.models import ClipTimeRange

logger = logging.getLogger(__name__)

_TIMESTAMP = re.compile(r"^(\d{2,}):([0-5]\d):([0-5]\d)$")


# ── pure helpers (module-level so tests can import them directly) ──────────────


def format_duration(seconds: float) -> str:
    """HH:MM:SS by floor division; hours are not capped at 24."""
    total = int(max(seconds, 0))
    return f"{total // 3600:02d}:{total // 60 % 60:02d}:{total % 60:02d}"


def parse_timestamp(value: str) -> int:
    """HH:MM:SS to whole seconds. Raises ValueError on anything else."""
    match _TIMESTAMP.match(value.strip()):
        case None:
            raise ValueError(MSG_CLIP_BAD_TIMESTAMP % value)
        case m:
            hours, minutes, seconds = map(int, m.groups())
            return hours * 3600 + minutes * 60 + seconds


def build_system_prompt(duration_seconds: float) -> str:
    return CLIP_SYSTEM_PROMPT % format_duration(duration_seconds)


def decode_clip(text: str) -> ClipTimeRange:
    """Model text (possibly fenced) to a ClipTimeRange; raw text kept on failure."""
    content = clean_fenced_json(text)
    try:
        payload = json.loads(content)
    except ValueError as exc:
        raise MalformedResponseError(MSG_BAD_CLIP_JSON % exc, body=text) from exc
    match payload:
        case {"error": str() as error} if error.strip():
            return ClipTimeRange.from_payload(payload)
        case {"start_time": str() as start, "end_time": str() as end} if start.strip() and end.strip():
            return ClipTimeRange.from_payload(payload)
        case _:
            raise MalformedResponseError(MSG_BAD_CLIP_SHAPE, body=text)


def check_range(clip: ClipTimeRange, duration_seconds: float) -> None:
    """Sanity-check a clip against the video; raises ClipRequestRejected."""
    try:
        start = parse_timestamp(clip.start_time)
        end = parse_timestamp(clip.end_time)
    except ValueError as exc:
        raise ClipRequestRejected(str(exc)) from exc
    if end <= start:
        raise ClipRequestRejected(MSG_CLIP_ORDER % (clip.end_time, clip.start_time))
    if end > int(duration_seconds):
        raise ClipRequestRejected(MSG_CLIP_PAST_END % (clip.end_time, format_duration(duration_seconds)))


# ── parser ────────────────────────────────────────────────────────────────────


class ClipParser:
    """Asks the selected backend to turn a clip request into timestamps.

    By default the model's timestamps are returned as-is: the prompt states
    the rules and the answer is trusted. ``strict=True`` re-checks the
    result against the video duration.
    """

    def __init__(self, client: TextClient, strict: bool = False) -> None:
        self._client = client
        self._strict = strict

    async def parse(
        self,
        user_text: str,
        duration_seconds: float,
        on_progress: Optional[Callable[[str], None]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> ClipTimeRange:
        report = on_progress or (lambda _label: None)

        report(MSG_CONNECTING)
        system_prompt = build_system_prompt(duration_seconds)

        report(MSG_SENDING % self._client.display_name)
        logger.info("Parsing clip request with %s: %r", self._client.display_name, user_text)
        raw = await self._client.ask_text(system_prompt, user_text, cancel)

        report(MSG_PARSING)
        clip = decode_clip(raw)
        if clip.failed:
            raise ClipRequestRejected(MSG_CLIP_REJECTED % clip.error, body=raw)
        if self._strict:
            check_range(clip, duration_seconds)

        report(MSG_PARSED)
        logger.info("Clip %s → %s", clip.start_time, clip.end_time)
        return clip
