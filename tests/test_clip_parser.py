"""TDD: ClipParser tests written FIRST"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from clipscribe.clip_parser import (
    ClipParser,
    build_system_prompt,
    check_range,
    decode_clip,
    format_duration,
    parse_timestamp,
)
from clipscribe.errors import ClipRequestRejected, MalformedResponseError, StatusError
from clipscribe.models import ClipTimeRange


def _client(reply: str) -> MagicMock:
    client = MagicMock()
    client.display_name = "Local LLM"
    client.ask_text = AsyncMock(return_value=reply)
    return client


# ── pure helpers ──────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (0, "00:00:00"),
        (59.9, "00:00:59"),
        (600, "00:10:00"),
        (3600, "01:00:00"),
        (36303, "10:05:03"),
        (90000, "25:00:00"),
    ],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


@pytest.mark.parametrize("value, expected", [("00:03:00", 180), ("01:00:01", 3601), ("100:00:00", 360000)])
def test_parse_timestamp(value, expected):
    assert parse_timestamp(value) == expected


@pytest.mark.parametrize("value", ["3:00", "00:60:00", "00:00:75", "abc", ""])
def test_parse_timestamp_rejects(value):
    with pytest.raises(ValueError):
        parse_timestamp(value)


def test_system_prompt_embeds_duration():
    prompt = build_system_prompt(600)

    assert "The video duration is: 00:10:00" in prompt
    assert '{"start_time": "HH:MM:SS", "end_time": "HH:MM:SS"}' in prompt


def test_decode_clip_strips_fences():
    clip = decode_clip('```json\n{"start_time": "00:00:00", "end_time": "00:03:00"}\n```')
    assert clip == ClipTimeRange(start_time="00:00:00", end_time="00:03:00")


def test_decode_clip_keeps_raw_text_on_failure():
    with pytest.raises(MalformedResponseError) as info:
        decode_clip("Sure! The clip is 0:00 to 3:00.")

    assert info.value.body == "Sure! The clip is 0:00 to 3:00."


def test_decode_clip_rejects_non_object():
    with pytest.raises(MalformedResponseError):
        decode_clip('["00:00:00", "00:03:00"]')


@pytest.mark.parametrize(
    "reply",
    [
        "{}",
        '{"start": "00:00:00", "end": "00:03:00"}',
        '{"start_time": "", "end_time": ""}',
        '{"start_time": "00:00:00"}',
        '{"start_time": 0, "end_time": 180}',
        '{"start_time": "  ", "end_time": "00:03:00", "error": ""}',
    ],
)
async def test_parse_reply_without_timestamps_is_malformed(reply):
    parser = ClipParser(_client(reply))

    with pytest.raises(MalformedResponseError, match="not a clip object") as info:
        await parser.parse("first 3 minutes", 600)

    assert info.value.body == reply


def test_error_clears_timestamps():
    clip = ClipTimeRange(start_time="00:00:00", end_time="00:01:00", error="unclear")

    assert clip.failed
    assert clip.start_time == ""
    assert clip.end_time == ""


def test_check_range_accepts_valid_clip():
    check_range(ClipTimeRange(start_time="00:07:00", end_time="00:10:00"), 600)


@pytest.mark.parametrize(
    "start, end, match",
    [
        ("00:05:00", "00:05:00", "not after"),
        ("00:05:00", "00:04:00", "not after"),
        ("00:00:00", "00:10:01", "exceeds"),
        ("0:00", "00:01:00", "Invalid timestamp"),
    ],
)
def test_check_range_rejects(start, end, match):
    with pytest.raises(ClipRequestRejected, match=match):
        check_range(ClipTimeRange(start_time=start, end_time=end), 600)


# ── parser ────────────────────────────────────────────────────────────────────


async def test_parse_first_three_minutes():
    client = _client('{"start_time": "00:00:00", "end_time": "00:03:00"}')
    parser = ClipParser(client)

    clip = await parser.parse("first 3 minutes", 600)

    assert clip == ClipTimeRange(start_time="00:00:00", end_time="00:03:00")
    system_prompt, user_text, cancel = client.ask_text.call_args.args
    assert "00:10:00" in system_prompt
    assert user_text == "first 3 minutes"
    assert cancel is None


async def test_parse_reports_progress_in_order():
    labels: list[str] = []
    parser = ClipParser(_client('{"start_time": "00:00:00", "end_time": "00:03:00"}'))

    await parser.parse("first 3 minutes", 600, on_progress=labels.append)

    assert labels == [
        "Connecting to AI",
        "Sending request to Local LLM",
        "Parsing response",
        "Parsing complete",
    ]


async def test_parse_fenced_reply():
    parser = ClipParser(_client('```json\n{"start_time": "00:07:00", "end_time": "00:10:00"}\n```'))

    clip = await parser.parse("last 3 minutes", 600)

    assert clip.start_time == "00:07:00"
    assert clip.end_time == "00:10:00"


@pytest.mark.parametrize(
    "reply",
    [
        '{"start_time": "", "end_time": "", "error": "no duration given"}',
        '{"start_time": "00:00:00", "end_time": "00:03:00", "error": "no duration given"}',
    ],
)
async def test_parse_model_error_is_rejection(reply):
    parser = ClipParser(_client(reply))

    with pytest.raises(ClipRequestRejected, match="AI could not parse request: no duration given") as info:
        await parser.parse("the good part", 600)

    assert info.value.body == reply


async def test_parse_malformed_reply_includes_text():
    parser = ClipParser(_client("I think you want 00:00:00 to 00:03:00"))

    with pytest.raises(MalformedResponseError) as info:
        await parser.parse("first 3 minutes", 600)

    assert "I think you want" in str(info.value)


async def test_parse_trusts_model_by_default():
    parser = ClipParser(_client('{"start_time": "00:00:00", "end_time": "00:20:00"}'))

    clip = await parser.parse("first 20 minutes", 600)

    assert clip.end_time == "00:20:00"


async def test_parse_strict_rejects_out_of_range():
    parser = ClipParser(_client('{"start_time": "00:00:00", "end_time": "00:20:00"}'), strict=True)

    with pytest.raises(ClipRequestRejected, match="exceeds"):
        await parser.parse("first 20 minutes", 600)


async def test_parse_propagates_backend_errors():
    client = _client("")
    client.ask_text.side_effect = StatusError("AI request failed: 500", status=500)

    with pytest.raises(StatusError):
        await ClipParser(client).parse("first 3 minutes", 600)
