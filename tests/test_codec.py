import pytest

from clipscribe.errors import ApplicationError, MalformedResponseError, MissingContentError
from clipscribe.llm import codec


# ── fence cleaning ────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('{"start_time": "00:01:00", "end_time": "00:02:00"}', '{"start_time": "00:01:00", "end_time": "00:02:00"}'),
        ('```json\n{"start_time": "00:01:00"}\n```', '{"start_time": "00:01:00"}'),
        ('```\n{"start_time": "00:01:00"}\n```', '{"start_time": "00:01:00"}'),
        ('  {"start_time": "00:00:00"}  ', '{"start_time": "00:00:00"}'),
        ("", ""),
    ],
)
def test_clean_fenced_json(raw, expected):
    assert codec.clean_fenced_json(raw) == expected


def test_clean_fenced_json_is_idempotent():
    once = codec.clean_fenced_json('```json\n{"a": 1}\n```')
    assert codec.clean_fenced_json(once) == once


# ── requests ──────────────────────────────────────────────────────────────────


def test_chat_request_orders_system_then_user():
    body = codec.chat_request("llama3.2", "be terse", "first 3 minutes")

    assert body["model"] == "llama3.2"
    assert [m["role"] for m in body["messages"]] == ["system", "user"]
    assert body["messages"][1]["content"] == "first 3 minutes"
    assert body["max_tokens"] == 512
    assert body["temperature"] == 0.1


def test_responses_request_uses_input_items():
    body = codec.responses_request("gpt-4o", "sys", "usr")

    assert "messages" not in body
    assert body["input"] == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "usr"},
    ]
    assert body["max_output_tokens"] == 2048


def test_anthropic_request_moves_system_out_of_messages():
    body = codec.anthropic_request("claude-sonnet-4-20250514", "sys", "usr")

    assert body["system"] == "sys"
    assert body["messages"] == [{"role": "user", "content": "usr"}]
    assert body["max_tokens"] == 1024


def test_generate_request_has_file_part_then_prompt():
    body = codec.generate_request("https://files/abc", "video/mp4", "transcribe")

    parts = body["contents"][0]["parts"]
    assert parts[0] == {"fileData": {"mimeType": "video/mp4", "fileUri": "https://files/abc"}}
    assert parts[1] == {"text": "transcribe"}
    assert body["generationConfig"]["maxOutputTokens"] == 8192


# ── response extraction ───────────────────────────────────────────────────────


def test_extract_chat_text_first_choice():
    payload = {"choices": [{"message": {"content": "one"}}, {"message": {"content": "two"}}]}
    assert codec.extract_chat_text(payload) == "one"


def test_extract_chat_text_without_choices_raises():
    with pytest.raises(MissingContentError, match="No choices"):
        codec.extract_chat_text({"choices": []})


def test_extract_responses_text_skips_non_message_items():
    payload = {
        "output": [
            {"type": "reasoning", "content": [{"type": "output_text", "text": "thinking"}]},
            {"type": "message", "content": [{"type": "refusal"}, {"type": "output_text", "text": "answer"}]},
        ]
    }
    assert codec.extract_responses_text(payload) == "answer"


def test_extract_responses_text_accepts_plain_text_type():
    payload = {"output": [{"type": "message", "content": [{"type": "text", "text": "hi"}]}]}
    assert codec.extract_responses_text(payload) == "hi"


def test_extract_responses_text_missing_message_raises():
    with pytest.raises(MissingContentError):
        codec.extract_responses_text({"output": [{"type": "reasoning"}]})


def test_extract_anthropic_text_takes_last_text_block():
    payload = {"content": [{"type": "text", "text": "a"}, {"type": "tool_use"}, {"type": "text", "text": "b"}]}
    assert codec.extract_anthropic_text(payload) == "b"


def test_extract_generate_text():
    payload = {"candidates": [{"content": {"parts": [{"text": "[00:00] hello"}, {"text": "ignored"}]}}]}
    assert codec.extract_generate_text(payload) == "[00:00] hello"


@pytest.mark.parametrize(
    "payload",
    [{}, {"candidates": []}, {"candidates": [{"content": {"parts": []}}]}],
)
def test_extract_generate_text_missing_parts_raises(payload):
    with pytest.raises(MissingContentError):
        codec.extract_generate_text(payload)


# ── decoding & error objects ──────────────────────────────────────────────────


def test_decode_body_keeps_raw_text_on_failure():
    with pytest.raises(MalformedResponseError) as info:
        codec.decode_body("<html>bad gateway</html>", url="http://x", status=200)

    assert info.value.body == "<html>bad gateway</html>"
    assert info.value.url == "http://x"


def test_decode_body_rejects_non_object():
    with pytest.raises(MalformedResponseError):
        codec.decode_body("[1, 2]")


def test_error_object_becomes_application_error():
    payload = {"error": {"code": "content_filter", "message": "blocked"}}

    with pytest.raises(ApplicationError) as info:
        codec.raise_for_error_object(payload)

    assert info.value.code == "content_filter"
    assert "blocked" in str(info.value)


def test_null_error_is_ignored():
    codec.raise_for_error_object({"error": None, "choices": []})
