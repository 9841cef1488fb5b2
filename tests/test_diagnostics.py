import logging

import pytest

from clipscribe.diagnostics import Diagnostics, redact, redact_url


@pytest.mark.parametrize(
    "secret, expected",
    [
        ("sk-azure-1234567890", "sk-a...7890"),
        ("12345678", "****"),
        ("short", "****"),
        ("", ""),
        (None, ""),
    ],
)
def test_redact(secret, expected):
    assert redact(secret) == expected


def test_redact_url_masks_key_param():
    url = "https://generativelanguage.googleapis.com/v1beta/files/abc?key=AIzaSyABCDEFGH"

    shown = redact_url(url)

    assert "AIzaSyABCDEFGH" not in shown
    assert "key=AIza...EFGH" in shown
    assert shown.startswith("https://generativelanguage.googleapis.com/v1beta/files/abc?")


def test_redact_url_leaves_other_params():
    url = "https://res.openai.azure.com/openai/responses?api-version=2025-04-01-preview"
    assert redact_url(url) == url


def test_redact_url_without_query_is_unchanged():
    assert redact_url("http://localhost:1234/v1/chat/completions") == "http://localhost:1234/v1/chat/completions"


def test_enabled_diagnostics_logs_redacted_request(caplog):
    log = logging.getLogger("clipscribe.test.diagnostics")
    diagnostics = Diagnostics(enabled=True, log=log)

    with caplog.at_level(logging.DEBUG, logger=log.name):
        diagnostics.request("GET", "https://host/v1beta/files/x?key=AIzaSyABCDEFGH")
        diagnostics.response(200, '{"state": "ACTIVE"}')

    assert "AIzaSyABCDEFGH" not in caplog.text
    assert "AIza...EFGH" in caplog.text
    assert '{"state": "ACTIVE"}' in caplog.text


def test_disabled_diagnostics_is_silent(caplog):
    log = logging.getLogger("clipscribe.test.diagnostics")
    diagnostics = Diagnostics(enabled=False, log=log)

    with caplog.at_level(logging.DEBUG, logger=log.name):
        diagnostics.note("should not appear")
        diagnostics.settings("Azure OpenAI", {"endpoint": "https://x"})

    assert caplog.text == ""


def test_settings_redacts_listed_secrets(caplog):
    log = logging.getLogger("clipscribe.test.diagnostics")
    diagnostics = Diagnostics(enabled=True, log=log)

    with caplog.at_level(logging.DEBUG, logger=log.name):
        diagnostics.settings(
            "Azure OpenAI",
            {"endpoint": "https://res.openai.azure.com", "credential": "sk-azure-1234567890"},
            secrets=("credential",),
        )

    assert "https://res.openai.azure.com" in caplog.text
    assert "sk-azure-1234567890" not in caplog.text
    assert "sk-a...7890" in caplog.text
