"""Diagnostics — the debug-output collaborator injected into every client.

Request code never looks at the environment to decide whether to dump
traffic; it calls a ``Diagnostics`` instance, which is a no-op unless the
debug flag was set when it was built. Credentials are redacted on the way out.
"""
import logging
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from clipscribe.constants import (
    GEMINI_KEY_PARAM,
    REDACT_VISIBLE_CHARS,
    REDACTED,
)

logger = logging.getLogger(__name__)

_SECRET_PARAMS = frozenset({GEMINI_KEY_PARAM, "api_key", "api-key"})


def redact(secret: Optional[str]) -> str:
    """Keep only a short prefix and suffix of a credential."""
    match secret:
        case None | "":
            return ""
        case s if len(s) <= REDACT_VISIBLE_CHARS * 2:
            return REDACTED
        case s:
            return f"{s[:REDACT_VISIBLE_CHARS]}...{s[-REDACT_VISIBLE_CHARS:]}"


def redact_url(url: str) -> str:
    """Mask credential-bearing query parameters in a URL."""
    parts = urlsplit(url)
    match parts.query:
        case "":
            return url
        case query:
            pairs = [
                (k, redact(v) if k in _SECRET_PARAMS else v)
                for k, v in parse_qsl(query, keep_blank_values=True)
            ]
            return urlunsplit(parts._replace(query=urlencode(pairs, safe=".*")))


class Diagnostics:

    def __init__(self, enabled: bool = False, log: Optional[logging.Logger] = None) -> None:
        self.enabled = enabled
        self._log = log or logger

    @classmethod
    def disabled(cls) -> "Diagnostics":
        return cls(enabled=False)

    def note(self, msg: str, *args) -> None:
        if self.enabled:
            self._log.debug(msg, *args)

    def request(self, method: str, url: str, body: Optional[str] = None) -> None:
        self.note("→ %s %s", method, redact_url(url))
        if body is not None:
            self.note("  request body: %s", body)

    def response(self, status: int, body: str) -> None:
        self.note("← %s", status)
        self.note("  response body: %s", body)

    def settings(self, title: str, values: dict[str, Optional[str]], secrets: tuple[str, ...] = ()) -> None:
        """Dump a configuration block; keys listed in ``secrets`` are redacted."""
        self.note("%s configuration:", title)
        for key, value in values.items():
            self.note("  %-28s %s", key + ":", redact(value) if key in secrets else value)
