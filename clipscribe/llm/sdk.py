"""Shared exchange logic for the SDK-backed text clients.

The openai and anthropic SDKs own the transport, auth headers and URL
building. We ask them for the raw response so that decoding, error objects
and empty content are classified the same way for every backend.
"""
import asyncio
import json
from typing import Any, Awaitable, Callable, Optional

import anthropic
import openai

from clipscribe.constants import MSG_REQUEST_FAILED
from clipscribe.diagnostics import Diagnostics
from clipscribe.errors import StatusError, TransportError
from clipscribe.llm.codec import decode_body, raise_for_error_object
from clipscribe.waiting import cancellable

_STATUS_ERRORS = (openai.APIStatusError, anthropic.APIStatusError)
_CONNECTION_ERRORS = (openai.APIConnectionError, anthropic.APIConnectionError)

RawCall = Callable[..., Awaitable[Any]]


async def exchange(
    call: RawCall,
    payload: dict[str, Any],
    *,
    url: str,
    diagnostics: Diagnostics,
    cancel: Optional[asyncio.Event] = None,
    unreachable: str = MSG_REQUEST_FAILED,
) -> tuple[dict[str, Any], str]:
    """Run one ``with_raw_response`` SDK call; return (decoded body, raw body)."""
    diagnostics.request("POST", url, json.dumps(payload))
    try:
        raw = await cancellable(call(**payload), cancel, "AI request")
    except _STATUS_ERRORS as exc:
        response = exc.response
        status = f"{response.status_code} {response.reason_phrase}".strip()
        diagnostics.response(response.status_code, response.text)
        raise StatusError(
            MSG_REQUEST_FAILED % status,
            url=url,
            status=response.status_code,
            body=response.text,
        ) from exc
    except _CONNECTION_ERRORS as exc:
        raise TransportError(unreachable % exc, url=url) from exc

    response = raw.http_response
    body = response.text
    diagnostics.response(response.status_code, body)
    decoded = decode_body(body, url=url, status=response.status_code)
    raise_for_error_object(decoded, url=url, body=body)
    return decoded, body
