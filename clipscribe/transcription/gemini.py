"""GeminiTranscriptionClient — upload, wait for processing, then generate.

The Files API is asynchronous: after a resumable upload the file sits in
PROCESSING for an unknown time. We poll its status on a fixed interval,
bounded by an overall budget and by the caller's cancel event, and only
then ask the model for a transcript.
"""
import asyncio
import json
import logging
import time
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Optional

import httpx

from clipscribe.config import Config
from clipscribe.constants import (
    DEFAULT_GEMINI_MODEL,
    ENV_GEMINI_API_KEY,
    FILE_STATE_ACTIVE,
    FILE_STATE_FAILED,
    GEMINI_BASE_URL,
    GEMINI_FILES_PATH,
    GEMINI_GENERATE_PATH,
    GEMINI_KEY_PARAM,
    GEMINI_TIMEOUT,
    GEMINI_UPLOAD_PATH,
    HDR_UPLOAD_COMMAND,
    HDR_UPLOAD_CONTENT_LENGTH,
    HDR_UPLOAD_CONTENT_TYPE,
    HDR_UPLOAD_OFFSET,
    HDR_UPLOAD_PROTOCOL,
    HDR_UPLOAD_URL,
    MSG_CANCELLED,
    MSG_FILE_FAILED,
    MSG_GEMINI_HELP,
    MSG_GENERATING,
    MSG_MISSING_VAR,
    MSG_NO_FILE_URI,
    MSG_NO_TRANSCRIPT,
    MSG_NO_UPLOAD_URL,
    MSG_POLL_TIMEOUT,
    MSG_PROCESSING,
    MSG_UPLOADING,
    POLL_INTERVAL,
    POLL_TIMEOUT,
    TRANSCRIBE_PROMPT,
    UPLOAD_COMMAND_FINALIZE,
    UPLOAD_COMMAND_START,
    UPLOAD_PROTOCOL_RESUMABLE,
)
from clipscribe.diagnostics import Diagnostics, redact_url
from clipscribe.errors import (
    ConfigurationError,
    FileProcessingFailed,
    MalformedResponseError,
    MissingContentError,
    OperationCancelled,
    PollTimeout,
    StatusError,
    TransportError,
)
from clipscribe.llm import codec
from clipscribe.models import BackendConfig, FileState, ProviderKind, RemoteFileHandle, TranscriptResult
from clipscribe.transcription.client import OnProgress, TranscriptionClient
from clipscribe.transcription.media import guess_video_mime
from clipscribe.waiting import Wake, cancellable, next_wake

logger = logging.getLogger(__name__)


class GeminiTranscriptionClient(TranscriptionClient):

    def __init__(
        self,
        config: BackendConfig,
        diagnostics: Optional[Diagnostics] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        poll_interval: float = POLL_INTERVAL,
        poll_timeout: float = POLL_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._diagnostics = diagnostics or Diagnostics.disabled()
        self._http = http_client or httpx.AsyncClient(timeout=config.timeout)
        self._poll_interval = poll_interval
        self._poll_timeout = poll_timeout
        self._clock = clock

    @classmethod
    def from_config(
        cls,
        config: Config,
        diagnostics: Optional[Diagnostics] = None,
        **kwargs: Any,
    ) -> "GeminiTranscriptionClient":
        match config.gemini_api_key:
            case None | "":
                raise ConfigurationError(MSG_MISSING_VAR % ENV_GEMINI_API_KEY, MSG_GEMINI_HELP)
            case key:
                backend = BackendConfig(
                    kind=ProviderKind.GEMINI,
                    endpoint=GEMINI_BASE_URL,
                    credential=key,
                    model=config.gemini_model or DEFAULT_GEMINI_MODEL,
                    timeout=GEMINI_TIMEOUT,
                )
        diagnostics = diagnostics or Diagnostics.disabled()
        diagnostics.settings("Gemini", {"model": backend.model, "api_key": key}, secrets=("api_key",))
        return cls(backend, diagnostics, **kwargs)

    @property
    def model(self) -> str:
        return self._config.model

    # ── TranscriptionClient interface ─────────────────────────────────────────

    async def transcribe(
        self,
        video_path: Path | str,
        on_progress: Optional[OnProgress] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> TranscriptResult:
        path = Path(video_path)

        self._report(on_progress, MSG_UPLOADING)
        handle = await self.upload(path, cancel)
        logger.info("Uploaded %s as %s (%s)", path.name, handle.name or handle.uri, handle.mime_type)

        self._report(on_progress, MSG_PROCESSING)
        handle = await self.wait_until_ready(handle, cancel)

        self._report(on_progress, MSG_GENERATING)
        return await self.generate(handle, cancel)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "GeminiTranscriptionClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    # ── phases ────────────────────────────────────────────────────────────────

    async def upload(self, path: Path, cancel: Optional[asyncio.Event] = None) -> RemoteFileHandle:
        """Two-step resumable upload: announce the file, then send its bytes."""
        mime_type = guess_video_mime(path)
        size = path.stat().st_size
        init_url = self._config.endpoint + GEMINI_UPLOAD_PATH

        init = await self._send(
            "POST",
            init_url,
            what="Upload init",
            cancel=cancel,
            params=self._key(),
            json={"file": {"display_name": path.name}},
            headers={
                HDR_UPLOAD_PROTOCOL: UPLOAD_PROTOCOL_RESUMABLE,
                HDR_UPLOAD_COMMAND: UPLOAD_COMMAND_START,
                HDR_UPLOAD_CONTENT_LENGTH: str(size),
                HDR_UPLOAD_CONTENT_TYPE: mime_type,
            },
        )
        self._raise_for_status(init, "Upload init")

        target = init.headers.get(HDR_UPLOAD_URL)
        if not target:
            raise MissingContentError(MSG_NO_UPLOAD_URL, url=redact_url(str(init.url)), body=init.text)
        self._diagnostics.note("resumable upload URL: %s", redact_url(target))

        content = await asyncio.to_thread(path.read_bytes)
        uploaded = await self._send(
            "POST",
            target,
            what="Upload",
            cancel=cancel,
            content=content,
            headers={
                "Content-Type": mime_type,
                "Content-Length": str(len(content)),
                HDR_UPLOAD_COMMAND: UPLOAD_COMMAND_FINALIZE,
                HDR_UPLOAD_OFFSET: "0",
            },
        )
        self._raise_for_status(uploaded, "Upload")
        payload = self._decode(uploaded)

        file = payload.get("file") or {}
        match file.get("uri"):
            case str() as uri if uri:
                return RemoteFileHandle(
                    uri=uri,
                    mime_type=mime_type,
                    state=FileState.PROCESSING,
                    name=file.get("name") or "",
                )
            case _:
                raise MissingContentError(MSG_NO_FILE_URI, url=redact_url(target), body=uploaded.text)

    async def wait_until_ready(
        self,
        handle: RemoteFileHandle,
        cancel: Optional[asyncio.Event] = None,
    ) -> RemoteFileHandle:
        """Poll the file's status until ACTIVE, FAILED, timeout or cancel."""
        url = f"{self._config.endpoint}{GEMINI_FILES_PATH}/{handle.file_id}"
        deadline = self._clock() + self._poll_timeout
        polls = 0

        while True:
            match await next_wake(self._poll_interval, deadline - self._clock(), cancel):
                case Wake.CANCELLED:
                    raise OperationCancelled(MSG_CANCELLED % "File processing", url=url)
                case Wake.TIMEOUT:
                    raise PollTimeout(MSG_POLL_TIMEOUT, url=url)
                case Wake.TICK:
                    polls += 1

            match await self._poll_state(url, cancel):
                case state if state == FILE_STATE_ACTIVE:
                    logger.info("File %s ready after %d polls", handle.file_id, polls)
                    return replace(handle, state=FileState.READY)
                case state if state == FILE_STATE_FAILED:
                    raise FileProcessingFailed(MSG_FILE_FAILED, url=url)
                case state:
                    self._diagnostics.note("file %s state %s (poll %d)", handle.file_id, state, polls)

    async def generate(
        self,
        handle: RemoteFileHandle,
        cancel: Optional[asyncio.Event] = None,
    ) -> TranscriptResult:
        if handle.state is not FileState.READY:
            raise ValueError(f"file {handle.file_id} is {handle.state.value}, not ready")

        url = self._config.endpoint + GEMINI_GENERATE_PATH % self._config.model
        response = await self._send(
            "POST",
            url,
            what="Transcript request",
            cancel=cancel,
            params=self._key(),
            json=codec.generate_request(handle.uri, handle.mime_type, TRANSCRIBE_PROMPT),
        )
        self._raise_for_status(response, "Transcript request")
        payload = self._decode(response)

        try:
            text = codec.extract_generate_text(payload)
        except MissingContentError as exc:
            raise MissingContentError(exc.message, url=url, body=response.text) from exc
        if not text.strip():
            raise MissingContentError(MSG_NO_TRANSCRIPT, url=url, body=response.text)
        return TranscriptResult(text=text)

    # ── helpers ───────────────────────────────────────────────────────────────

    def _key(self) -> dict[str, str]:
        return {GEMINI_KEY_PARAM: self._config.credential or ""}

    @staticmethod
    def _report(on_progress: Optional[OnProgress], label: str) -> None:
        logger.info(label)
        if on_progress is not None:
            on_progress(label)

    async def _send(
        self,
        method: str,
        url: str,
        *,
        what: str,
        cancel: Optional[asyncio.Event],
        **kwargs: Any,
    ) -> httpx.Response:
        shown = redact_url(str(httpx.URL(url, params=kwargs.get("params"))))
        body = kwargs.get("json")
        self._diagnostics.request(method, shown, json.dumps(body) if body is not None else None)
        try:
            response = await cancellable(self._http.request(method, url, **kwargs), cancel, what)
        except httpx.HTTPError as exc:
            raise TransportError(f"{what} failed: {exc}", url=shown) from exc
        self._diagnostics.response(response.status_code, response.text)
        return response

    @staticmethod
    def _raise_for_status(response: httpx.Response, what: str) -> None:
        if response.is_success:
            return
        raise StatusError(
            f"{what} failed: {response.status_code} {response.reason_phrase}".strip(),
            url=redact_url(str(response.request.url)),
            status=response.status_code,
            body=response.text,
        )

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        url = redact_url(str(response.request.url))
        payload = codec.decode_body(response.text, url=url, status=response.status_code)
        codec.raise_for_error_object(payload, url=url, body=response.text)
        return payload

    async def _poll_state(self, url: str, cancel: Optional[asyncio.Event]) -> Optional[str]:
        """One status check. Transient failures yield None so the loop keeps going."""
        try:
            response = await self._send("GET", url, what="Status check", cancel=cancel, params=self._key())
        except TransportError as exc:
            logger.warning("Status check failed, will retry: %s", exc.message)
            return None
        try:
            payload = codec.decode_body(response.text, url=url, status=response.status_code)
        except MalformedResponseError:
            logger.warning("Status check returned an unreadable body (%s), will retry", response.status_code)
            return None
        codec.raise_for_error_object(payload, url=url, body=response.text)
        return payload.get("state")
