"""TextClient — abstract base for the synchronous text backends."""
import asyncio
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from clipscribe.constants import MSG_NO_CONTENT
from clipscribe.diagnostics import Diagnostics
from clipscribe.errors import MissingContentError
from clipscribe.models import BackendConfig, ProviderKind


class TextClient(ABC):

    def __init__(self, config: BackendConfig, diagnostics: Optional[Diagnostics] = None) -> None:
        self._config = config
        self._diagnostics = diagnostics or Diagnostics.disabled()

    @property
    def config(self) -> BackendConfig:
        return self._config

    @property
    def kind(self) -> ProviderKind:
        return self._config.kind

    @property
    def model(self) -> str:
        return self._config.model

    @property
    def display_name(self) -> str:
        return self._config.kind.display_name

    @property
    @abstractmethod
    def request_url(self) -> str:
        """Endpoint the next request goes to, without credentials."""
        ...

    @abstractmethod
    async def ask_text(
        self,
        system_instruction: str,
        user_text: str,
        cancel: Optional[asyncio.Event] = None,
    ) -> str:
        """Send one request and return the generated text. Raises BackendError."""
        ...

    @abstractmethod
    async def aclose(self) -> None: ...

    async def __aenter__(self) -> "TextClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    def _extract(self, extractor: Callable[[dict[str, Any]], str], decoded: dict[str, Any], body: str) -> str:
        try:
            text = extractor(decoded)
        except MissingContentError as exc:
            raise MissingContentError(exc.message, url=self.request_url, body=body) from exc
        self._diagnostics.note("extracted content: %r", text)
        match text.strip():
            case "":
                raise MissingContentError(MSG_NO_CONTENT, url=self.request_url, body=body)
            case _:
                return text
