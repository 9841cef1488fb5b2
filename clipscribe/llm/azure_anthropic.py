"""AzureAnthropicClient — Claude served from an Azure AI endpoint."""
import asyncio
from typing import Optional

import httpx
from anthropic import AsyncAnthropic

from clipscribe.diagnostics import Diagnostics
from clipscribe.llm import codec
from clipscribe.llm.client import TextClient
from clipscribe.llm.sdk import exchange
from clipscribe.models import BackendConfig


class AzureAnthropicClient(TextClient):

    def __init__(
        self,
        config: BackendConfig,
        diagnostics: Optional[Diagnostics] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__(config, diagnostics)
        self._client = AsyncAnthropic(
            api_key=config.credential,
            base_url=config.endpoint,
            timeout=config.timeout,
            max_retries=0,
            http_client=http_client,
        )

    @property
    def request_url(self) -> str:
        return f"{self._config.endpoint}/v1/messages"

    async def ask_text(
        self,
        system_instruction: str,
        user_text: str,
        cancel: Optional[asyncio.Event] = None,
    ) -> str:
        payload = codec.anthropic_request(self.model, system_instruction, user_text)
        decoded, body = await exchange(
            self._client.messages.with_raw_response.create,
            payload,
            url=self.request_url,
            diagnostics=self._diagnostics,
            cancel=cancel,
        )
        return self._extract(codec.extract_anthropic_text, decoded, body)

    async def aclose(self) -> None:
        await self._client.close()
