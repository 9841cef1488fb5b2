"""LocalChatClient — OpenAI-compatible chat completions (LM Studio, Ollama)."""
import asyncio
from typing import Optional

import httpx
from openai import AsyncOpenAI, Omit

from clipscribe.constants import LOCAL_API_KEY_PLACEHOLDER, LOCAL_API_PATH, MSG_LOCAL_UNREACHABLE
from clipscribe.diagnostics import Diagnostics
from clipscribe.llm import codec
from clipscribe.llm.client import TextClient
from clipscribe.llm.sdk import exchange
from clipscribe.models import BackendConfig


class LocalChatClient(TextClient):

    def __init__(
        self,
        config: BackendConfig,
        diagnostics: Optional[Diagnostics] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__(config, diagnostics)
        # self-hosted servers take no credential; drop the SDK's bearer header
        self._client = AsyncOpenAI(
            api_key=LOCAL_API_KEY_PLACEHOLDER,
            base_url=config.endpoint + LOCAL_API_PATH,
            timeout=config.timeout,
            max_retries=0,
            default_headers={"Authorization": Omit()},
            http_client=http_client,
        )

    @property
    def request_url(self) -> str:
        return f"{self._config.endpoint}{LOCAL_API_PATH}/chat/completions"

    async def ask_text(
        self,
        system_instruction: str,
        user_text: str,
        cancel: Optional[asyncio.Event] = None,
    ) -> str:
        payload = codec.chat_request(self.model, system_instruction, user_text)
        decoded, body = await exchange(
            self._client.chat.completions.with_raw_response.create,
            payload,
            url=self.request_url,
            diagnostics=self._diagnostics,
            cancel=cancel,
            unreachable=MSG_LOCAL_UNREACHABLE,
        )
        return self._extract(codec.extract_chat_text, decoded, body)

    async def aclose(self) -> None:
        await self._client.close()
