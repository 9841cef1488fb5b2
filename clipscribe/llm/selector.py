"""Provider selection — turns Config into exactly one BackendConfig + TextClient.

Precedence is fixed: a local endpoint always wins, then Azure Anthropic,
then Azure OpenAI. A user can point at a local server without unsetting
their cloud variables.
"""
import logging
from typing import Optional
from urllib.parse import urlsplit

import httpx

from clipscribe.config import Config
from clipscribe.constants import (
    AZURE_ANTHROPIC_TIMEOUT,
    AZURE_OPENAI_TIMEOUT,
    DEFAULT_AZURE_ANTHROPIC_MODEL,
    DEFAULT_AZURE_OPENAI_API_VERSION,
    DEFAULT_LOCAL_MODEL,
    ENV_AZURE_ANTHROPIC_API_KEY,
    ENV_AZURE_ANTHROPIC_ENDPOINT,
    ENV_AZURE_OPENAI_API_KEY,
    ENV_AZURE_OPENAI_ENDPOINT,
    ENV_AZURE_OPENAI_MODEL,
    ENV_LLM_ENDPOINT,
    LOCAL_TIMEOUT,
    MSG_BACKEND_HELP,
    MSG_INVALID_ENDPOINT,
    MSG_MISSING_VAR,
    MSG_NO_BACKEND,
    MSG_UNKNOWN_PROVIDER,
)
from clipscribe.diagnostics import Diagnostics
from clipscribe.errors import ConfigurationError
from clipscribe.llm.azure_anthropic import AzureAnthropicClient
from clipscribe.llm.azure_openai import AzureOpenAIClient
from clipscribe.llm.client import TextClient
from clipscribe.llm.local import LocalChatClient
from clipscribe.models import BackendConfig, ProviderKind

logger = logging.getLogger(__name__)

_CLIENTS: dict[ProviderKind, type[TextClient]] = {
    ProviderKind.LOCAL: LocalChatClient,
    ProviderKind.AZURE_ANTHROPIC: AzureAnthropicClient,
    ProviderKind.AZURE_OPENAI: AzureOpenAIClient,
}


def _require(value: Optional[str], env_name: str) -> str:
    match value:
        case None | "":
            raise ConfigurationError(MSG_MISSING_VAR % env_name, MSG_BACKEND_HELP)
        case v:
            return v


def normalize_endpoint(raw: str, env_name: str = ENV_AZURE_OPENAI_ENDPOINT) -> str:
    """Reduce a pasted endpoint to scheme://host, dropping any path or query."""
    parts = urlsplit(raw.strip().rstrip("/"))
    match (parts.scheme, parts.netloc):
        case ("http" | "https", str() as host) if host:
            return f"{parts.scheme}://{host}"
        case _:
            raise ConfigurationError(MSG_INVALID_ENDPOINT % (env_name, raw), MSG_BACKEND_HELP)


def _local(config: Config) -> BackendConfig:
    return BackendConfig(
        kind=ProviderKind.LOCAL,
        endpoint=_require(config.llm_endpoint, ENV_LLM_ENDPOINT).rstrip("/"),
        model=config.llm_model or DEFAULT_LOCAL_MODEL,
        timeout=LOCAL_TIMEOUT,
    )


def _azure_anthropic(config: Config) -> BackendConfig:
    return BackendConfig(
        kind=ProviderKind.AZURE_ANTHROPIC,
        endpoint=_require(config.azure_anthropic_endpoint, ENV_AZURE_ANTHROPIC_ENDPOINT).rstrip("/"),
        credential=_require(config.azure_anthropic_api_key, ENV_AZURE_ANTHROPIC_API_KEY),
        model=config.azure_anthropic_model or DEFAULT_AZURE_ANTHROPIC_MODEL,
        timeout=AZURE_ANTHROPIC_TIMEOUT,
    )


def _azure_openai(config: Config) -> BackendConfig:
    endpoint = _require(config.azure_openai_endpoint, ENV_AZURE_OPENAI_ENDPOINT)
    credential = _require(config.azure_openai_api_key, ENV_AZURE_OPENAI_API_KEY)
    model = _require(config.azure_openai_model, ENV_AZURE_OPENAI_MODEL)
    return BackendConfig(
        kind=ProviderKind.AZURE_OPENAI,
        endpoint=normalize_endpoint(endpoint),
        credential=credential,
        model=model,
        api_version=config.azure_openai_api_version or DEFAULT_AZURE_OPENAI_API_VERSION,
        timeout=AZURE_OPENAI_TIMEOUT,
    )


_BUILDERS = {
    ProviderKind.LOCAL: _local,
    ProviderKind.AZURE_ANTHROPIC: _azure_anthropic,
    ProviderKind.AZURE_OPENAI: _azure_openai,
}


def backend_config(config: Config) -> BackendConfig:
    """Pick the backend by precedence. Raises ConfigurationError if none fits."""
    configured = (config.llm_endpoint, config.azure_anthropic_endpoint, config.azure_openai_endpoint)
    match tuple(map(bool, configured)):
        case (True, _, _):
            return _local(config)
        case (False, True, _):
            return _azure_anthropic(config)
        case (False, False, True):
            return _azure_openai(config)
        case _:
            raise ConfigurationError(MSG_NO_BACKEND, MSG_BACKEND_HELP)


def backend_config_for(kind: ProviderKind | str, config: Config) -> BackendConfig:
    """Build the config for an explicitly requested provider."""
    try:
        provider = ProviderKind(kind)
    except ValueError as exc:
        raise ConfigurationError(MSG_UNKNOWN_PROVIDER % kind, MSG_BACKEND_HELP) from exc
    match _BUILDERS.get(provider):
        case None:
            raise ConfigurationError(MSG_UNKNOWN_PROVIDER % kind, MSG_BACKEND_HELP)
        case build:
            return build(config)


def available_providers(config: Config) -> list[ProviderKind]:
    """Providers whose settings are complete, in precedence order."""
    checks = (
        (ProviderKind.LOCAL, (config.llm_endpoint,)),
        (ProviderKind.AZURE_ANTHROPIC, (config.azure_anthropic_endpoint, config.azure_anthropic_api_key)),
        (
            ProviderKind.AZURE_OPENAI,
            (config.azure_openai_endpoint, config.azure_openai_api_key, config.azure_openai_model),
        ),
    )
    return [kind for kind, values in checks if all(values)]


def check_config(config: Config) -> None:
    backend_config(config)


def _describe(backend: BackendConfig, diagnostics: Diagnostics) -> None:
    diagnostics.settings(
        backend.kind.display_name,
        {
            "endpoint": backend.endpoint,
            "model": backend.model,
            "api_version": backend.api_version,
            "credential": backend.credential,
        },
        secrets=("credential",),
    )


def build_client(
    backend: BackendConfig,
    diagnostics: Optional[Diagnostics] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> TextClient:
    match _CLIENTS.get(backend.kind):
        case None:
            raise ConfigurationError(MSG_UNKNOWN_PROVIDER % backend.kind.value, MSG_BACKEND_HELP)
        case client_cls:
            diagnostics = diagnostics or Diagnostics.disabled()
            _describe(backend, diagnostics)
            logger.info("Using %s (%s)", backend.kind.display_name, backend.model)
            return client_cls(backend, diagnostics, http_client=http_client)


def select_client(
    config: Config,
    diagnostics: Optional[Diagnostics] = None,
    provider: Optional[ProviderKind | str] = None,
) -> TextClient:
    """One-shot selection: build the single text client for this process."""
    backend = backend_config_for(provider, config) if provider else backend_config(config)
    return build_client(backend, diagnostics)
