from dataclasses import dataclass
from typing import Optional
import os
from dotenv import load_dotenv

from clipscribe.constants import (
    ENV_AZURE_ANTHROPIC_API_KEY,
    ENV_AZURE_ANTHROPIC_ENDPOINT,
    ENV_AZURE_ANTHROPIC_MODEL,
    ENV_AZURE_OPENAI_API_KEY,
    ENV_AZURE_OPENAI_API_VERSION,
    ENV_AZURE_OPENAI_ENDPOINT,
    ENV_AZURE_OPENAI_MODEL,
    ENV_DEBUG,
    ENV_GEMINI_API_KEY,
    ENV_GEMINI_MODEL,
    ENV_LLM_ENDPOINT,
    ENV_LLM_MODEL,
    ENV_LOG_LEVEL,
)


def _env(name: str) -> Optional[str]:
    return (os.getenv(name) or "").strip() or None


@dataclass(frozen=True)
class Config:
    """Raw settings as found in the environment.

    Nothing here decides which backend to use; that is the selector's job.
    """

    log_level: str = "INFO"
    debug: bool = False
    llm_endpoint: Optional[str] = None
    llm_model: Optional[str] = None
    azure_openai_endpoint: Optional[str] = None
    azure_openai_api_key: Optional[str] = None
    azure_openai_model: Optional[str] = None
    azure_openai_api_version: Optional[str] = None
    azure_anthropic_endpoint: Optional[str] = None
    azure_anthropic_api_key: Optional[str] = None
    azure_anthropic_model: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_model: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        return cls._validate(
            log_level=os.getenv(ENV_LOG_LEVEL, "INFO"),
            debug=_env(ENV_DEBUG),
            llm_endpoint=_env(ENV_LLM_ENDPOINT),
            llm_model=_env(ENV_LLM_MODEL),
            azure_openai_endpoint=_env(ENV_AZURE_OPENAI_ENDPOINT),
            azure_openai_api_key=_env(ENV_AZURE_OPENAI_API_KEY),
            azure_openai_model=_env(ENV_AZURE_OPENAI_MODEL),
            azure_openai_api_version=_env(ENV_AZURE_OPENAI_API_VERSION),
            azure_anthropic_endpoint=_env(ENV_AZURE_ANTHROPIC_ENDPOINT),
            azure_anthropic_api_key=_env(ENV_AZURE_ANTHROPIC_API_KEY),
            azure_anthropic_model=_env(ENV_AZURE_ANTHROPIC_MODEL),
            gemini_api_key=_env(ENV_GEMINI_API_KEY),
            gemini_model=_env(ENV_GEMINI_MODEL),
        )

    @staticmethod
    def _validate(debug: Optional[str], log_level: str, **settings: Optional[str]) -> "Config":
        match debug:
            case None | "0" | "false" | "False" | "no":
                enabled = False
            case _:
                enabled = True

        match log_level.strip().upper():
            case "":
                level = "INFO"
            case lvl:
                level = lvl

        return Config(log_level=level, debug=enabled, **settings)
