from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ProviderKind(str, Enum):
    LOCAL = "local"
    AZURE_OPENAI = "azure_openai"
    AZURE_ANTHROPIC = "azure_anthropic"
    GEMINI = "gemini"

    @property
    def is_media(self) -> bool:
        return self is ProviderKind.GEMINI

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    ProviderKind.LOCAL: "Local LLM",
    ProviderKind.AZURE_OPENAI: "Azure OpenAI",
    ProviderKind.AZURE_ANTHROPIC: "Azure Anthropic",
    ProviderKind.GEMINI: "Gemini",
}


@dataclass(frozen=True)
class BackendConfig:
    kind: ProviderKind
    endpoint: str
    model: str
    timeout: float
    credential: Optional[str] = field(default=None, repr=False)
    api_version: Optional[str] = None


@dataclass(frozen=True)
class ClipTimeRange:
    """Start/end offsets as HH:MM:SS; a non-empty error clears both."""

    start_time: str = ""
    end_time: str = ""
    error: str = ""

    def __post_init__(self) -> None:
        if self.error:
            object.__setattr__(self, "start_time", "")
            object.__setattr__(self, "end_time", "")

    @property
    def failed(self) -> bool:
        return bool(self.error)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ClipTimeRange":
        return cls(
            start_time=str(payload.get("start_time") or ""),
            end_time=str(payload.get("end_time") or ""),
            error=str(payload.get("error") or ""),
        )


class FileState(str, Enum):
    UPLOADING = "uploading"
    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class RemoteFileHandle:
    uri: str
    mime_type: str
    state: FileState = FileState.UPLOADING
    name: str = ""

    @property
    def file_id(self) -> str:
        return self.uri.rstrip("/").rsplit("/", 1)[-1]


@dataclass(frozen=True)
class TranscriptResult:
    text: str
    language: Optional[str] = None
