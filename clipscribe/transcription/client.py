"""TranscriptionClient — abstract base for video transcription backends."""
import asyncio
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional

from clipscribe.models import TranscriptResult

# on_progress receives a short phase label, e.g. "Uploading video to Gemini..."
OnProgress = Callable[[str], None]


class TranscriptionClient(ABC):
    @abstractmethod
    async def transcribe(
        self,
        video_path: Path | str,
        on_progress: Optional[OnProgress] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> TranscriptResult:
        """Transcribe the spoken content of a video file. Raises BackendError."""
        ...

    @abstractmethod
    async def aclose(self) -> None: ...
