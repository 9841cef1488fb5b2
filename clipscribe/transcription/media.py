import mimetypes
from pathlib import Path

from clipscribe.constants import DEFAULT_VIDEO_MIME, VIDEO_MIME_FALLBACKS


def guess_video_mime(path: Path | str) -> str:
    """Content type for an upload; never empty."""
    ext = Path(path).suffix.lower()
    guessed, _ = mimetypes.guess_type(f"file{ext}") if ext else (None, None)
    return guessed or VIDEO_MIME_FALLBACKS.get(ext, DEFAULT_VIDEO_MIME)
