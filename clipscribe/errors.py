"""Error taxonomy shared by every backend and workflow."""
from typing import Optional

from clipscribe.constants import BODY_EXCERPT_LIMIT


def excerpt(text: Optional[str], limit: int = BODY_EXCERPT_LIMIT) -> str:
    match text:
        case None | "":
            return ""
        case t if len(t) <= limit:
            return t
        case t:
            return t[:limit] + "..."


class ConfigurationError(ValueError):
    """Missing or invalid setup. ``help_text`` tells the user what to set."""

    def __init__(self, message: str, help_text: str = "") -> None:
        super().__init__(message)
        self.help_text = help_text


class BackendError(Exception):
    """Base for every failure talking to a backend.

    ``url`` never carries a credential; ``body`` is the raw response text
    and ``excerpt`` its truncated form used in messages.
    """

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.status = status
        self.body = body

    @property
    def excerpt(self) -> str:
        return excerpt(self.body)

    def __str__(self) -> str:
        lines = [self.message]
        if self.url:
            lines.append(f"  URL: {self.url}")
        if self.body:
            lines.append(f"  Response: {self.excerpt}")
        return "\n".join(lines)


class TransportError(BackendError):
    pass


class ProtocolError(BackendError):
    pass


class StatusError(ProtocolError):
    pass


class MalformedResponseError(ProtocolError):
    pass


class MissingContentError(ProtocolError):
    pass


class ApplicationError(BackendError):
    """The backend answered with an explicit error object."""

    def __init__(self, message: str, *, code: str = "", **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.code = code


class SemanticError(BackendError):
    pass


class ClipRequestRejected(SemanticError):
    pass


class FileProcessingFailed(SemanticError):
    pass


class PollTimeout(BackendError):
    pass


class OperationCancelled(BackendError):
    pass
