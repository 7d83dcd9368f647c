"""Exception taxonomy for the RepoMirror client.

Raised inside the network boundary; the clients translate them into a
``RequestState`` (analysis) or a log line (history) before they reach the
view.
"""

from __future__ import annotations

#: Shown when the service gives no usable error text.
GENERIC_FAILURE_MESSAGE = "Analysis failed. Check backend connection."

#: Shown when the submitted text is not a GitHub URL.
INVALID_URL_MESSAGE = "Please enter a valid GitHub URL"


class RepoMirrorError(Exception):
    """Base class for all client-side failures."""

    kind = "error"


class UrlValidationError(RepoMirrorError):
    """The submitted URL lacks the ``github.com`` marker; never sent."""

    kind = "validation"

    def __init__(self, message: str = INVALID_URL_MESSAGE) -> None:
        super().__init__(message)


class TransportError(RepoMirrorError):
    """The request could not complete or the response was unusable."""

    kind = "transport"

    def __init__(self, message: str = GENERIC_FAILURE_MESSAGE) -> None:
        super().__init__(message)


class ServiceError(RepoMirrorError):
    """Non-2xx response carrying a structured ``{"error": ...}`` body."""

    kind = "service"

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class HistoryFetchError(RepoMirrorError):
    """History could not be retrieved. Never surfaced to the user."""

    kind = "history"
