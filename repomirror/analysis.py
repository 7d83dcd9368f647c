"""Analyze-request lifecycle for RepoMirror.

``AnalysisClient.analyze()`` drives the request state machine::

    Idle ──submit──▶ Loading ──2xx──────▶ Success(result)
      │                 └──non-2xx/net──▶ Error(message)
      └──bad URL──────────────────────▶ Error("Please enter a valid GitHub URL")

The state is owned by the client instance; callers read ``state`` or the
value returned from ``analyze``. There are no retries and no cancellation:
a failed attempt is terminal until the user submits again.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

import httpx
from pydantic import ValidationError

from repomirror.errors import (
    RepoMirrorError,
    ServiceError,
    TransportError,
    UrlValidationError,
)
from repomirror.models import (
    AnalysisRequest,
    AnalysisResult,
    Error,
    Idle,
    Loading,
    RequestState,
    ServiceErrorBody,
    Success,
)

logger = logging.getLogger(__name__)

ANALYZE_PATH = "/api/analyze"
#: Substring every accepted repository URL must contain.
URL_MARKER = "github.com"


def validate_repo_url(raw_url: str) -> str:
    """Return *raw_url* unchanged if it looks like a GitHub URL.

    Raises:
        UrlValidationError: If the ``github.com`` marker is missing.
    """
    if URL_MARKER not in (raw_url or ""):
        raise UrlValidationError()
    return raw_url


def _error_message(response: httpx.Response) -> Optional[str]:
    """Extract the service's ``error`` text from a failed response, if any."""
    try:
        body = ServiceErrorBody.model_validate(response.json())
    except (ValueError, ValidationError):
        return None
    return body.error or None


class AnalysisClient:
    """Issues ``POST /api/analyze`` and owns the resulting ``RequestState``.

    Args:
        base_url: Root URL of the analysis service.
        timeout: Seconds before a request is abandoned; ``None`` waits forever.
        transport: Optional httpx transport (tests inject ``MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._state: RequestState = Idle()
        self._listeners: list[Callable[[RequestState], None]] = []

    # ── State ───────────────────────────────────────────────────────────────

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def busy(self) -> bool:
        """True while a request is in flight."""
        return isinstance(self._state, Loading)

    def on_transition(self, callback: Callable[[RequestState], None]) -> None:
        """Register *callback* to be called with every new state."""
        self._listeners.append(callback)

    def _transition(self, state: RequestState) -> RequestState:
        self._state = state
        for callback in self._listeners:
            callback(state)
        return state

    # ── Operation ───────────────────────────────────────────────────────────

    async def analyze(self, raw_url: str) -> RequestState:
        """Validate *raw_url*, send it for analysis and return the final state.

        Raises:
            RuntimeError: If called while a previous request is still in flight.
        """
        if self.busy:
            raise RuntimeError("An analysis request is already in flight.")

        try:
            validate_repo_url(raw_url)
        except UrlValidationError as exc:
            logger.info("Rejected non-GitHub URL %r", raw_url)
            return self._transition(Error(message=str(exc), kind=exc.kind))

        self._transition(Loading())
        try:
            result = await self._post(AnalysisRequest(url=raw_url))
        except ServiceError as exc:
            logger.warning(
                "Analysis service rejected %s (HTTP %d): %s", raw_url, exc.status_code, exc
            )
            return self._transition(Error(message=str(exc), kind=exc.kind))
        except RepoMirrorError as exc:
            logger.warning("Analysis failed for %s: %s", raw_url, exc)
            return self._transition(Error(message=str(exc), kind=exc.kind))

        logger.info("Analysis succeeded for %s (score=%d)", raw_url, result.score)
        return self._transition(Success(result=result))

    async def _post(self, request: AnalysisRequest) -> AnalysisResult:
        """Send one analyze request and validate the response body.

        Raises:
            ServiceError: Non-2xx with an ``error`` message in the body.
            TransportError: Network failure, non-2xx without a message,
                or a 2xx body that is not a valid ``AnalysisResult``.
        """
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.post(ANALYZE_PATH, json=request.model_dump())
            except httpx.HTTPError as exc:
                raise TransportError() from exc

        if response.is_error:
            message = _error_message(response)
            if message:
                raise ServiceError(message, status_code=response.status_code)
            raise TransportError()

        try:
            return AnalysisResult.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.warning("Unexpected analysis response body: %s", exc)
            raise TransportError() from exc
