"""
Scan-history snapshot for RepoMirror.

``HistoryClient.refresh()`` fetches ``GET /api/history`` and replaces the
held sequence wholesale. The service's order is kept as-is. Failures are
logged and leave the previous snapshot in place: history is a secondary
view and must never block the analyze workflow.

Overlapping refreshes are not sequenced; whichever response lands last
is the one held.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from repomirror.errors import HistoryFetchError
from repomirror.models import HistoryRecord

logger = logging.getLogger(__name__)

HISTORY_PATH = "/api/history"


def parse_history(payload: object) -> list[HistoryRecord]:
    """Validate a history response body into records, in service order.

    Individually malformed entries are skipped with a warning.

    Raises:
        HistoryFetchError: If *payload* is not a JSON array.
    """
    if not isinstance(payload, list):
        raise HistoryFetchError(f"Expected a list, got {type(payload).__name__}")

    records: list[HistoryRecord] = []
    for index, item in enumerate(payload):
        try:
            records.append(HistoryRecord.model_validate(item))
        except ValidationError as exc:
            logger.warning("Skipping corrupt history entry #%d: %s", index, exc)
    return records


class HistoryClient:
    """Fetches and holds the ordered list of past scans."""

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._records: tuple[HistoryRecord, ...] = ()

    @property
    def records(self) -> tuple[HistoryRecord, ...]:
        """The most recently applied snapshot."""
        return self._records

    async def refresh(self) -> tuple[HistoryRecord, ...]:
        """Replace the held snapshot with the service's current list.

        Returns:
            The held snapshot after the call (unchanged on failure).
        """
        try:
            records = await self._fetch()
        except HistoryFetchError as exc:
            logger.warning("Could not fetch history: %s", exc)
            return self._records

        self._records = tuple(records)
        logger.info("History refreshed: %d record(s)", len(self._records))
        return self._records

    async def _fetch(self) -> list[HistoryRecord]:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.get(HISTORY_PATH)
                response.raise_for_status()
            except httpx.HTTPError as exc:
                raise HistoryFetchError(str(exc)) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise HistoryFetchError("History response is not JSON") from exc
        return parse_history(payload)
