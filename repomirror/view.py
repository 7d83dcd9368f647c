"""ViewController: composition root for the RepoMirror dashboard.

Owns the theme flag, the analysis client (and therefore the request
state) and the history client. State changes only through ``dispatch``:

    Started          → load theme preference, refresh history once
    UrlSubmitted(u)  → analyze u; refresh history after a Success
    ThemeToggled     → flip + persist theme; nothing else touched

Every state change is pushed to subscribers as a freshly rendered
``ViewModel``; ``dispatch`` also returns the final render.
History dates are shown in the local timezone of the process.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Callable, Optional, Union

from pydantic import BaseModel

from repomirror.analysis import AnalysisClient
from repomirror.classifier import Tier, classify, label_for
from repomirror.history import HistoryClient
from repomirror.models import Error, HistoryRecord, RequestState, Success
from repomirror.preferences import DEFAULT_DARK_MODE, PreferenceStore

logger = logging.getLogger(__name__)

GITHUB_PREFIX = "https://github.com/"
EMPTY_HISTORY_MESSAGE = "No history available."


# ── Events ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Started:
    """The view has been mounted."""


@dataclass(frozen=True)
class UrlSubmitted:
    """The user submitted the URL form."""

    url: str


@dataclass(frozen=True)
class ThemeToggled:
    """The user flipped light/dark mode."""


Event = Union[Started, UrlSubmitted, ThemeToggled]


# ── View models ────────────────────────────────────────────────────────────

class ResultPanel(BaseModel):
    score: int
    tier: Tier
    tier_label: str
    summary: str
    roadmap: list[str]


class HistoryRow(BaseModel):
    id: str
    name: str
    repo_url: str
    score: int
    tier: Tier
    created_on: str


class ViewModel(BaseModel):
    """Everything the dashboard template needs for one render."""

    panel: str
    dark_mode: bool
    url: str = ""
    submit_disabled: bool = False
    error: Optional[str] = None
    result: Optional[ResultPanel] = None
    history: list[HistoryRow] = []
    empty_history_message: str = EMPTY_HISTORY_MESSAGE


def display_name(record: HistoryRecord) -> str:
    """Repository name if the service supplied one, else the URL path."""
    return record.repo_name or record.repo_url.replace(GITHUB_PREFIX, "")


def history_row(record: HistoryRecord) -> HistoryRow:
    return HistoryRow(
        id=record.id,
        name=display_name(record),
        repo_url=record.repo_url,
        score=record.score,
        tier=classify(record.score),
        created_on=record.created_at.astimezone().date().isoformat(),
    )


def result_panel(state: RequestState) -> Optional[ResultPanel]:
    if not isinstance(state, Success):
        return None
    result = state.result
    tier = classify(result.score)
    return ResultPanel(
        score=result.score,
        tier=tier,
        tier_label=label_for(result.score),
        summary=result.summary,
        roadmap=list(result.roadmap),
    )


# ── Controller ─────────────────────────────────────────────────────────────

class ViewController:
    """Composes preferences, analysis and history into a renderable view."""

    def __init__(
        self,
        preferences: PreferenceStore,
        analysis: AnalysisClient,
        history: HistoryClient,
    ) -> None:
        self.preferences = preferences
        self.analysis = analysis
        self.history = history
        self.dark_mode = DEFAULT_DARK_MODE
        self.url = ""
        self._subscribers: list[Callable[[ViewModel], None]] = []
        # Push the Loading render (and every other transition) to subscribers.
        self.analysis.on_transition(lambda _state: self._publish())

    def subscribe(self, callback: Callable[[ViewModel], None]) -> None:
        """Register *callback* to receive every re-render."""
        self._subscribers.append(callback)

    def _publish(self) -> ViewModel:
        view = self.render()
        for callback in self._subscribers:
            callback(view)
        return view

    def render(self) -> ViewModel:
        """Build a ViewModel from the current state."""
        state = self.analysis.state
        return ViewModel(
            panel=state.name,
            dark_mode=self.dark_mode,
            url=self.url,
            submit_disabled=self.analysis.busy,
            error=state.message if isinstance(state, Error) else None,
            result=result_panel(state),
            history=[history_row(r) for r in self.history.records],
        )

    # ── Event handling ──────────────────────────────────────────────────────

    async def dispatch(self, event: Event) -> ViewModel:
        """Apply *event* and return the resulting render."""
        if isinstance(event, Started):
            await self._on_started()
        elif isinstance(event, UrlSubmitted):
            await self._on_submit(event.url)
        elif isinstance(event, ThemeToggled):
            self._on_toggle()
        else:
            raise TypeError(f"Unknown event: {event!r}")
        return self._publish()

    async def _on_started(self) -> None:
        self.dark_mode = self.preferences.load()
        await self.history.refresh()

    async def _on_submit(self, url: str) -> None:
        if self.analysis.busy:
            logger.warning("Ignoring submit of %r while an analysis is running", url)
            return
        self.url = url
        state = await self.analysis.analyze(url)
        if isinstance(state, Success):
            await self.history.refresh()

    def _on_toggle(self) -> None:
        self.dark_mode = not self.dark_mode
        try:
            self.preferences.save(self.dark_mode)
        except (sqlite3.Error, OSError):
            logger.exception("Could not persist theme preference")
