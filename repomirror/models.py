"""
Pydantic models and request-state types shared across the RepoMirror client.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ── Wire models ────────────────────────────────────────────────────────────

class AnalysisRequest(BaseModel):
    """Body of ``POST /api/analyze``."""

    url: str


class AnalysisResult(BaseModel):
    """Score, narrative summary and roadmap returned for one repository."""

    model_config = ConfigDict(frozen=True)

    score: int
    summary: str
    roadmap: list[str]


class HistoryRecord(BaseModel):
    """One past scan as returned by ``GET /api/history``."""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, coerce_numbers_to_str=True
    )

    id: str = Field(alias="_id")
    repo_url: str = Field(alias="repoUrl")
    repo_name: Optional[str] = Field(default=None, alias="repoName")
    score: int
    created_at: datetime = Field(alias="createdAt")


class ServiceErrorBody(BaseModel):
    """Body of a non-2xx analysis response."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    error: str


# ── Request lifecycle ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class Idle:
    """No request has been made yet."""

    name = "idle"


@dataclass(frozen=True)
class Loading:
    """A request is in flight."""

    name = "loading"


@dataclass(frozen=True)
class Success:
    """The last request completed with a result."""

    result: AnalysisResult
    name = "success"


@dataclass(frozen=True)
class Error:
    """The last submission failed; ``kind`` names the error category."""

    message: str
    kind: str = "error"
    name = "error"


RequestState = Union[Idle, Loading, Success, Error]
