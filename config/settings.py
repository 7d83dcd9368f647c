"""Application settings — all configuration loaded from environment variables.

Usage:
    from config.settings import Settings
    settings = Settings()
    settings.validate()   # raises ValueError on a bad API URL or timeout
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse


def _optional_float(name: str) -> Optional[float]:
    raw = os.environ.get(name, "").strip()
    return float(raw) if raw else None


@dataclass
class Settings:
    """Centralised application configuration.

    All values are read from environment variables at instantiation time
    so that tests can override them by patching ``os.environ``.
    """

    # ── Analysis service ────────────────────────────────────────────────────
    api_base_url: str = field(
        default_factory=lambda: os.environ.get(
            "REPOMIRROR_API_URL", "http://localhost:5000"
        )
    )
    #: Seconds before an outbound request is abandoned; ``None`` never times out.
    request_timeout: Optional[float] = field(
        default_factory=lambda: _optional_float("REQUEST_TIMEOUT")
    )

    # ── Preferences ─────────────────────────────────────────────────────────
    #: Empty means the store's default location (``data/preferences.db``).
    prefs_db_path: str = field(
        default_factory=lambda: os.environ.get("PREFS_DB_PATH", "")
    )

    # ── Flask ───────────────────────────────────────────────────────────────
    debug: bool = field(
        default_factory=lambda: os.environ.get("FLASK_DEBUG", "0") == "1"
    )
    port: int = field(
        default_factory=lambda: int(os.environ.get("PORT", "5001"))
    )

    def validate(self) -> None:
        """Raise ``ValueError`` if any setting is unusable."""
        parsed = urlparse(self.api_base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(
                f"REPOMIRROR_API_URL must be an http(s) URL, got {self.api_base_url!r}."
            )
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ValueError("REQUEST_TIMEOUT must be a positive number of seconds.")
