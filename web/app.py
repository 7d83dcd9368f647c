"""
Flask dashboard for RepoMirror.

Routes
──────
GET  /             Dashboard UI rendered from the current ViewModel
POST /analyze      Submit a repository URL (form field ``url``)
POST /theme        Toggle light/dark mode
GET  /api/state    Current ViewModel (JSON)
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, redirect, render_template, request, url_for

# Allow running as `python web/app.py` from the project root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

load_dotenv()

from config.settings import Settings
from repomirror.analysis import AnalysisClient
from repomirror.history import HistoryClient
from repomirror.preferences import PreferenceStore
from repomirror.view import Started, ThemeToggled, UrlSubmitted, ViewController

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_controller(settings: Settings) -> ViewController:
    """Wire the clients and the preference store from *settings*."""
    return ViewController(
        preferences=PreferenceStore(settings.prefs_db_path or None),
        analysis=AnalysisClient(settings.api_base_url, timeout=settings.request_timeout),
        history=HistoryClient(settings.api_base_url, timeout=settings.request_timeout),
    )


def create_app(
    settings: Optional[Settings] = None,
    controller: Optional[ViewController] = None,
) -> Flask:
    """Build the Flask app around a single ViewController."""
    settings = settings or Settings()
    settings.validate()
    controller = controller or build_controller(settings)

    app = Flask(__name__)
    app.config["DEBUG"] = settings.debug
    app.config["PORT"] = settings.port
    app.extensions["repomirror"] = controller

    # Load the theme and the first history snapshot before serving
    asyncio.run(controller.dispatch(Started()))
    logger.info("RepoMirror dashboard using analysis service at %s", settings.api_base_url)

    # ── UI ─────────────────────────────────────────────────────────────────

    @app.route("/")
    def index():
        return render_template("index.html", view=controller.render())

    @app.route("/analyze", methods=["POST"])
    async def analyze():
        url = request.form.get("url", "")
        await controller.dispatch(UrlSubmitted(url))
        return redirect(url_for("index"))

    @app.route("/theme", methods=["POST"])
    async def toggle_theme():
        await controller.dispatch(ThemeToggled())
        return redirect(url_for("index"))

    # ── State API ──────────────────────────────────────────────────────────

    @app.route("/api/state")
    def state():
        """Return the current ViewModel as JSON."""
        return jsonify(controller.render().model_dump(mode="json"))

    return app


# ── Entry point ────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app = create_app()
    app.run(debug=app.config["DEBUG"], host="0.0.0.0", port=app.config["PORT"])
