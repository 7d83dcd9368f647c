"""Tests for repomirror/analysis.py — request lifecycle against a mocked service."""

from __future__ import annotations

import asyncio
import json
import logging

import httpx
import pytest

from repomirror.analysis import AnalysisClient, validate_repo_url
from repomirror.errors import GENERIC_FAILURE_MESSAGE, INVALID_URL_MESSAGE, UrlValidationError
from repomirror.models import AnalysisResult, Error, Idle, Loading, Success

REPO_URL = "https://github.com/acme/widgets"
BASE_URL = "http://analysis.test"


# ── Fixtures ───────────────────────────────────────────────────────────────────


def make_client(handler) -> AnalysisClient:
    return AnalysisClient(BASE_URL, transport=httpx.MockTransport(handler))


def respond(status_code: int, **kwargs):
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(status_code, **kwargs)

    handler.calls = calls
    return handler


# ── Validation ─────────────────────────────────────────────────────────────────


class TestValidateRepoUrl:
    def test_accepts_github_url(self):
        assert validate_repo_url(REPO_URL) == REPO_URL

    def test_rejects_other_text(self):
        with pytest.raises(UrlValidationError, match="valid GitHub URL"):
            validate_repo_url("not-a-url")

    def test_rejects_empty(self):
        with pytest.raises(UrlValidationError):
            validate_repo_url("")


# ── analyze() ──────────────────────────────────────────────────────────────────


class TestAnalyze:
    def test_starts_idle(self):
        client = make_client(respond(200, json={}))
        assert client.state == Idle()
        assert client.busy is False

    def test_invalid_url_never_hits_network(self):
        handler = respond(200, json={})
        client = make_client(handler)

        state = asyncio.run(client.analyze("not-a-url"))

        assert state == Error(message=INVALID_URL_MESSAGE, kind="validation")
        assert client.state == state
        assert handler.calls == []

    def test_success_echoes_payload(self):
        body = {"score": 92, "summary": "Solid project.", "roadmap": ["a", "b"]}
        handler = respond(200, json=body)
        client = make_client(handler)

        state = asyncio.run(client.analyze(REPO_URL))

        assert isinstance(state, Success)
        assert state.result == AnalysisResult(score=92, summary="Solid project.", roadmap=["a", "b"])
        assert len(handler.calls) == 1
        request = handler.calls[0]
        assert request.method == "POST"
        assert request.url == f"{BASE_URL}/api/analyze"
        assert json.loads(request.content) == {"url": REPO_URL}

    def test_service_error_message_surfaced_verbatim(self):
        client = make_client(respond(429, json={"error": "rate limited"}))

        state = asyncio.run(client.analyze(REPO_URL))

        assert state == Error(message="rate limited", kind="service")

    def test_numeric_error_value_is_surfaced(self):
        client = make_client(respond(400, json={"error": 123}))

        state = asyncio.run(client.analyze(REPO_URL))

        assert state == Error(message="123", kind="service")

    def test_service_rejection_logs_status_code(self, caplog):
        client = make_client(respond(429, json={"error": "rate limited"}))

        with caplog.at_level(logging.WARNING, logger="repomirror.analysis"):
            asyncio.run(client.analyze(REPO_URL))

        assert "HTTP 429" in caplog.text

    def test_error_without_body_uses_fallback(self):
        client = make_client(respond(500))

        state = asyncio.run(client.analyze(REPO_URL))

        assert state == Error(message=GENERIC_FAILURE_MESSAGE, kind="transport")

    def test_empty_error_text_uses_fallback(self):
        client = make_client(respond(400, json={"error": ""}))

        state = asyncio.run(client.analyze(REPO_URL))

        assert state.message == GENERIC_FAILURE_MESSAGE

    def test_network_failure_uses_fallback(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        state = asyncio.run(client.analyze(REPO_URL))

        assert state == Error(message=GENERIC_FAILURE_MESSAGE, kind="transport")

    def test_malformed_success_body_is_transport_error(self):
        client = make_client(respond(200, json={"score": "high"}))

        state = asyncio.run(client.analyze(REPO_URL))

        assert isinstance(state, Error)
        assert state.kind == "transport"

    def test_new_submit_clears_previous_result(self):
        body = {"score": 40, "summary": "s", "roadmap": []}
        client = make_client(respond(200, json=body))

        asyncio.run(client.analyze(REPO_URL))
        state = asyncio.run(client.analyze("gitlab.com/acme/widgets"))

        assert isinstance(state, Error)
        assert client.state == state

    def test_transitions_through_loading(self):
        body = {"score": 70, "summary": "s", "roadmap": ["x"]}
        client = make_client(respond(200, json=body))
        seen = []
        client.on_transition(seen.append)

        asyncio.run(client.analyze(REPO_URL))

        assert [type(s) for s in seen] == [Loading, Success]

    def test_reentrant_call_while_loading_is_refused(self):
        client = make_client(respond(200, json={}))
        client._state = Loading()

        with pytest.raises(RuntimeError, match="in flight"):
            asyncio.run(client.analyze(REPO_URL))
