"""Tests for agent_core.api routes."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient

from agent_core.api.routes import INTERNAL_ERROR_BODY, NOT_FOUND_BODY
from agent_core.config import Settings
from agent_core.main import create_app


# ── fixtures ───────────────────────────────────────────


@pytest.fixture
async def client(settings: Settings):
    app = create_app(settings)
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def _schema(payload: dict) -> dict:
    return {key: sorted(value) if isinstance(value, dict) else None for key, value in payload.items()}


# ── snapshot routes ────────────────────────────────────


class TestSnapshotRoutes:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/health", "/status"])
    async def test_returns_snapshot(self, client: AsyncClient, path: str):
        resp = await client.get(path)
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/json"
        data = resp.json()
        assert data["agent"]["name"] == "agent-test"
        assert data["agent"]["pid"] == os.getpid()
        assert set(data) == {"agent", "system", "controller", "ts"}

    @pytest.mark.asyncio
    async def test_health_and_status_share_schema(self, client: AsyncClient):
        health = (await client.get("/health")).json()
        status = (await client.get("/status")).json()
        assert _schema(health) == _schema(status)

    @pytest.mark.asyncio
    async def test_body_is_minified_with_exact_length(self, client: AsyncClient):
        resp = await client.get("/status")
        assert b"\n" not in resp.content
        assert int(resp.headers["content-length"]) == len(resp.content)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["POST", "PUT", "DELETE", "PATCH", "OPTIONS", "TRACE", "PROPFIND"])
    async def test_any_method(self, client: AsyncClient, method: str):
        resp = await client.request(method, "/health")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/json"
        assert resp.json()["agent"]["role"] == "tester"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/health", "/status"])
    @pytest.mark.parametrize("method", ["TRACE", "PROPFIND"])
    async def test_uncommon_methods_on_both_routes(self, client: AsyncClient, path: str, method: str):
        resp = await client.request(method, path)
        assert resp.status_code == 200
        assert set(resp.json()) == {"agent", "system", "controller", "ts"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/health", "/status"])
    async def test_head_has_headers_but_no_body(self, client: AsyncClient, path: str):
        resp = await client.head(path)
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/json"
        assert int(resp.headers["content-length"]) > 0
        assert resp.content == b""

    @pytest.mark.asyncio
    async def test_fresh_snapshot_per_request(self, client: AsyncClient):
        with patch("agent_core.api.routes.build_snapshot") as mock_build:
            from agent_core.collectors.snapshot import build_snapshot as real_build
            mock_build.side_effect = real_build
            await client.get("/health")
            await client.get("/status")
        assert mock_build.call_count == 2

    @pytest.mark.asyncio
    async def test_build_failure_returns_500(self, client: AsyncClient):
        with patch("agent_core.api.routes.build_snapshot", side_effect=RuntimeError("boom")):
            resp = await client.get("/status")
        assert resp.status_code == 500
        assert resp.headers["content-type"].startswith("text/plain")
        assert resp.text == INTERNAL_ERROR_BODY

    @pytest.mark.asyncio
    async def test_listener_keeps_serving_after_500(self, client: AsyncClient):
        with patch("agent_core.api.routes.build_snapshot", side_effect=RuntimeError("boom")):
            await client.get("/status")
        resp = await client.get("/status")
        assert resp.status_code == 200


# ── not found ──────────────────────────────────────────


class TestNotFound:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/foo", "/", "/health/extra", "/status/", "/docs", "/openapi.json"])
    async def test_unknown_path(self, client: AsyncClient, path: str):
        resp = await client.get(path)
        assert resp.status_code == 404
        assert resp.headers["content-type"].startswith("text/plain")
        assert resp.text == NOT_FOUND_BODY
        assert resp.text == "agent-core: not found\n"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["POST", "TRACE", "PROPFIND", "OPTIONS"])
    async def test_unknown_path_any_method(self, client: AsyncClient, method: str):
        resp = await client.request(method, "/foo")
        assert resp.status_code == 404
        assert resp.headers["content-type"].startswith("text/plain")
        assert resp.text == NOT_FOUND_BODY

    @pytest.mark.asyncio
    async def test_unknown_path_head_has_no_body(self, client: AsyncClient):
        resp = await client.head("/foo")
        assert resp.status_code == 404
        assert int(resp.headers["content-length"]) == len(NOT_FOUND_BODY)
        assert resp.content == b""


class TestAppFactory:
    def test_settings_on_app_state(self, settings: Settings):
        app = create_app(settings)
        assert app.state.settings is settings
