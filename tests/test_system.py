"""Tests for health endpoints, error envelopes, logging and background tasks."""

import asyncio
import json
import logging

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from filmlog.core import background
from filmlog.core.exceptions import register_exception_handlers
from filmlog.core.logging import StructuredFormatter, get_logger
from filmlog.core.middleware import RequestLoggingMiddleware
from filmlog.core.validation import sanitize_text


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_readiness_check(client: AsyncClient) -> None:
    response = await client.get("/ready")

    assert response.status_code == 200
    assert response.json()["database"] == "connected"


@pytest.mark.asyncio
async def test_version_endpoint(client: AsyncClient) -> None:
    response = await client.get("/api/v1/version")

    assert response.status_code == 200
    assert response.json()["version"]


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient) -> None:
    response = await client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
    assert "X-Process-Time-Ms" in response.headers


@pytest.mark.asyncio
async def test_error_envelope_carries_request_id(client: AsyncClient) -> None:
    response = await client.get("/api/v1/auth/profile", headers={"X-Request-ID": "req-456"})

    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["error"]["request_id"] == "req-456"
    assert body["error"]["message"]


@pytest.mark.asyncio
async def test_unhandled_exception_is_generic_500(caplog: pytest.LogCaptureFixture) -> None:
    app = FastAPI()
    register_exception_handlers(app)
    app.add_middleware(RequestLoggingMiddleware)

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("database password is hunter2")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        with caplog.at_level(logging.ERROR, logger="filmlog"):
            response = await ac.get("/boom")

    assert response.status_code == 500
    body = response.json()
    assert body["error"]["code"] == "INTERNAL_ERROR"
    assert "hunter2" not in response.text
    assert any("Unhandled exception" in r.getMessage() for r in caplog.records)


# ─────────────────────────────────────────────────────────────────────────────
# Background tasks
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_background_failure_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    async def failing() -> None:
        raise RuntimeError("stamp failed")

    with caplog.at_level(logging.ERROR, logger="filmlog"):
        background.spawn(failing(), name="failing-task")
        await background.drain()
        # Done callbacks run on the next loop iteration
        await asyncio.sleep(0)

    assert background.pending() == 0
    failures = [r for r in caplog.records if r.getMessage() == "Background task failed"]
    assert len(failures) == 1
    assert failures[0].task_name == "failing-task"


@pytest.mark.asyncio
async def test_background_result_does_not_block_caller() -> None:
    gate = asyncio.Event()

    async def waits() -> None:
        await gate.wait()

    background.spawn(waits())
    assert background.pending() == 1

    gate.set()
    await background.drain()
    await asyncio.sleep(0)
    assert background.pending() == 0


# ─────────────────────────────────────────────────────────────────────────────
# Logging and sanitisation
# ─────────────────────────────────────────────────────────────────────────────


def test_structured_formatter_includes_context() -> None:
    logger = get_logger("test", component="catalog")
    record = logger.logger.makeRecord(
        logger.logger.name,
        logging.INFO,
        __file__,
        1,
        "Cached movie",
        (),
        None,
        extra={"tmdb_id": 550, "component": "catalog"},
    )

    payload = json.loads(StructuredFormatter().format(record))

    assert payload["message"] == "Cached movie"
    assert payload["logger"] == "filmlog.test"
    assert payload["tmdb_id"] == 550
    assert payload["component"] == "catalog"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("  hello  ", "hello"),
        ("tab\tand\nnewline", "tab\tand\nnewline"),
        ("nul\x00byte", "nulbyte"),
        ("bell\x07\x1b[0m", "bell[0m"),
        (None, None),
    ],
)
def test_sanitize_text(raw: str | None, expected: str | None) -> None:
    assert sanitize_text(raw) == expected
