import io
import json
import logging

import structlog

from bbbank_api.observability.logging import configure_logging, reset_logging


def _rendered(stream) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


def test_stdlib_extra_fields_are_rendered(json_log_stream) -> None:
    logging.getLogger("bbbank_api.db.seed").info("seed.complete", extra={"transactions": 50})

    line = _rendered(json_log_stream)[-1]
    assert line["event"] == "seed.complete"
    assert line["transactions"] == 50
    assert line["logger"] == "bbbank_api.db.seed"
    assert line["level"] == "info"
    assert "timestamp" in line


def test_structlog_fields_and_context_are_rendered(json_log_stream) -> None:
    structlog.contextvars.bind_contextvars(request_id="req-1")
    try:
        structlog.get_logger("telemetry").info("telemetry_event", event_name="GetLast12MonthBalances Returned")
    finally:
        structlog.contextvars.clear_contextvars()

    line = _rendered(json_log_stream)[-1]
    assert line["event"] == "telemetry_event"
    assert line["event_name"] == "GetLast12MonthBalances Returned"
    assert line["request_id"] == "req-1"


def test_framework_loggers_are_capped(json_log_stream) -> None:
    logging.getLogger("sqlalchemy.engine").info("SELECT 1")
    logging.getLogger("uvicorn.access").info("GET /health 200")

    assert _rendered(json_log_stream) == []
    assert logging.getLogger("uvicorn.access").getEffectiveLevel() == logging.WARNING


def test_exceptions_are_formatted(json_log_stream) -> None:
    try:
        raise RuntimeError("ledger unavailable")
    except RuntimeError:
        structlog.get_logger("bbbank_api.api.transactions").exception("Exception Executing GetLast12MonthBalances")

    line = _rendered(json_log_stream)[-1]
    assert line["level"] == "error"
    assert "RuntimeError: ledger unavailable" in line["exception"]


async def test_access_line_carries_route_and_user(api_client, stub_service, recording_logger, json_log_stream) -> None:
    resp = await api_client.get("/api/transaction/GetLast12MonthBalances/U1")
    assert resp.status_code == 200

    access = [line for line in _rendered(json_log_stream) if line["event"] == "http_request"]
    assert len(access) == 1
    assert access[0]["route"] == "/api/transaction/GetLast12MonthBalances/{userId}"
    assert access[0]["user_id"] == "U1"
    assert access[0]["status_code"] == 200
    assert access[0]["request_id"] == resp.headers["x-request-id"]


async def test_access_lines_hidden_at_default_level(api_client) -> None:
    stream = io.StringIO()
    configure_logging(stream=stream, force=True)
    try:
        resp = await api_client.get("/api/transaction/GetLast12MonthBalances/no-such-user")
        assert resp.status_code == 400
    finally:
        reset_logging()

    assert [line for line in _rendered(stream) if line["event"] == "http_request"] == []
