from __future__ import annotations

import io
import logging
from collections.abc import AsyncIterator, Iterator
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

from bbbank_api import main as main_module
from bbbank_api.config import get_settings
from bbbank_api.db.session import get_sessionmaker, init_db
from bbbank_api.main import app
from bbbank_api.models.schemas import BalanceReport
from bbbank_api.observability.logging import configure_logging, reset_logging
from bbbank_api.observability.metrics import reset_metrics
from bbbank_api.observability.telemetry import reset_telemetry
from bbbank_api.services.dependencies import get_controller_logger, get_transaction_service


class StubTransactionService:
    """Returns a canned report (or raises) and remembers every user id it was asked for."""

    def __init__(self, report: BalanceReport | None = None, error: Exception | None = None) -> None:
        self.report = report or BalanceReport()
        self.error = error
        self.calls: list[str | None] = []

    async def get_last_12_month_balances(self, user_id: str | None) -> BalanceReport:
        self.calls.append(user_id)
        if self.error is not None:
            raise self.error
        return self.report


class RecordingLogger:
    def __init__(self) -> None:
        self.entries: list[tuple[str, str]] = []

    def _record(self, level: str, event: str) -> None:
        self.entries.append((level, event))

    def debug(self, event: str, *args, **kwargs) -> None:
        self._record("debug", event)

    def info(self, event: str, *args, **kwargs) -> None:
        self._record("info", event)

    def warning(self, event: str, *args, **kwargs) -> None:
        self._record("warning", event)

    def error(self, event: str, *args, **kwargs) -> None:
        self._record("error", event)

    def exception(self, event: str, *args, **kwargs) -> None:
        self._record("error", event)

    def levels(self, level: str) -> list[str]:
        return [event for lvl, event in self.entries if lvl == level]


def sample_report() -> BalanceReport:
    return BalanceReport(
        figures=[Decimal("100.50"), Decimal("250.00"), Decimal("180.25")],
        labels=["Aug 2026", "Sep 2026", "Oct 2026"],
        total_balance=Decimal("180.25"),
    )


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'bbbank.db'}")
    monkeypatch.setenv("ENABLE_TELEMETRY_ENDPOINT", "true")
    get_settings.cache_clear()
    init_db()
    reset_metrics()
    reset_telemetry()

    yield

    app.dependency_overrides.clear()
    get_settings.cache_clear()


@pytest.fixture
def db_session() -> Iterator[Session]:
    with get_sessionmaker()() as db:
        yield db


@pytest.fixture
def recording_logger() -> RecordingLogger:
    logger = RecordingLogger()
    app.dependency_overrides[get_controller_logger] = lambda: logger
    return logger


@pytest.fixture
def stub_service() -> StubTransactionService:
    service = StubTransactionService(report=sample_report())
    app.dependency_overrides[get_transaction_service] = lambda: service
    return service


@pytest.fixture
async def api_client() -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def json_log_stream() -> Iterator[io.StringIO]:
    """Configure JSON logging into a buffer; the access logger is opened up to INFO."""
    stream = io.StringIO()
    configure_logging(stream=stream, access_level=logging.INFO, force=True)
    yield stream
    reset_logging()


@pytest.fixture
def quiet_startup(monkeypatch: pytest.MonkeyPatch) -> None:
    # Startup would otherwise install process-wide JSON logging on stdout.
    monkeypatch.setattr(main_module, "configure_logging", lambda *args, **kwargs: None)
