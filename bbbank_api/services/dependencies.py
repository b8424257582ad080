from __future__ import annotations

from typing import Any

import structlog
from fastapi import Depends
from sqlalchemy.orm import Session

from bbbank_api.db.session import get_db
from bbbank_api.observability.telemetry import TelemetryClient, get_telemetry_client
from bbbank_api.services.transaction_service import TransactionService, TransactionServiceProtocol


def get_transaction_service(db: Session = Depends(get_db)) -> TransactionServiceProtocol:
    return TransactionService(db)


def get_telemetry() -> TelemetryClient:
    return get_telemetry_client()


def get_controller_logger() -> Any:
    return structlog.get_logger("bbbank_api.api.transactions")
