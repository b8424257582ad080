from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from bbbank_api.models.schemas import BalanceReport, ErrorResponse
from bbbank_api.observability.service_calls import instrument_service_call
from bbbank_api.observability.telemetry import TelemetryClient
from bbbank_api.services.dependencies import get_controller_logger, get_telemetry, get_transaction_service
from bbbank_api.services.transaction_service import TransactionServiceProtocol

router = APIRouter(prefix="/api/transaction", tags=["transaction"])

BALANCES_RETURNED_EVENT = "GetLast12MonthBalances Returned"


def _bad_request(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=400, content=ErrorResponse.from_exception(exc).model_dump())


class TransactionController:
    """Maps balance lookups onto HTTP responses; every failure becomes a 400."""

    def __init__(self, logger: Any, telemetry_client: TelemetryClient, transaction_service: TransactionServiceProtocol) -> None:
        self._logger = logger
        self._telemetry_client = telemetry_client
        self._transaction_service = transaction_service

    async def get_aggregate_balances(self) -> BalanceReport | JSONResponse:
        try:
            self._logger.info("Executing GetLast12MonthBalances")
            report = await instrument_service_call(
                operation="get_last_12_month_balances",
                fn=lambda: self._transaction_service.get_last_12_month_balances(None),
            )
            self._telemetry_client.track_event(
                BALANCES_RETURNED_EVENT,
                {
                    "TotalFiguresReturned": str(len(report.figures)),
                    "TotalBalance": str(report.total_balance),
                },
            )
            self._logger.info("Executed GetLast12MonthBalances")
            return report
        except Exception as exc:  # noqa: BLE001
            self._logger.exception("Exception Executing GetLast12MonthBalances")
            return _bad_request(exc)

    async def get_user_balances(self, user_id: str) -> BalanceReport | JSONResponse:
        # Unlike the aggregate lookup this path neither logs nor tracks telemetry.
        try:
            return await instrument_service_call(
                operation="get_last_12_month_balances",
                fn=lambda: self._transaction_service.get_last_12_month_balances(user_id),
            )
        except Exception as exc:  # noqa: BLE001
            return _bad_request(exc)


def get_transaction_controller(
    logger: Any = Depends(get_controller_logger),
    telemetry_client: TelemetryClient = Depends(get_telemetry),
    transaction_service: TransactionServiceProtocol = Depends(get_transaction_service),
) -> TransactionController:
    return TransactionController(logger, telemetry_client, transaction_service)


@router.get(
    "/GetLast12MonthBalances",
    response_model=BalanceReport,
    responses={400: {"model": ErrorResponse}},
)
async def get_last_12_month_balances(
    controller: TransactionController = Depends(get_transaction_controller),
) -> BalanceReport | JSONResponse:
    return await controller.get_aggregate_balances()


@router.get(
    "/GetLast12MonthBalances/{userId}",
    response_model=BalanceReport,
    responses={400: {"model": ErrorResponse}},
)
async def get_user_last_12_month_balances(
    userId: str,  # noqa: N803 - published path parameter name
    controller: TransactionController = Depends(get_transaction_controller),
) -> BalanceReport | JSONResponse:
    return await controller.get_user_balances(userId)
