from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

# Money stays Decimal in Python but goes over the wire as a JSON number. Fifteen
# significant digits is the most a double carries without rounding, so larger
# amounts are rejected rather than silently altered.
MONEY_MAX_DIGITS = 15
MONEY_DECIMAL_PLACES = 2
Money = Annotated[
    Decimal,
    Field(max_digits=MONEY_MAX_DIGITS, decimal_places=MONEY_DECIMAL_PLACES),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class BalanceReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    figures: list[Money] = Field(default_factory=list, alias="Figures", max_length=12)
    labels: list[str] = Field(default_factory=list, alias="Labels", max_length=12)
    total_balance: Money = Field(default=Decimal("0"), alias="TotalBalance")


class ErrorResponse(BaseModel):
    kind: str
    message: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorResponse":
        return cls(kind=type(exc).__name__, message=str(exc))


class TelemetryEventOut(BaseModel):
    name: str
    properties: dict[str, str]
    timestamp: datetime


class TelemetryEventsResponse(BaseModel):
    events: list[TelemetryEventOut]
