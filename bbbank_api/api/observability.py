from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from bbbank_api.config import get_settings
from bbbank_api.models.schemas import TelemetryEventOut, TelemetryEventsResponse
from bbbank_api.observability.metrics import get_metrics
from bbbank_api.observability.telemetry import TelemetryClient
from bbbank_api.services.dependencies import get_telemetry


router = APIRouter(prefix="/api", tags=["observability"])


@router.get("/metrics")
async def metrics() -> dict:
    return get_metrics().snapshot()


@router.get("/telemetry/events", response_model=TelemetryEventsResponse)
async def telemetry_events(telemetry: TelemetryClient = Depends(get_telemetry)) -> TelemetryEventsResponse:
    settings = get_settings()
    if not settings.enable_telemetry_endpoint:
        raise HTTPException(status_code=404, detail="Not found")
    return TelemetryEventsResponse(
        events=[
            TelemetryEventOut(name=e.name, properties=e.properties, timestamp=e.timestamp)
            for e in telemetry.events()
        ]
    )
