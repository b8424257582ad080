from __future__ import annotations

import logging
import uuid
from time import perf_counter
from typing import Any, Callable

import structlog
from starlette.datastructures import MutableHeaders

from bbbank_api.observability.logging import ACCESS_LOGGER_NAME
from bbbank_api.observability.metrics import get_metrics

OBSERVABILITY_PATHS = frozenset({"/api/metrics", "/api/telemetry/events"})


def access_log_level(status_code: int) -> int:
    # 4xx is part of the balance contract (every collaborator failure maps to 400).
    return logging.ERROR if status_code >= 500 else logging.INFO


def _route_template(scope: dict[str, Any]) -> str | None:
    # The router writes the matched route back into the shared scope.
    route = scope.get("route")
    return getattr(route, "path", None)


class RequestContextMiddleware:
    """Request id and user scope in log context, access lines, per-route HTTP metrics."""

    def __init__(self, app: Callable[..., Any], excluded_paths: frozenset[str] = OBSERVABILITY_PATHS) -> None:
        self.app = app
        self._excluded_paths = excluded_paths

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        request_id = str(uuid.uuid4())
        path = scope.get("path")
        structlog.contextvars.bind_contextvars(request_id=request_id, path=path, method=scope.get("method"))

        start = perf_counter()
        status_code = 500

        async def send_wrapper(message: dict[str, Any]) -> None:
            nonlocal status_code
            if message.get("type") == "http.response.start":
                status_code = int(message.get("status", 500))
                MutableHeaders(scope=message)["X-Request-ID"] = request_id
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            elapsed_ms = (perf_counter() - start) * 1000.0
            route = _route_template(scope)

            if path not in self._excluded_paths:
                get_metrics().observe_http_request(elapsed_ms=elapsed_ms, route=route or "unmatched")

            fields: dict[str, Any] = {"status_code": status_code, "elapsed_ms": round(elapsed_ms, 2), "route": route}
            user_id = (scope.get("path_params") or {}).get("userId")
            if user_id is not None:
                fields["user_id"] = user_id
            structlog.get_logger(ACCESS_LOGGER_NAME).log(access_log_level(status_code), "http_request", **fields)

            structlog.contextvars.clear_contextvars()
