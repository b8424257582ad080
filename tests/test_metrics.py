from bbbank_api.config import get_settings


async def test_metrics_endpoint_returns_snapshot_and_counts_requests(api_client) -> None:
    m1 = await api_client.get("/api/metrics")
    assert m1.status_code == 200
    payload1 = m1.json()
    assert "counters" in payload1
    assert "latency_ms" in payload1

    # /api/metrics itself should NOT affect http_requests_total.
    m1b = await api_client.get("/api/metrics")
    assert m1b.json()["counters"]["http_requests_total"] == payload1["counters"]["http_requests_total"]

    health = await api_client.get("/health")
    assert health.status_code == 200

    payload2 = (await api_client.get("/api/metrics")).json()
    assert payload2["counters"]["http_requests_total"] == payload1["counters"]["http_requests_total"] + 1


async def test_service_calls_and_failures_are_counted(api_client, stub_service, recording_logger) -> None:
    ok = await api_client.get("/api/transaction/GetLast12MonthBalances/U1")
    assert ok.status_code == 200

    stub_service.error = RuntimeError("down")
    failed = await api_client.get("/api/transaction/GetLast12MonthBalances")
    assert failed.status_code == 400

    counters = (await api_client.get("/api/metrics")).json()["counters"]
    assert counters["service_calls_total"] == 2
    assert counters["service_call_errors_total"] == 1


async def test_telemetry_endpoint_lists_tracked_events(api_client, stub_service, recording_logger) -> None:
    await api_client.get("/api/transaction/GetLast12MonthBalances")

    resp = await api_client.get("/api/telemetry/events")
    assert resp.status_code == 200
    events = resp.json()["events"]
    assert len(events) == 1
    assert events[0]["name"] == "GetLast12MonthBalances Returned"
    assert events[0]["properties"] == {"TotalFiguresReturned": "3", "TotalBalance": "180.25"}


async def test_telemetry_endpoint_can_be_disabled(api_client, monkeypatch) -> None:
    monkeypatch.setenv("ENABLE_TELEMETRY_ENDPOINT", "false")
    get_settings.cache_clear()

    resp = await api_client.get("/api/telemetry/events")
    assert resp.status_code == 404


async def test_requests_are_counted_per_route_template(api_client, stub_service, recording_logger) -> None:
    await api_client.get("/api/transaction/GetLast12MonthBalances/U1")
    await api_client.get("/api/transaction/GetLast12MonthBalances/U2")
    await api_client.get("/api/transaction/no-such-route")

    by_route = (await api_client.get("/api/metrics")).json()["http_requests_by_route"]
    assert by_route == {
        "/api/transaction/GetLast12MonthBalances/{userId}": 2,
        "unmatched": 1,
    }
