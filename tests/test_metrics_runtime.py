from fastapi.testclient import TestClient


def test_metrics_capture_request_and_histogram():
    from main import app
    client = TestClient(app)

    r = client.get("/health")
    assert r.status_code == 200

    m = client.get("/metrics")
    assert m.status_code == 200
    data = m.json()

    counters = data.get("counters", [])
    assert any(
        c.get("name") == "requests_total" and c.get("labels", {}).get("route") == "/health" and c.get("labels", {}).get("status") == "200"
        for c in counters
    )

    hists = data.get("histograms", [])
    assert any(
        h.get("name") == "request_latency_ms" and h.get("labels", {}).get("route") == "/health" and isinstance(h.get("counts"), list)
        for h in hists
    )


async def test_source_fetch_metrics_recorded():
    from awardbot.obs.metrics import get_counter, get_metrics_snapshot
    from conftest import FakeSource

    source = FakeSource(failing={"LGA"})
    await source.fetch_offers("JFK", "GRU", "2025-12-20")
    await source.fetch_offers("LGA", "GRU", "2025-12-20")

    assert get_counter("source_fetch_total", {"source": "fake", "outcome": "ok"}) == 1
    assert get_counter("source_fetch_total", {"source": "fake", "outcome": "error"}) == 1
    hists = get_metrics_snapshot()["histograms"]
    assert any(h["name"] == "source_fetch_ms" and sum(h["counts"]) == 2 for h in hists)


def test_logger_redacts_phone(capsys):
    from awardbot.obs.logger import log_event
    log_event("step", user_from="whatsapp:+441234567890", step="unit-test")
    captured = capsys.readouterr().out.strip()
    assert "***7890" in captured
