import json


def test_obs_modules_expose_api():
    import awardbot.obs.context as ctx
    import awardbot.obs.logger as log
    import awardbot.obs.metrics as met
    import awardbot.obs.middleware as mid

    assert hasattr(ctx, "request_id_var")
    assert hasattr(log, "log_event")
    assert hasattr(met, "record_timing")
    assert hasattr(met, "inc_counter")
    assert hasattr(met, "get_metrics_snapshot")
    assert hasattr(mid, "ObservabilityMiddleware")


def test_log_event_attaches_context(capsys):
    from awardbot.obs.context import clear_context, request_id_var, route_var
    from awardbot.obs.logger import log_event

    request_id_var.set("req-1")
    route_var.set("JFK-GRU 2025-12-20")
    try:
        log_event("source_failed", level="WARNING", source="smiles_api")
    finally:
        clear_context()

    payload = json.loads(capsys.readouterr().out.strip())
    assert payload["event"] == "source_failed"
    assert payload["level"] == "WARNING"
    assert payload["request_id"] == "req-1"
    assert payload["award_route"] == "JFK-GRU 2025-12-20"
    assert payload["source"] == "smiles_api"
