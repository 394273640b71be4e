import os
import sys
import asyncio
import inspect

import pytest

# Ensure project root is on sys.path so `import awardbot` and `import main` work in tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from awardbot.config import PipelineConfig  # noqa: E402
from awardbot.smiles.source import AwardSource  # noqa: E402
from awardbot.types import RawPayload  # noqa: E402


def pytest_pyfunc_call(pyfuncitem):
    """Allow running async tests without pytest-asyncio.

    If the test function is a coroutine, run it in a fresh event loop.
    """
    testfunction = pyfuncitem.obj
    if inspect.iscoroutinefunction(testfunction):
        funcargs = pyfuncitem.funcargs
        sig = inspect.signature(testfunction)
        # Filter only the parameters that the test function expects
        allowed = {name: funcargs[name] for name in sig.parameters.keys() if name in funcargs}
        asyncio.run(testfunction(**allowed))
        return True
    return None


class FakeSource(AwardSource):
    """Canned payloads per origin; origins listed in `failing` raise like a dead upstream."""
    name = "fake"

    def __init__(self, payloads_by_origin=None, failing=(), delays=None, timeout_seconds=5.0):
        super().__init__(timeout_seconds=timeout_seconds)
        self.payloads_by_origin = payloads_by_origin or {}
        self.failing = set(failing)
        self.delays = delays or {}
        self.calls = []

    async def _fetch(self, origin, destination, date_iso):
        self.calls.append((origin, destination, date_iso))
        if origin in self.delays:
            await asyncio.sleep(self.delays[origin])
        if origin in self.failing:
            raise ConnectionError(f"upstream down for {origin}")
        return list(self.payloads_by_origin.get(origin, []))


def segment(origin="JFK", dest="GRU", dep="08:30:00", arr="20:15:00", airline="GOL", fares=()):
    """A 'fare_options' payload as the POST search answers it."""
    return RawPayload(
        source="fake",
        shape="fare_options",
        data={
            "airlineName": airline,
            "departure": {"airportCode": origin, "time": dep, "date": "2025-12-20"},
            "arrival": {"airportCode": dest, "time": arr, "date": "2025-12-20"},
            "fareOptions": list(fares),
        },
    )


@pytest.fixture
def config():
    return PipelineConfig(currency_rate=5.0, tax_decimals=0, acquisition_timeout_seconds=5.0)


@pytest.fixture(autouse=True)
def _fresh_metrics():
    from awardbot.obs.metrics import reset_metrics
    reset_metrics()
    yield
