"""
Acquisition capability for Smiles award data.

Every strategy (direct API call, browser session) implements ``_fetch``;
callers only ever use ``fetch_offers``, which applies the per-acquisition
timeout and turns any failure into an empty result.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from typing import List

from awardbot.obs.logger import log_event
from awardbot.obs.metrics import inc_counter, record_timing
from awardbot.types import RawPayload


class AcquisitionFailure(RuntimeError):
    """Upstream could not be reached or answered with something unusable."""


class AwardSource(ABC):
    name: str = "base"

    def __init__(self, timeout_seconds: float = 25.0):
        self.timeout_seconds = timeout_seconds

    @abstractmethod
    async def _fetch(self, origin: str, destination: str, date_iso: str) -> List[RawPayload]:
        ...

    async def fetch_offers(self, origin: str, destination: str, date_iso: str) -> List[RawPayload]:
        """Never raises. Failures are logged here and yield []."""
        start = time.monotonic()
        outcome = "ok"
        try:
            payloads = await asyncio.wait_for(
                self._fetch(origin, destination, date_iso),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            outcome = "timeout"
            payloads = []
            log_event(
                "source_failed",
                level="WARNING",
                source=self.name,
                origin=origin,
                destination=destination,
                date=date_iso,
                error=f"timed out after {self.timeout_seconds}s",
            )
        except Exception as e:
            outcome = "error"
            payloads = []
            log_event(
                "source_failed",
                level="WARNING",
                source=self.name,
                origin=origin,
                destination=destination,
                date=date_iso,
                error=f"{type(e).__name__}: {e}",
            )
        elapsed_ms = (time.monotonic() - start) * 1000.0
        record_timing("source_fetch_ms", elapsed_ms, {"source": self.name})
        inc_counter("source_fetch_total", {"source": self.name, "outcome": outcome})
        if outcome == "ok":
            log_event(
                "source_fetched",
                source=self.name,
                origin=origin,
                destination=destination,
                date=date_iso,
                payloads=len(payloads),
                ms_total=round(elapsed_ms, 2),
            )
        return payloads


def build_source(name: str, settings) -> AwardSource:
    """Pick the acquisition strategy named in configuration."""
    timeout = settings.ACQUISITION_TIMEOUT_SECONDS
    if name == "api":
        from awardbot.smiles.client import SmilesSearchSource
        return SmilesSearchSource(url=settings.SMILES_SEARCH_URL, timeout_seconds=timeout)
    if name == "flight_api":
        from awardbot.smiles.client import SmilesFlightSearchSource
        return SmilesFlightSearchSource(url=settings.SMILES_FLIGHT_SEARCH_URL, timeout_seconds=timeout)
    if name == "browser":
        from awardbot.smiles.browser import SmilesBrowserSource
        return SmilesBrowserSource(
            results_url=settings.SMILES_RESULTS_PAGE_URL,
            headless=settings.BROWSER_HEADLESS,
            timeout_seconds=timeout,
        )
    raise ValueError(f"Unknown award source: {name}")
