"""Browser-session acquisition: let the Smiles results page run its own search and capture the JSON."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from playwright.async_api import Response, TimeoutError as PlaywrightTimeoutError, async_playwright

from awardbot.obs.logger import log_event
from awardbot.smiles.source import AcquisitionFailure, AwardSource
from awardbot.types import RawPayload

SEARCH_API_MARKERS = ("/v1/airlines/search", "/api/v2/search")
VIEWPORT = {"width": 1366, "height": 900}


def is_search_response(response: Response) -> bool:
    return response.request.method in ("GET", "POST") and any(m in response.url for m in SEARCH_API_MARKERS)


def payloads_from_json(data: Dict[str, Any], source: str) -> List[RawPayload]:
    """The page may hit either search API; read whichever list the body carries."""
    if isinstance(data.get("requestedFlightSegmentList"), list):
        return [RawPayload(source=source, shape="fare_options", data=s)
                for s in data["requestedFlightSegmentList"] if isinstance(s, dict)]
    if isinstance(data.get("flights"), list):
        return [RawPayload(source=source, shape="recommended_fare", data=f)
                for f in data["flights"] if isinstance(f, dict)]
    raise AcquisitionFailure("search response carried no flight list")


class SmilesBrowserSource(AwardSource):
    name = "smiles_browser"

    def __init__(self, results_url: str, headless: bool = True, timeout_seconds: float = 25.0):
        super().__init__(timeout_seconds=timeout_seconds)
        self.results_url = results_url
        self.headless = headless

    def build_results_url(self, origin: str, destination: str, date_iso: str) -> str:
        # The results page expects the departure day as epoch milliseconds (noon UTC)
        day = datetime.fromisoformat(date_iso).replace(hour=12, tzinfo=timezone.utc)
        params = {
            "adults": 1,
            "cabin": "ALL",
            "children": 0,
            "departureDate": int(day.timestamp() * 1000),
            "infants": 0,
            "isFlexibleDateChecked": "false",
            "tripType": 2,
            "originAirport": origin,
            "originAirportIsAny": "false",
            "destinationAirport": destination,
            "destinAirportIsAny": "false",
            "forceCongener": "false",
        }
        return f"{self.results_url}?{urlencode(params)}"

    async def _fetch(self, origin: str, destination: str, date_iso: str) -> List[RawPayload]:
        url = self.build_results_url(origin, destination, date_iso)
        timeout_ms = self.timeout_seconds * 1000
        async with async_playwright() as pw:
            browser = await pw.chromium.launch(headless=self.headless)
            try:
                context = await browser.new_context(viewport=VIEWPORT, locale="pt-BR")
                context.set_default_timeout(timeout_ms)
                page = await context.new_page()
                try:
                    async with page.expect_response(is_search_response, timeout=timeout_ms) as info:
                        await page.goto(url, wait_until="domcontentloaded")
                    response: Response = await info.value
                except PlaywrightTimeoutError as e:
                    raise AcquisitionFailure("results page never issued a search request") from e
                if not response.ok:
                    raise AcquisitionFailure(f"Smiles API error {response.status}")
                data: Optional[Dict[str, Any]] = await response.json()
                if not isinstance(data, dict):
                    raise AcquisitionFailure("search response was not a JSON object")
                log_event("browser_search_captured", source=self.name, url=response.url)
                return payloads_from_json(data, self.name)
            finally:
                await browser.close()
