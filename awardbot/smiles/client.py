import httpx
from typing import Any, Dict, List, Optional

from awardbot.smiles.source import AcquisitionFailure, AwardSource
from awardbot.types import RawPayload

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)


class _SmilesHttpSource(AwardSource):
    def __init__(self, url: str, timeout_seconds: float = 25.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(timeout_seconds=timeout_seconds)
        self.url = url
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        # One client per acquisition; closed by the caller's `async with`
        return httpx.AsyncClient(
            http2=self._transport is None,
            transport=self._transport,
            timeout=httpx.Timeout(connect=5.0, read=self.timeout_seconds,
                                  write=10.0, pool=5.0),
        )

    @staticmethod
    def _json(r: httpx.Response) -> Dict[str, Any]:
        if r.status_code != 200:
            raise AcquisitionFailure(f"Smiles API error {r.status_code}")
        try:
            data = r.json()
        except ValueError as e:
            raise AcquisitionFailure(f"Smiles API returned non-JSON body: {e}") from e
        if not isinstance(data, dict):
            raise AcquisitionFailure("Smiles API returned unexpected JSON")
        return data


class SmilesSearchSource(_SmilesHttpSource):
    """POST search used by the Smiles web front-end; answers with fare options per segment."""
    name = "smiles_api"

    def _build_body(self, origin: str, destination: str, date_iso: str) -> Dict[str, Any]:
        return {
            "adults": 1,
            "cabinType": "ALL",
            "children": 0,
            "departureDate": date_iso,
            "destinationAirportCode": destination,
            "infants": 0,
            "isFlexibleDate": False,
            "originAirportCode": origin,
            "tripType": "OW",
            "currencyCode": "BRL",
        }

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Origin": "https://www.smiles.com.br",
            "Referer": "https://www.smiles.com.br/emissao-passagem",
            "User-Agent": USER_AGENT,
            "x-app": "mfe",
        }

    async def _fetch(self, origin: str, destination: str, date_iso: str) -> List[RawPayload]:
        async with self._client() as http:
            r = await http.post(
                self.url,
                json=self._build_body(origin, destination, date_iso),
                headers=self._headers(),
            )
            data = self._json(r)
        segments = data.get("requestedFlightSegmentList") or []
        return [
            RawPayload(source=self.name, shape="fare_options", data=seg)
            for seg in segments
            if isinstance(seg, dict)
        ]


class SmilesFlightSearchSource(_SmilesHttpSource):
    """GET flight-search API; answers with one recommended fare per flight."""
    name = "smiles_flight_api"

    def _build_params(self, origin: str, destination: str, date_iso: str) -> Dict[str, str]:
        return {
            "cabin": "ALL",
            "originAirportCode": origin,
            "destinationAirportCode": destination,
            "departureDate": date_iso,
            "adults": "1",
            "children": "0",
            "infants": "0",
            "forceCongener": "false",
        }

    def _headers(self) -> Dict[str, str]:
        return {
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
            "Referer": "https://www.smiles.com.br/",
        }

    async def _fetch(self, origin: str, destination: str, date_iso: str) -> List[RawPayload]:
        async with self._client() as http:
            r = await http.get(
                self.url,
                params=self._build_params(origin, destination, date_iso),
                headers=self._headers(),
            )
            data = self._json(r)
        flights = data.get("flights") or []
        return [
            RawPayload(source=self.name, shape="recommended_fare", data=f)
            for f in flights
            if isinstance(f, dict)
        ]
