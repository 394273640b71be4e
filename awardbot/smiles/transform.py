import math
from typing import Any, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from awardbot.obs.logger import log_event
from awardbot.types import FlightAward, RawPayload
from awardbot.utils.dates import clock_time


def _positive_int(value: Any) -> Optional[int]:
    # bool is an int subclass; a True here is never a point count
    if isinstance(value, bool):
        return None
    try:
        n = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return n if n > 0 else None


def _cents_to_major(value: Any) -> float:
    try:
        cents = float(value or 0)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(cents):
        return 0.0
    return max(cents, 0.0) / 100


# The flight-search API only ever omits the carrier on GOL-operated flights
SHAPE_DEFAULT_AIRLINES = {"recommended_fare": "GOL"}


def _dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def is_business_fare(fare: dict) -> bool:
    service_class = fare.get("classOfService")
    return (
        fare.get("cabin") == "BUSINESS"
        or (isinstance(service_class, str) and "J" in service_class.upper())
        or fare.get("cabinType") == "BUSINESS"
    )


def _from_fare_options(seg: dict) -> Tuple[Optional[int], Optional[int], float]:
    econ, bus, taxes = None, None, 0.0
    fares = seg.get("fareOptions")
    for fare in fares if isinstance(fares, list) else []:
        fare = _dict(fare)
        points = _positive_int(fare.get("miles") or fare.get("points"))
        # later fares of the same cabin win; taxes follow the last fare read
        if is_business_fare(fare):
            bus = points
        else:
            econ = points
        taxes = _cents_to_major(fare.get("money") or fare.get("taxes"))
    return econ, bus, taxes


def _from_recommended_fare(flight: dict) -> Tuple[Optional[int], Optional[int], float]:
    fare = _dict(flight.get("recommendedFare"))
    econ = _positive_int(_dict(fare.get("economy")).get("miles"))
    bus = _positive_int(_dict(fare.get("business")).get("miles"))
    return econ, bus, _cents_to_major(fare.get("taxes"))


def normalize(payload: RawPayload, default_airline: str = "Unknown") -> List[FlightAward]:
    """
    Map one source-native entry to canonical awards. Returns [] for entries
    without any award space or that don't look like a flight at all.
    """
    data = payload.data
    if payload.shape == "recommended_fare":
        if not data.get("recommendedFare"):
            return []
        econ, bus, taxes = _from_recommended_fare(data)
    else:
        econ, bus, taxes = _from_fare_options(data)

    if econ is None and bus is None:
        return []

    dep = _dict(data.get("departure"))
    arr = _dict(data.get("arrival"))
    airline = data.get("airlineName")
    fallback = SHAPE_DEFAULT_AIRLINES.get(payload.shape, default_airline)
    try:
        award = FlightAward(
            airline=airline if isinstance(airline, str) and airline.strip() else fallback,
            origin_code=str(dep.get("airportCode") or ""),
            dest_code=str(arr.get("airportCode") or ""),
            departure_time=clock_time(dep.get("time")),
            arrival_time=clock_time(arr.get("time")),
            departure_date=str(dep.get("date") or ""),
            economy_points=econ,
            business_points=bus,
            taxes_local=taxes,
        )
    except ValidationError as e:
        log_event("normalize_skipped", level="WARNING", source=payload.source, error=str(e))
        return []
    return [award]


def normalize_all(payloads: Iterable[RawPayload], default_airline: str = "Unknown") -> List[FlightAward]:
    out: List[FlightAward] = []
    for p in payloads:
        out.extend(normalize(p, default_airline))
    return out
