import re
from typing import Mapping, Optional, Sequence

from awardbot.types import AwardQuery
from awardbot.utils.dates import parse_iso_date


# e.g., NYC-YYZ 2025-12-15 max=30000
QUERY_PATTERN = re.compile(
    r"^\s*(?P<orig>[A-Z]{3})-(?P<dest>[A-Z]{3})\s+(?P<date>\d{4}-\d{2}-\d{2})(?:\s+MAX\s*=\s*(?P<max>\d+))?\s*$",
    re.IGNORECASE,
)

USAGE_MESSAGE = "Format: NYC-YYZ 2025-12-15 max=30000"


class ParseError(ValueError):
    def __init__(self, reason: str = "malformed-query", text: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.text = text


def expand_origin(code: str, city_airports: Mapping[str, Sequence[str]]) -> tuple[str, ...]:
    """Metro code -> its airports (deduped, order kept); plain airport codes map to themselves."""
    airports = city_airports.get(code) or (code,)
    return tuple(dict.fromkeys(a.upper() for a in airports))


def parse_award_query(text: str, city_airports: Mapping[str, Sequence[str]]) -> AwardQuery:
    m = QUERY_PATTERN.match(text or "")
    if not m:
        raise ParseError(text=text)

    dep = parse_iso_date(m.group("date"))
    if dep is None:
        raise ParseError(text=text)

    ceiling = int(m.group("max")) if m.group("max") else None
    if ceiling == 0:
        raise ParseError(text=text)

    orig = m.group("orig").upper()
    return AwardQuery(
        origin=orig,
        origin_candidates=expand_origin(orig, city_airports),
        destination=m.group("dest").upper(),
        departure_date=dep,
        point_ceiling=ceiling,
    )
