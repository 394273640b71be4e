import asyncio
from typing import List

from awardbot.smiles.source import AwardSource
from awardbot.smiles.transform import normalize_all
from awardbot.types import AwardQuery, FlightAward


async def aggregate(query: AwardQuery, source: AwardSource, default_airline: str = "Unknown") -> List[FlightAward]:
    """
    Search every origin candidate once, concurrently, and merge the normalized
    awards in the query's origin order (not completion order).
    """
    if not query.origin_candidates:
        return []
    date_iso = query.departure_date.isoformat()
    per_origin = await asyncio.gather(*(
        source.fetch_offers(origin, query.destination, date_iso)
        for origin in query.origin_candidates
    ))
    awards: List[FlightAward] = []
    for payloads in per_origin:
        awards.extend(normalize_all(payloads, default_airline))
    return awards
