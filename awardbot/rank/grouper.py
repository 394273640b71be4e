import math
from typing import Dict, List, Optional, Sequence, Tuple

from awardbot.types import AwardGroup, CarrierGroup, Category, FlightAward

CATEGORY_ORDER: Tuple[Category, ...] = ("both", "economy_only", "business_only")


def within_ceiling(award: FlightAward, point_ceiling: Optional[int]) -> bool:
    # Either cabin in budget keeps the award (both cabins still shown)
    if point_ceiling is None:
        return True
    econ = award.economy_points or math.inf
    bus = award.business_points or math.inf
    return min(econ, bus) <= point_ceiling


def category_of(award: FlightAward) -> Category:
    if award.economy_points and award.business_points:
        return "both"
    if award.economy_points:
        return "economy_only"
    return "business_only"


def filter_awards(awards: Sequence[FlightAward], point_ceiling: Optional[int]) -> List[FlightAward]:
    return [a for a in awards if within_ceiling(a, point_ceiling)]


def group_awards(awards: Sequence[FlightAward], point_ceiling: Optional[int] = None) -> List[AwardGroup]:
    """
    Filter by ceiling, split into cabin categories, then sub-group by
    (origin, airline) in first-seen order.

    Departure order is a plain string sort on 'HH:MM' (stable for ties), so
    an empty time sorts first and there is no notion of crossing midnight.
    """
    by_category: Dict[Category, List[FlightAward]] = {c: [] for c in CATEGORY_ORDER}
    for award in filter_awards(awards, point_ceiling):
        by_category[category_of(award)].append(award)

    groups: List[AwardGroup] = []
    for category in CATEGORY_ORDER:
        members = sorted(by_category[category], key=lambda a: a.departure_time)
        if not members:
            continue
        buckets: Dict[Tuple[str, str], List[FlightAward]] = {}
        for award in members:
            buckets.setdefault((award.origin_code, award.airline), []).append(award)
        groups.append(AwardGroup(
            category=category,
            carrier_groups=tuple(
                CarrierGroup(origin_code=origin, airline=airline, awards=tuple(items))
                for (origin, airline), items in buckets.items()
            ),
        ))
    return groups
