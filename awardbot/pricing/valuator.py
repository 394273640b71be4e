from typing import Sequence

from awardbot.config import DEFAULT_RATE_TIERS, RateTier


def rate_for(points: int, tiers: Sequence[RateTier] = DEFAULT_RATE_TIERS) -> float:
    for tier in tiers:
        if tier.max_points is None or points <= tier.max_points:
            return tier.rate
    return tiers[-1].rate


def estimate_value(points: int, tiers: Sequence[RateTier] = DEFAULT_RATE_TIERS) -> float:
    """
    USD value of a point count. The whole count is priced at the rate of the
    tier it falls in (not bracket by bracket): 40000 -> 40000 * 0.0045 = 180.00.
    """
    return round(points * rate_for(points, tiers), 2)


def convert_to_reference(amount_local: float, rate: float, decimals: int = 2) -> float:
    """Local currency (BRL) -> USD at a fixed configured rate."""
    return round(amount_local / rate, decimals)
