from typing import List, Optional, Sequence

from awardbot.config import PipelineConfig
from awardbot.pricing.valuator import convert_to_reference, estimate_value
from awardbot.types import AwardGroup, FlightAward
from awardbot.utils.dates import to_12_hour

NO_RESULTS_MESSAGE = "No award space found under your max points."
ERROR_MESSAGE = "Sorry, something went wrong. Try again later."
SEARCHING_MESSAGE = "Searching award space, results coming shortly..."


def _pts(points: Optional[int]) -> str:
    return str(points) if points else "-"


def _taxes(award: FlightAward, config: PipelineConfig) -> str:
    if not award.taxes_local:
        return "-"
    usd = convert_to_reference(award.taxes_local, config.currency_rate, config.tax_decimals)
    return f"{usd:.{config.tax_decimals}f}"


def format_award(award: FlightAward, config: PipelineConfig) -> List[str]:
    lowest = min(p for p in (award.economy_points, award.business_points) if p)
    lines = [
        f"{award.origin_code} {to_12_hour(award.departure_time)} - "
        f"{award.dest_code} {to_12_hour(award.arrival_time)}",
        f"  Economy pts: {_pts(award.economy_points)} | Business pts: {_pts(award.business_points)}",
        f"  1={lowest} (points)  2=${_taxes(award, config)} (USD taxes)",
    ]
    for points in (award.economy_points, award.business_points):
        if points:
            lines.append(f"    (points value est: ${estimate_value(points, config.rate_tiers):.2f})")
    return lines


def format_awards(groups: Sequence[AwardGroup], config: PipelineConfig) -> str:
    if not groups:
        return NO_RESULTS_MESSAGE

    out: List[str] = []
    for group in groups:
        out.append(f"=== {group.label} ===")
        for carrier in group.carrier_groups:
            out.append("")
            out.append(f"{carrier.airline} from {carrier.origin_code}:")
            for award in carrier.awards:
                out.extend(format_award(award, config))
        out.append("")
    return "\n".join(out) + "\n"
