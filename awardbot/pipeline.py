import time
from typing import List

from awardbot.config import PipelineConfig
from awardbot.formatters.whatsapp import ERROR_MESSAGE, format_awards
from awardbot.obs.context import route_var
from awardbot.obs.logger import log_event
from awardbot.obs.metrics import inc_counter, record_timing
from awardbot.parse.award_query import USAGE_MESSAGE, ParseError, parse_award_query
from awardbot.rank.grouper import group_awards
from awardbot.search.aggregator import aggregate
from awardbot.smiles.source import AwardSource
from awardbot.types import AwardGroup, AwardQuery


class AwardPipeline:
    """Parsed command in, reply text out. Holds no per-request state."""

    def __init__(self, config: PipelineConfig, source: AwardSource):
        self.config = config
        self.source = source

    def parse(self, text: str) -> AwardQuery:
        return parse_award_query(text.strip().upper(), self.config.city_airports)

    async def search(self, query: AwardQuery) -> List[AwardGroup]:
        awards = await aggregate(query, self.source, self.config.default_airline)
        groups = group_awards(awards, query.point_ceiling)
        log_event(
            "awards_grouped",
            origins=list(query.origin_candidates),
            destination=query.destination,
            awards_found=len(awards),
            awards_shown=sum(len(g.awards) for g in groups),
        )
        return groups

    async def handle(self, text: str) -> str:
        """Never raises: bad input gets the usage hint, anything unexpected a generic apology."""
        start = time.monotonic()
        try:
            query = self.parse(text or "")
        except ParseError as e:
            inc_counter("queries_total", {"outcome": "malformed"})
            log_event("query_rejected", reason=e.reason, message_length=len(text or ""))
            return USAGE_MESSAGE

        route_var.set(f"{query.origin}-{query.destination} {query.departure_date.isoformat()}")
        try:
            groups = await self.search(query)
            reply = format_awards(groups, self.config)
        except Exception as e:
            inc_counter("queries_total", {"outcome": "error"})
            log_event("pipeline_error", level="ERROR", error=f"{type(e).__name__}: {e}")
            return ERROR_MESSAGE

        inc_counter("queries_total", {"outcome": "ok" if groups else "empty"})
        record_timing("query_latency_ms", (time.monotonic() - start) * 1000.0, {"source": self.source.name})
        return reply
