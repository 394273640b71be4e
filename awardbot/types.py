from datetime import date
from typing import Any, Dict, List, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, model_validator


class AwardQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    origin: str                             # as typed, e.g. "NYC"
    origin_candidates: Tuple[str, ...]      # airports to search, in order
    destination: str
    departure_date: date
    point_ceiling: Optional[int] = Field(None, gt=0)  # None = unbounded


class RawPayload(BaseModel):
    """One source-native offer entry; ``shape`` tells the normalizer how to read ``data``."""
    model_config = ConfigDict(frozen=True)

    source: str
    shape: Literal["fare_options", "recommended_fare"]
    data: Dict[str, Any]


class FlightAward(BaseModel):
    model_config = ConfigDict(frozen=True)

    airline: str
    origin_code: str
    dest_code: str
    departure_time: str = ""   # 'HH:MM', local
    arrival_time: str = ""
    departure_date: str = ""   # ISO date as reported by the source
    economy_points: Optional[int] = Field(None, gt=0)
    business_points: Optional[int] = Field(None, gt=0)
    taxes_local: float = Field(0.0, ge=0)  # major units (BRL)

    @model_validator(mode="after")
    def _has_some_award(self) -> "FlightAward":
        if self.economy_points is None and self.business_points is None:
            raise ValueError("award needs economy_points or business_points")
        return self


Category = Literal["both", "economy_only", "business_only"]

CATEGORY_LABELS: Dict[str, str] = {
    "both": "Both Economy & Business",
    "economy_only": "Economy only",
    "business_only": "Business only",
}


class CarrierGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    origin_code: str
    airline: str
    awards: Tuple[FlightAward, ...]


class AwardGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: Category
    carrier_groups: Tuple[CarrierGroup, ...]

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self.category]

    @property
    def awards(self) -> List[FlightAward]:
        return [a for g in self.carrier_groups for a in g.awards]
