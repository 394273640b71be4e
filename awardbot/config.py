# awardbot/config.py
from typing import Dict, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Metro codes users type instead of a single airport
DEFAULT_CITY_AIRPORTS: Dict[str, Tuple[str, ...]] = {
    "NYC": ("JFK", "LGA", "EWR"),
    "SAO": ("GRU", "CGH", "VCP"),
    "RIO": ("GIG", "SDU"),
    "LON": ("LHR", "LGW", "LCY", "STN", "LTN"),
    "PAR": ("CDG", "ORY"),
    "WAS": ("IAD", "DCA", "BWI"),
    "CHI": ("ORD", "MDW"),
    "YTO": ("YYZ", "YTZ"),
    "MIL": ("MXP", "LIN"),
    "TYO": ("HND", "NRT"),
}


class RateTier(BaseModel):
    """Flat cents-per-point rate for point counts up to ``max_points`` (None = no cap)."""
    model_config = ConfigDict(frozen=True)

    max_points: Optional[int] = None
    rate: float


DEFAULT_RATE_TIERS: Tuple[RateTier, ...] = (
    RateTier(max_points=20000, rate=0.0050),
    RateTier(max_points=40000, rate=0.0045),
    RateTier(max_points=60000, rate=0.0043),
    RateTier(max_points=None, rate=0.0040),
)


class PipelineConfig(BaseModel):
    """Everything the award pipeline needs, passed in explicitly."""
    model_config = ConfigDict(frozen=True)

    city_airports: Dict[str, Tuple[str, ...]] = Field(default_factory=lambda: dict(DEFAULT_CITY_AIRPORTS))
    rate_tiers: Tuple[RateTier, ...] = DEFAULT_RATE_TIERS
    currency_rate: float = Field(5.28, gt=0)  # local currency units per USD
    tax_decimals: Literal[0, 2] = 0
    acquisition_timeout_seconds: float = Field(25.0, gt=0)
    default_airline: str = "Unknown"


class Settings(BaseSettings):
    # App
    APP_ENV: Literal["dev", "prod", "staging"] = "dev"

    # Award search
    AWARD_SOURCE: Literal["api", "flight_api", "browser"] = "api"
    BRL_TO_USD_RATE: float = 5.28
    TAX_DECIMALS: Literal[0, 2] = 0
    ACQUISITION_TIMEOUT_SECONDS: float = 25.0
    DEFAULT_AIRLINE: str = "Unknown"

    # Smiles endpoints
    SMILES_SEARCH_URL: str = "https://www.smiles.com.br/mfe/api/v2/search"
    SMILES_FLIGHT_SEARCH_URL: str = "https://api-air-flightsearch-green.smiles.com.br/v1/airlines/search"
    SMILES_RESULTS_PAGE_URL: str = "https://www.smiles.com.br/mfe/emissao-passagem/"
    BROWSER_HEADLESS: bool = True

    # Reply delivery: "inline" answers in the webhook TwiML, "async" sends via Twilio REST
    REPLY_MODE: Literal["inline", "async"] = "inline"

    # Twilio (only needed for REPLY_MODE=async)
    TWILIO_ACCOUNT_SID: Optional[str] = None
    TWILIO_AUTH_TOKEN: Optional[str] = None
    TWILIO_WHATSAPP_NUMBER: Optional[str] = None

    # Redis (optional, shares the webhook rate-limit window across workers)
    REDIS_URL: Optional[str] = None
    RATE_LIMIT_MAX_REQUESTS: int = 60
    RATE_LIMIT_WINDOW_SECONDS: int = 60

    # read .env and ignore any extra keys so this doesn't break again
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def pipeline_config(self) -> PipelineConfig:
        return PipelineConfig(
            currency_rate=self.BRL_TO_USD_RATE,
            tax_decimals=self.TAX_DECIMALS,
            acquisition_timeout_seconds=self.ACQUISITION_TIMEOUT_SECONDS,
            default_airline=self.DEFAULT_AIRLINE,
        )

settings = Settings()
