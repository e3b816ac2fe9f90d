"""Configuration management using Pydantic Settings"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RateBracketSettings(BaseModel):
    """One row of the rate table. A missing ceiling means the bracket is unbounded."""

    income_ceiling: Optional[Decimal] = None
    price_ceiling: Optional[Decimal] = None
    annual_rate: Decimal = Field(..., ge=0)


class EgiScenarioSettings(BaseModel):
    """Term and rates for one equity-release scenario"""

    term_years: int = Field(..., gt=0)
    rate_up_to_cutoff: Optional[Decimal] = None  # None: not offered in the low tier
    rate_above_cutoff: Decimal = Field(..., ge=0)


class EgiSettings(BaseModel):
    """Equity-release (home equity) business rules"""

    loan_to_value: Decimal = Field(Decimal("0.60"), gt=0, le=1)
    affordability_ratio: Decimal = Field(Decimal("0.30"), gt=0, le=1)
    rate_cutoff: Decimal = Decimal("100000")
    minimum_property_value: Decimal = Decimal("50000")
    minimum_ticket: Decimal = Decimal("50000")

    quitado: EgiScenarioSettings = EgiScenarioSettings(
        term_years=20,
        rate_up_to_cutoff=Decimal("0.1539"),
        rate_above_cutoff=Decimal("0.1389"),
    )
    financiado: EgiScenarioSettings = EgiScenarioSettings(
        term_years=15,
        rate_up_to_cutoff=Decimal("0.1659"),
        rate_above_cutoff=Decimal("0.1499"),
    )
    liquidacao: EgiScenarioSettings = EgiScenarioSettings(
        term_years=15,
        rate_up_to_cutoff=None,
        rate_above_cutoff=Decimal("0.1299"),
    )


# Housing-programme brackets; the last row is the walk-in "counter rate"
DEFAULT_RATE_BRACKETS = [
    RateBracketSettings(income_ceiling=Decimal("2160"), price_ceiling=Decimal("210000"), annual_rate=Decimal("0.048548")),
    RateBracketSettings(income_ceiling=Decimal("2850"), price_ceiling=Decimal("210000"), annual_rate=Decimal("0.051162")),
    RateBracketSettings(income_ceiling=Decimal("3500"), price_ceiling=Decimal("210000"), annual_rate=Decimal("0.056408")),
    RateBracketSettings(income_ceiling=Decimal("4000"), price_ceiling=Decimal("210000"), annual_rate=Decimal("0.061678")),
    RateBracketSettings(income_ceiling=Decimal("4700"), price_ceiling=Decimal("210000"), annual_rate=Decimal("0.072290")),
    RateBracketSettings(income_ceiling=Decimal("8600"), price_ceiling=Decimal("350000"), annual_rate=Decimal("0.085722")),
    RateBracketSettings(income_ceiling=Decimal("12000"), price_ceiling=Decimal("500000"), annual_rate=Decimal("0.10")),
    RateBracketSettings(income_ceiling=None, price_ceiling=None, annual_rate=Decimal("0.1149")),
]


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Service
    service_name: str = "affordability-gateway"
    log_level: str = "INFO"

    # Financing policy
    default_term_years: Decimal = Field(Decimal("35"), gt=0)
    loan_to_value: Decimal = Field(Decimal("0.80"), gt=0, lt=1)
    affordability_ratio: Decimal = Field(Decimal("0.30"), gt=0, le=1)
    closing_cost_ratio: Decimal = Field(Decimal("0.05"), ge=0)  # transfer tax, registry and notary fees
    sac_rate_threshold: Decimal = Decimal("0.1092")
    max_iterations: int = Field(8, gt=0)

    # Rate table, JSON list in RATE_BRACKETS
    rate_brackets: List[RateBracketSettings] = Field(default_factory=lambda: list(DEFAULT_RATE_BRACKETS))

    # Equity release, nested as EGI__MINIMUM_TICKET etc.
    egi: EgiSettings = Field(default_factory=EgiSettings)


settings = Settings()
