"""Dependency injection for FastAPI endpoints"""

from decimal import Decimal
from functools import lru_cache

from fastapi import Request

from affordability_gateway.config import Settings, settings
from affordability_gateway.domain.brackets import RateTable
from affordability_gateway.domain.egi import EgiScenarioSelector
from affordability_gateway.domain.models import (
    EgiPolicy,
    EgiScenario,
    LendingPolicy,
    RateBracket,
    ScenarioRule,
)
from affordability_gateway.domain.resolver import LoanResolver

UNBOUNDED = Decimal("Infinity")


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def build_resolver(config: Settings) -> LoanResolver:
    """Turn configuration into the rate table, lending policy and EGI rules"""
    rate_table = RateTable(
        [
            RateBracket(
                income_ceiling=row.income_ceiling if row.income_ceiling is not None else UNBOUNDED,
                price_ceiling=row.price_ceiling if row.price_ceiling is not None else UNBOUNDED,
                annual_rate=row.annual_rate,
            )
            for row in config.rate_brackets
        ]
    )
    policy = LendingPolicy(
        loan_to_value=config.loan_to_value,
        affordability_ratio=config.affordability_ratio,
        closing_cost_ratio=config.closing_cost_ratio,
        sac_rate_threshold=config.sac_rate_threshold,
        default_term_years=config.default_term_years,
        max_iterations=config.max_iterations,
    )

    egi = config.egi
    rules = {
        scenario: ScenarioRule(
            scenario=scenario,
            term_years=rule.term_years,
            rate_up_to_cutoff=rule.rate_up_to_cutoff,
            rate_above_cutoff=rule.rate_above_cutoff,
            minimum_ticket=egi.minimum_ticket,
        )
        for scenario, rule in (
            (EgiScenario.QUITADO, egi.quitado),
            (EgiScenario.FINANCIADO, egi.financiado),
            (EgiScenario.LIQUIDACAO, egi.liquidacao),
        )
    }
    egi_policy = EgiPolicy(
        loan_to_value=egi.loan_to_value,
        affordability_ratio=egi.affordability_ratio,
        rate_cutoff=egi.rate_cutoff,
        minimum_property_value=egi.minimum_property_value,
    )

    return LoanResolver(rate_table, policy, EgiScenarioSelector(rules, egi_policy))


@lru_cache
def get_resolver() -> LoanResolver:
    """Provide the process-wide resolver; configuration is read once"""
    return build_resolver(settings)
