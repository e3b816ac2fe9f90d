"""Rate table lookup and bracket resolution - core tiered-rate logic"""

import logging
from bisect import bisect_left
from decimal import Decimal
from typing import List, Optional, Sequence

from affordability_gateway.domain.affordability import cap_to_income, cap_to_price_ceiling
from affordability_gateway.domain.exceptions import NonConvergenceError
from affordability_gateway.domain.models import (
    AmortizationSystem,
    BracketResolution,
    LendingPolicy,
    RateBracket,
)
from affordability_gateway.domain.payments import (
    annual_to_monthly_rate,
    installments,
    principal_from_installment,
    select_system,
)

logger = logging.getLogger(__name__)


class RateTable:
    """
    Ordered rate brackets with inclusive-upper-bound lookups.

    Brackets must be ascending by income ceiling, price ceiling and rate, so a
    higher index is never more favorable to the borrower. A value above every
    ceiling falls into the last (counter-rate) bracket.
    """

    def __init__(self, brackets: Sequence[RateBracket]):
        if not brackets:
            raise ValueError("Rate table needs at least one bracket")

        self.brackets = tuple(brackets)
        self._income_ceilings = [b.income_ceiling for b in self.brackets]
        self._price_ceilings = [b.price_ceiling for b in self.brackets]

        columns = {
            "income_ceiling": self._income_ceilings,
            "price_ceiling": self._price_ceilings,
            "annual_rate": [b.annual_rate for b in self.brackets],
        }
        for name, values in columns.items():
            if any(later < earlier for earlier, later in zip(values, values[1:])):
                raise ValueError(f"Rate brackets must be ordered ascending by {name}")

    def __len__(self) -> int:
        return len(self.brackets)

    def __getitem__(self, index: int) -> RateBracket:
        return self.brackets[index]

    @property
    def last_index(self) -> int:
        return len(self.brackets) - 1

    def index_for_price(self, price: Decimal) -> int:
        """First bracket whose price ceiling is >= price"""
        return self._lookup(self._price_ceilings, price)

    def index_for_income(self, income: Decimal) -> int:
        """First bracket whose income ceiling is >= income"""
        return self._lookup(self._income_ceilings, income)

    def _lookup(self, ceilings: List[Decimal], value: Decimal) -> int:
        return min(bisect_left(ceilings, value), self.last_index)


def build_resolution(
    table: RateTable,
    index: int,
    financed_amount: Decimal,
    property_value: Decimal,
    months: int,
    policy: LendingPolicy,
    system: Optional[AmortizationSystem] = None,
) -> BracketResolution:
    """Price a loan at the rate of the bracket at index"""
    bracket = table[index]
    monthly_rate = annual_to_monthly_rate(bracket.annual_rate)
    chosen = system or select_system(bracket.annual_rate, policy.sac_rate_threshold)

    return BracketResolution(
        index=index,
        bracket=bracket,
        monthly_rate=monthly_rate,
        system=chosen,
        financed_amount=financed_amount,
        property_value=property_value,
        installments=installments(financed_amount, monthly_rate, months, chosen),
    )


def resolve_price_bracket(
    table: RateTable,
    price: Decimal,
    months: int,
    policy: LendingPolicy,
    system: Optional[AmortizationSystem] = None,
) -> BracketResolution:
    """
    Find the bracket consistent with a known property price.

    The price fixes a floor bracket, but the installment at that bracket's rate
    implies an income that may belong to a dearer bracket, whose rate raises
    the installment again. Iterate idx = max(idx_price, idx_income) until it
    stops moving.

    Since the index never decreases, the loop settles within len(table)
    iterations; a smaller budget raises NonConvergenceError instead of
    returning an unsettled bracket.
    """
    financed = price * policy.loan_to_value
    price_index = table.index_for_price(price)
    current = price_index

    for iteration in range(1, policy.max_iterations + 1):
        resolution = build_resolution(table, current, financed, price, months, policy, system)
        required_income = resolution.installments.first / policy.affordability_ratio
        candidate = max(price_index, table.index_for_income(required_income))

        logger.debug(
            "Price bracket iteration",
            extra={"iteration": iteration, "bracket_index": current, "candidate_index": candidate},
        )

        if candidate == current:
            return resolution
        current = candidate

    raise NonConvergenceError(
        f"Bracket for price {price} did not settle within {policy.max_iterations} iterations"
    )


def _income_candidate(
    table: RateTable,
    index: int,
    max_installment: Decimal,
    months: int,
    policy: LendingPolicy,
    system: Optional[AmortizationSystem],
) -> BracketResolution:
    """Loan that spends the whole installment ceiling at the bracket's rate"""
    bracket = table[index]
    monthly_rate = annual_to_monthly_rate(bracket.annual_rate)
    chosen = system or select_system(bracket.annual_rate, policy.sac_rate_threshold)
    financed = principal_from_installment(max_installment, monthly_rate, months, chosen)

    return build_resolution(
        table, index, financed, financed / policy.loan_to_value, months, policy, chosen
    )


def resolve_income_bracket(
    table: RateTable,
    income: Decimal,
    months: int,
    policy: LendingPolicy,
    system: Optional[AmortizationSystem] = None,
) -> BracketResolution:
    """
    Purchasing power: the dearest property an income can finance.

    Flow:
    1. Select the bracket by income and spend income * affordability_ratio
    2. Derive the property price from the financed amount (financed / LTV)
    3. While the price overflows the bracket's price ceiling, step to the next
       bracket (higher rate) and recompute
    4. If the last bracket still overflows, truncate to its ceiling (was_capped)
    """
    max_installment = income * policy.affordability_ratio
    candidate = _income_candidate(table, table.index_for_income(income), max_installment, months, policy, system)

    while candidate.property_value > candidate.bracket.price_ceiling:
        if candidate.index == table.last_index:
            return cap_to_price_ceiling(candidate, months, policy)

        logger.debug(
            "Income bracket escalated",
            extra={"from_index": candidate.index, "to_index": candidate.index + 1},
        )
        candidate = _income_candidate(table, candidate.index + 1, max_installment, months, policy, system)

    return candidate


def resolve_combined_bracket(
    table: RateTable,
    price: Decimal,
    income: Decimal,
    months: int,
    policy: LendingPolicy,
    system: Optional[AmortizationSystem] = None,
) -> BracketResolution:
    """
    Viability of a given property for a given income.

    The more restrictive of the price and income brackets governs the rate.
    The property value is kept; the loan shrinks when its installment exceeds
    the income ceiling.
    """
    index = max(table.index_for_price(price), table.index_for_income(income))
    resolution = build_resolution(table, index, price * policy.loan_to_value, price, months, policy, system)
    return cap_to_income(resolution, income, months, policy)
