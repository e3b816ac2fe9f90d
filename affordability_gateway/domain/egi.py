"""Equity-release (home equity) scenario selection"""

from decimal import Decimal
from typing import Mapping

from affordability_gateway.domain.formatting import format_egi_quote, rejected_egi_quote
from affordability_gateway.domain.models import EgiPolicy, EgiQuote, EgiScenario, ScenarioRule
from affordability_gateway.domain.payments import (
    MONTHS_PER_YEAR,
    annual_to_monthly_rate,
    constant_payment,
    present_value_from_payment,
)

ZERO = Decimal("0")


class EgiScenarioSelector:
    """
    Pick (term, rate) for a credit secured by an owned property.

    Scenario rules:
    - quitado: no existing debt
    - financiado: existing debt kept alongside the new credit
    - liquidacao: existing debt settled simultaneously by the new credit

    Each scenario has a fixed term and a rate that depends on whether the
    credit base (price * LTV) is above the rate cutoff. Rejections are returned
    as an error on a zeroed quote, never raised.
    """

    def __init__(self, rules: Mapping[EgiScenario, ScenarioRule], policy: EgiPolicy):
        missing = set(EgiScenario) - set(rules)
        if missing:
            raise ValueError(f"Missing EGI scenario rules: {sorted(s.value for s in missing)}")
        self.rules = dict(rules)
        self.policy = policy

    @staticmethod
    def classify(existing_debt: Decimal, simultaneous_settlement: bool) -> EgiScenario:
        """Settling nothing is no settlement: without debt the property counts as owned outright"""
        if existing_debt <= ZERO:
            return EgiScenario.QUITADO
        if simultaneous_settlement:
            return EgiScenario.LIQUIDACAO
        return EgiScenario.FINANCIADO

    def quote(
        self,
        price: Decimal,
        existing_debt: Decimal,
        income: Decimal,
        simultaneous_settlement: bool,
    ) -> EgiQuote:
        """
        Simulate the largest equity-release credit.

        Flow:
        1. Classify the scenario and pick the rate tier from the credit base
        2. Reject settlement in the low tier and properties below the minimum
        3. Cap the base by the owned share (price - debt) when debt is kept
        4. Final amount = min(capped base, what income * ratio can amortize)
        5. Reject settlements the credit cannot cover and amounts below the ticket
        """
        scenario = self.classify(existing_debt, simultaneous_settlement)
        rule = self.rules[scenario]

        credit_base = price * self.policy.loan_to_value
        above_cutoff = credit_base > self.policy.rate_cutoff

        # Refused in the low tier even when there is no debt to settle
        if simultaneous_settlement and not above_cutoff:
            return rejected_egi_quote(
                scenario,
                f"Simultaneous settlement is not permitted for a credit base up to "
                f"{self.policy.rate_cutoff:,.2f}.",
            )

        annual_rate = rule.rate_for(above_cutoff)
        if annual_rate is None:
            return rejected_egi_quote(
                scenario,
                f"The {scenario.value} scenario is not offered for a credit base up to "
                f"{self.policy.rate_cutoff:,.2f}.",
            )

        if price < self.policy.minimum_property_value:
            return rejected_egi_quote(
                scenario,
                f"Property value is below the minimum of {self.policy.minimum_property_value:,.2f}.",
            )

        available = credit_base
        if scenario == EgiScenario.FINANCIADO:
            # Never finance more than the borrower's own share of the property
            available = max(ZERO, min(credit_base, price - existing_debt))

        months = rule.term_years * MONTHS_PER_YEAR
        monthly_rate = annual_to_monthly_rate(annual_rate)
        max_installment = income * self.policy.affordability_ratio
        income_ceiling = present_value_from_payment(max_installment, monthly_rate, months)
        max_financeable = min(available, income_ceiling)

        if scenario == EgiScenario.LIQUIDACAO and max_financeable < existing_debt:
            return rejected_egi_quote(
                scenario,
                f"Maximum credit of {max_financeable:,.2f} does not cover the existing debt of "
                f"{existing_debt:,.2f}.",
            )

        if max_financeable < rule.minimum_ticket:
            return rejected_egi_quote(
                scenario,
                f"Maximum credit of {max_financeable:,.2f} is below the minimum of "
                f"{rule.minimum_ticket:,.2f}.",
            )

        return format_egi_quote(
            scenario=scenario,
            credit_base=credit_base,
            max_financeable=max_financeable,
            max_installment=max_installment,
            estimated_installment=constant_payment(max_financeable, monthly_rate, months),
            annual_rate=annual_rate,
            term_years=rule.term_years,
        )
