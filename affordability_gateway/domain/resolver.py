"""Tiered-rate loan resolver - main entry points for financing simulations"""

from dataclasses import replace
from decimal import Decimal
from typing import Optional

from affordability_gateway.domain.brackets import (
    RateTable,
    resolve_combined_bracket,
    resolve_income_bracket,
    resolve_price_bracket,
)
from affordability_gateway.domain.egi import EgiScenarioSelector
from affordability_gateway.domain.exceptions import InvalidInputError
from affordability_gateway.domain.formatting import format_loan_quote
from affordability_gateway.domain.models import (
    AmortizationSystem,
    EgiQuote,
    LendingPolicy,
    LoanQuote,
    QuoteMode,
)
from affordability_gateway.domain.payments import MONTHS_PER_YEAR, installments
from affordability_gateway.utils.decimal_utils import (
    Number,
    require_non_negative,
    require_positive,
)


class LoanResolver:
    """
    Resolve a consistent (bracket, rate, financed amount) from one known quantity.

    Every operation validates its inputs (InvalidInputError), resolves the
    governing bracket and returns a freshly built, rounded quote. The resolver
    holds only read-only configuration, so one instance serves all callers.
    """

    def __init__(self, rate_table: RateTable, policy: LendingPolicy, egi_selector: EgiScenarioSelector):
        self.rate_table = rate_table
        self.policy = policy
        self.egi_selector = egi_selector

    def _months(self, term_years: Optional[Number]) -> int:
        years = self.policy.default_term_years if term_years is None else require_positive(term_years, "term_years")
        months = int(years * MONTHS_PER_YEAR)
        if months <= 0:
            raise InvalidInputError(f"term_years must cover at least one month, got {term_years!r}")
        return months

    def resolve_by_income(
        self,
        income: Number,
        term_years: Optional[Number] = None,
        system: Optional[AmortizationSystem] = None,
    ) -> LoanQuote:
        """Purchasing power: dearest property the monthly income can finance"""
        return self._by_income(require_positive(income, "income"), term_years, system, QuoteMode.INCOME)

    def resolve_by_installment(
        self,
        installment: Number,
        term_years: Optional[Number] = None,
        system: Optional[AmortizationSystem] = None,
    ) -> LoanQuote:
        """Purchasing power from a target first installment (income = installment / ratio)"""
        income = require_positive(installment, "installment") / self.policy.affordability_ratio
        return self._by_income(income, term_years, system, QuoteMode.INSTALLMENT)

    def _by_income(
        self,
        income: Decimal,
        term_years: Optional[Number],
        system: Optional[AmortizationSystem],
        mode: QuoteMode,
    ) -> LoanQuote:
        months = self._months(term_years)
        resolution = resolve_income_bracket(self.rate_table, income, months, self.policy, system)
        return format_loan_quote(resolution, mode, self.policy)

    def resolve_by_price(
        self,
        price: Number,
        term_years: Optional[Number] = None,
        system: Optional[AmortizationSystem] = None,
    ) -> LoanQuote:
        """
        Financing for a known property price.

        Finances price * LTV at the bracket both the price and the income the
        installment requires agree on, and reports that required income.
        """
        price = require_positive(price, "price")
        months = self._months(term_years)
        resolution = resolve_price_bracket(self.rate_table, price, months, self.policy, system)
        required_income = resolution.installments.first / self.policy.affordability_ratio
        return format_loan_quote(resolution, QuoteMode.PRICE, self.policy, required_income)

    def resolve_by_price_and_income(
        self,
        price: Number,
        income: Number,
        term_years: Optional[Number] = None,
        system: Optional[AmortizationSystem] = None,
    ) -> LoanQuote:
        """
        Viability of a given property for a given income.

        The loan shrinks when its installment exceeds the income ceiling
        (was_capped). required_income is the income that would service the
        full price * LTV loan at the governing rate.
        """
        price = require_positive(price, "price")
        income = require_positive(income, "income")
        months = self._months(term_years)

        resolution = resolve_combined_bracket(self.rate_table, price, income, months, self.policy, system)
        full_loan = installments(price * self.policy.loan_to_value, resolution.monthly_rate, months, resolution.system)
        required_income = full_loan.first / self.policy.affordability_ratio
        return format_loan_quote(resolution, QuoteMode.PRICE_AND_INCOME, self.policy, required_income)

    def resolve_by_down_payment(
        self,
        income: Number,
        down_payment: Number,
        term_years: Optional[Number] = None,
        system: Optional[AmortizationSystem] = None,
    ) -> LoanQuote:
        """
        Purchasing power bounded by the available down payment.

        The down payment must cover (1 - LTV) of the price, so it alone supports
        a property of down_payment / (1 - LTV). When that is cheaper than what
        the income can finance, the cheaper property is resolved against the
        income instead.
        """
        income = require_positive(income, "income")
        down_payment = require_positive(down_payment, "down_payment")

        by_income = self._by_income(income, term_years, system, QuoteMode.DOWN_PAYMENT)
        supported_price = down_payment / (1 - self.policy.loan_to_value)
        if by_income.property_value <= supported_price:
            return by_income

        quote = self.resolve_by_price_and_income(supported_price, income, term_years, system)
        return replace(quote, mode=QuoteMode.DOWN_PAYMENT)

    def resolve_egi(
        self,
        price: Number,
        existing_debt: Number,
        income: Number,
        simultaneous_settlement: bool = False,
    ) -> EgiQuote:
        """Equity-release credit secured by an owned property"""
        return self.egi_selector.quote(
            price=require_positive(price, "price"),
            existing_debt=require_non_negative(existing_debt, "existing_debt"),
            income=require_positive(income, "income"),
            simultaneous_settlement=bool(simultaneous_settlement),
        )
