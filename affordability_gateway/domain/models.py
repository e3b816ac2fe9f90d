"""Domain models - immutable value objects for rate brackets and quotes"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional


class AmortizationSystem(str, Enum):
    """Amortization convention of a loan"""

    PRICE = "price"  # constant payment
    SAC = "sac"  # constant amortization


class QuoteMode(str, Enum):
    """Which known quantity a loan quote was resolved from"""

    INCOME = "income"
    PRICE = "price"
    PRICE_AND_INCOME = "price_income"
    INSTALLMENT = "installment"
    DOWN_PAYMENT = "down_payment"


class EgiScenario(str, Enum):
    """Equity-release classification by existing debt and settlement intent"""

    QUITADO = "quitado"  # property owned outright
    FINANCIADO = "financiado"  # existing debt kept
    LIQUIDACAO = "liquidacao"  # existing debt settled by the new credit


@dataclass(frozen=True)
class RateBracket:
    """Tier of the rate table; ceilings are inclusive upper bounds"""

    income_ceiling: Decimal
    price_ceiling: Decimal
    annual_rate: Decimal


@dataclass(frozen=True)
class LendingPolicy:
    """Ratios and limits shared by every financing resolution"""

    loan_to_value: Decimal
    affordability_ratio: Decimal
    closing_cost_ratio: Decimal
    sac_rate_threshold: Decimal
    default_term_years: Decimal
    max_iterations: int


@dataclass(frozen=True)
class Installments:
    """First and last installment of an amortization schedule"""

    first: Decimal
    last: Decimal


@dataclass(frozen=True)
class BracketResolution:
    """Unrounded outcome of bracket resolution, before formatting"""

    index: int
    bracket: RateBracket
    monthly_rate: Decimal
    system: AmortizationSystem
    financed_amount: Decimal
    property_value: Decimal
    installments: Installments
    was_capped: bool = False


@dataclass(frozen=True)
class LoanQuote:
    """Financing simulation result, monetary fields rounded to cents"""

    property_value: Decimal
    financed_amount: Decimal
    down_payment: Decimal
    closing_costs: Decimal
    nominal_rate: Decimal
    effective_rate: Decimal
    first_installment: Decimal
    last_installment: Decimal
    required_income: Optional[Decimal]
    was_capped: bool
    amortization_system: AmortizationSystem
    mode: QuoteMode
    bracket_index: int


@dataclass(frozen=True)
class ScenarioRule:
    """Term, rates and minimum ticket of an equity-release scenario"""

    scenario: EgiScenario
    term_years: int
    rate_up_to_cutoff: Optional[Decimal]
    rate_above_cutoff: Decimal
    minimum_ticket: Decimal

    def rate_for(self, above_cutoff: bool) -> Optional[Decimal]:
        """Annual rate for the tier, None when the scenario is not offered there"""
        return self.rate_above_cutoff if above_cutoff else self.rate_up_to_cutoff


@dataclass(frozen=True)
class EgiPolicy:
    """Equity-release limits shared by every scenario"""

    loan_to_value: Decimal
    affordability_ratio: Decimal
    rate_cutoff: Decimal
    minimum_property_value: Decimal


@dataclass(frozen=True)
class EgiQuote:
    """
    Equity-release simulation result.

    A non-null error marks a business-rule rejection; every numeric field is
    then zero.
    """

    scenario: EgiScenario
    credit_base: Decimal
    max_financeable: Decimal
    max_installment: Decimal
    estimated_installment: Decimal
    applied_annual_rate: Decimal
    applied_term_years: int
    error: Optional[str] = None

    @property
    def rejected(self) -> bool:
        return self.error is not None
