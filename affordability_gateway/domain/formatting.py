"""Output precision: money to cents, rates to six decimals"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from affordability_gateway.domain.models import (
    BracketResolution,
    EgiQuote,
    EgiScenario,
    LendingPolicy,
    LoanQuote,
    QuoteMode,
)
from affordability_gateway.domain.payments import monthly_to_annual_rate

CENT = Decimal("0.01")
RATE_PRECISION = Decimal("0.000001")
ZERO = Decimal("0")


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def round_rate(value: Decimal) -> Decimal:
    return value.quantize(RATE_PRECISION, rounding=ROUND_HALF_UP)


def format_loan_quote(
    resolution: BracketResolution,
    mode: QuoteMode,
    policy: LendingPolicy,
    required_income: Optional[Decimal] = None,
) -> LoanQuote:
    """
    Round a bracket resolution into the final quote.

    Down payment is derived from the rounded price and loan so the three always
    add up to the cent. Closing costs (transfer tax, registry, notary) are a
    flat share of the property value.
    """
    property_value = round_money(resolution.property_value)
    financed_amount = round_money(resolution.financed_amount)

    return LoanQuote(
        property_value=property_value,
        financed_amount=financed_amount,
        down_payment=property_value - financed_amount,
        closing_costs=round_money(resolution.property_value * policy.closing_cost_ratio),
        nominal_rate=round_rate(resolution.bracket.annual_rate),
        effective_rate=round_rate(monthly_to_annual_rate(resolution.monthly_rate)),
        first_installment=round_money(resolution.installments.first),
        last_installment=round_money(resolution.installments.last),
        required_income=round_money(required_income) if required_income is not None else None,
        was_capped=resolution.was_capped,
        amortization_system=resolution.system,
        mode=mode,
        bracket_index=resolution.index,
    )


def format_egi_quote(
    scenario: EgiScenario,
    credit_base: Decimal,
    max_financeable: Decimal,
    max_installment: Decimal,
    estimated_installment: Decimal,
    annual_rate: Decimal,
    term_years: int,
) -> EgiQuote:
    return EgiQuote(
        scenario=scenario,
        credit_base=round_money(credit_base),
        max_financeable=round_money(max_financeable),
        max_installment=round_money(max_installment),
        estimated_installment=round_money(estimated_installment),
        applied_annual_rate=round_rate(annual_rate),
        applied_term_years=term_years,
    )


def rejected_egi_quote(scenario: EgiScenario, error: str) -> EgiQuote:
    """Business-rule rejection: error set, every numeric field zero"""
    return EgiQuote(
        scenario=scenario,
        credit_base=ZERO,
        max_financeable=ZERO,
        max_installment=ZERO,
        estimated_installment=ZERO,
        applied_annual_rate=ZERO,
        applied_term_years=0,
        error=error,
    )
