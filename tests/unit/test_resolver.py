"""Unit tests for the loan resolver entry points"""

import pytest
from dataclasses import replace
from decimal import Decimal
from affordability_gateway.domain.brackets import RateTable
from affordability_gateway.domain.exceptions import InvalidInputError, NonConvergenceError
from affordability_gateway.domain.formatting import round_money
from affordability_gateway.domain.models import AmortizationSystem, QuoteMode
from affordability_gateway.domain.payments import annual_to_monthly_rate, present_value_from_payment
from affordability_gateway.domain.resolver import LoanResolver

TERM = 30


def test_resolve_by_income_purchasing_power(resolver: LoanResolver):
    """Test income quote spends 30% of income and derives price from LTV"""
    quote = resolver.resolve_by_income(5000, TERM)

    assert quote.mode == QuoteMode.INCOME
    assert quote.bracket_index == 5
    assert quote.nominal_rate == Decimal("0.085722")
    assert quote.amortization_system == AmortizationSystem.PRICE
    assert quote.first_installment == Decimal("1500.00")
    assert quote.first_installment == quote.last_installment
    assert quote.required_income is None
    assert quote.was_capped is False

    monthly_rate = annual_to_monthly_rate(Decimal("0.085722"))
    assert quote.financed_amount == round_money(present_value_from_payment(Decimal("1500"), monthly_rate, 360))


def test_quote_amounts_add_up(resolver: LoanResolver):
    """Test down payment is property minus loan to the cent"""
    quote = resolver.resolve_by_income(Decimal("6123.45"), TERM)

    assert quote.down_payment == quote.property_value - quote.financed_amount
    assert abs(quote.closing_costs - quote.property_value * Decimal("0.05")) <= Decimal("0.01")
    assert quote.financed_amount.as_tuple().exponent == -2


def test_resolve_by_income_is_idempotent(resolver: LoanResolver):
    """Test identical inputs always produce identical quotes"""
    assert resolver.resolve_by_income(4321, TERM) == resolver.resolve_by_income(4321, TERM)
    assert resolver.resolve_by_price(275000, TERM) == resolver.resolve_by_price(275000, TERM)


def test_financed_amount_monotonic_in_income(resolver: LoanResolver):
    """Test more income never finances less within one income bracket"""
    # Every income here falls in bracket 5 (above 4700, up to 8600)
    incomes = ["4800", "5000", "5500", "6000", "6500"]
    quotes = [resolver.resolve_by_income(Decimal(income), TERM) for income in incomes]

    assert all(quote.bracket_index == 5 for quote in quotes)
    amounts = [quote.financed_amount for quote in quotes]
    assert amounts == sorted(amounts)


def test_financed_amount_steps_down_across_bracket(resolver: LoanResolver):
    """Test the step down where the income bracket changes to a dearer rate"""
    # 2850 is the last income of bracket 1; one cent more pays bracket 2's rate
    at_ceiling = resolver.resolve_by_income(Decimal("2850"), TERM)
    above_ceiling = resolver.resolve_by_income(Decimal("2850.01"), TERM)

    assert at_ceiling.bracket_index == 1
    assert above_ceiling.bracket_index == 2
    assert above_ceiling.financed_amount < at_ceiling.financed_amount


@pytest.mark.parametrize("income", ["1500", "2500", "3500", "4700", "7000", "11000", "30000"])
def test_income_quote_rate_matches_bracket(resolver: LoanResolver, rate_table: RateTable, income: str):
    """Test the applied rate is the governing bracket's rate and the price fits its ceiling"""
    quote = resolver.resolve_by_income(Decimal(income), TERM)
    bracket = rate_table[quote.bracket_index]

    assert quote.nominal_rate == bracket.annual_rate
    assert quote.property_value <= bracket.price_ceiling
    assert quote.first_installment <= Decimal(income) * Decimal("0.30")


def test_resolve_by_income_escalates_instead_of_capping(resolver: LoanResolver):
    """Test income 3500 is quoted at the dearer bracket its property fits, uncapped"""
    quote = resolver.resolve_by_income(3500, TERM)

    assert quote.bracket_index == 4
    assert quote.nominal_rate == Decimal("0.072290")
    assert quote.was_capped is False
    assert quote.property_value <= Decimal("210000.00")
    assert quote.first_installment == Decimal("1050.00")
    assert quote.down_payment == quote.property_value - quote.financed_amount


def test_resolve_by_income_counter_rate(resolver: LoanResolver):
    """Test counter-rate quotes amortize with SAC"""
    quote = resolver.resolve_by_income(20000, TERM)

    assert quote.amortization_system == AmortizationSystem.SAC
    assert quote.first_installment == Decimal("6000.00")
    assert quote.last_installment < quote.first_installment
    assert quote.nominal_rate == Decimal("0.114900")


def test_resolve_by_income_forced_sac(resolver: LoanResolver):
    """Test an explicit SAC request on a Price-rate bracket"""
    quote = resolver.resolve_by_income(5000, TERM, AmortizationSystem.SAC)

    assert quote.amortization_system == AmortizationSystem.SAC
    assert quote.first_installment == Decimal("1500.00")
    assert quote.last_installment < quote.first_installment


def test_resolve_by_installment_matches_income(resolver: LoanResolver):
    """Test a 1500 installment resolves like a 5000 income"""
    by_installment = resolver.resolve_by_installment(1500, TERM)
    by_income = resolver.resolve_by_income(5000, TERM)

    assert by_installment.mode == QuoteMode.INSTALLMENT
    assert replace(by_installment, mode=QuoteMode.INCOME) == by_income


def test_resolve_by_price(resolver: LoanResolver):
    """Test price quote finances 80% and reports the income it requires"""
    quote = resolver.resolve_by_price(200000, TERM)

    assert quote.mode == QuoteMode.PRICE
    assert quote.bracket_index == 2
    assert quote.property_value == Decimal("200000.00")
    assert quote.financed_amount == Decimal("160000.00")
    assert quote.down_payment == Decimal("40000.00")
    assert quote.closing_costs == Decimal("10000.00")
    assert quote.required_income is not None
    assert Decimal("2850") < quote.required_income <= Decimal("3500")
    assert quote.was_capped is False


def test_resolve_by_price_uses_default_term(resolver: LoanResolver):
    """Test the configured default term applies when none is given"""
    default = resolver.resolve_by_price(200000)
    explicit = resolver.resolve_by_price(200000, 35)

    assert default == explicit
    assert default.first_installment < resolver.resolve_by_price(200000, TERM).first_installment


def test_resolve_by_price_and_income_capped(resolver: LoanResolver):
    """Test an unaffordable property keeps its price but finances less"""
    quote = resolver.resolve_by_price_and_income(300000, 3000, TERM)

    assert quote.mode == QuoteMode.PRICE_AND_INCOME
    assert quote.bracket_index == 5
    assert quote.was_capped is True
    assert quote.property_value == Decimal("300000.00")
    assert quote.first_installment == Decimal("900.00")
    assert quote.required_income > Decimal("3000")
    assert quote.down_payment > Decimal("60000")


def test_resolve_by_price_and_income_uncapped(resolver: LoanResolver):
    """Test the dearer of the two brackets governs the rate"""
    quote = resolver.resolve_by_price_and_income(200000, 10000, TERM)

    assert quote.bracket_index == 6
    assert quote.nominal_rate == Decimal("0.100000")
    assert quote.financed_amount == Decimal("160000.00")
    assert quote.was_capped is False
    assert quote.required_income < Decimal("10000")


def test_resolve_by_down_payment_limited_by_savings(resolver: LoanResolver):
    """Test a small down payment bounds the property at down / (1 - LTV)"""
    quote = resolver.resolve_by_down_payment(5000, 20000, TERM)

    assert quote.mode == QuoteMode.DOWN_PAYMENT
    assert quote.property_value == Decimal("100000.00")
    assert quote.financed_amount == Decimal("80000.00")
    assert quote.down_payment == Decimal("20000.00")


def test_resolve_by_down_payment_limited_by_income(resolver: LoanResolver):
    """Test ample savings leave the income quote untouched"""
    quote = resolver.resolve_by_down_payment(5000, 100000, TERM)
    by_income = resolver.resolve_by_income(5000, TERM)

    assert quote.mode == QuoteMode.DOWN_PAYMENT
    assert replace(quote, mode=QuoteMode.INCOME) == by_income


@pytest.mark.parametrize("income", [0, -1000, "abc", None, float("nan"), float("inf"), True])
def test_invalid_income_rejected(resolver: LoanResolver, income):
    """Test missing, non-finite and non-positive income is rejected"""
    with pytest.raises(InvalidInputError):
        resolver.resolve_by_income(income)


def test_invalid_term_rejected(resolver: LoanResolver):
    """Test term must be positive and cover at least one month"""
    with pytest.raises(InvalidInputError):
        resolver.resolve_by_price(200000, 0)
    with pytest.raises(InvalidInputError):
        resolver.resolve_by_price(200000, Decimal("0.05"))


def test_invalid_price_and_down_payment_rejected(resolver: LoanResolver):
    """Test every quantity is validated before resolution"""
    with pytest.raises(InvalidInputError):
        resolver.resolve_by_price(-1)
    with pytest.raises(InvalidInputError):
        resolver.resolve_by_price_and_income(200000, 0)
    with pytest.raises(InvalidInputError):
        resolver.resolve_by_down_payment(5000, 0)
    with pytest.raises(InvalidInputError):
        resolver.resolve_by_installment(-10)


def test_resolve_by_price_non_convergence(resolver: LoanResolver):
    """Test an exhausted iteration budget surfaces as NonConvergenceError"""
    tight = LoanResolver(
        resolver.rate_table,
        replace(resolver.policy, max_iterations=1),
        resolver.egi_selector,
    )

    with pytest.raises(NonConvergenceError):
        tight.resolve_by_price(200000, TERM)
