"""Payment formulas for constant-payment (Price) and constant-amortization (SAC) loans"""

from decimal import Decimal

from affordability_gateway.domain.models import AmortizationSystem, Installments

ZERO = Decimal("0")
ONE = Decimal("1")
MONTHS_PER_YEAR = 12


def annual_to_monthly_rate(annual_rate: Decimal) -> Decimal:
    """
    Equivalent monthly rate under monthly compounding.

    monthly = (1 + annual)^(1/12) - 1. Non-positive annual rates degrade to a
    zero monthly rate.
    """
    if annual_rate <= ZERO:
        return ZERO
    return (ONE + annual_rate) ** (ONE / MONTHS_PER_YEAR) - ONE


def monthly_to_annual_rate(monthly_rate: Decimal) -> Decimal:
    """Inverse of annual_to_monthly_rate: (1 + monthly)^12 - 1"""
    if monthly_rate <= ZERO:
        return ZERO
    return (ONE + monthly_rate) ** MONTHS_PER_YEAR - ONE


def constant_payment(principal: Decimal, monthly_rate: Decimal, months: int) -> Decimal:
    """
    Fixed installment of a Price (French) amortization.

    Requirements:
    - R = PV * i / (1 - (1 + i)^-n)
    - Zero rate splits the principal evenly: PV / n
    - Non-positive principal or term yields 0

    Example:
        100000 at 1% a month over 12 months -> 8884.88
    """
    if principal <= ZERO or months <= 0:
        return ZERO
    if monthly_rate <= ZERO:
        return principal / months
    return principal * monthly_rate / (ONE - (ONE + monthly_rate) ** -months)


def present_value_from_payment(payment: Decimal, monthly_rate: Decimal, months: int) -> Decimal:
    """Largest principal a fixed installment can amortize: PMT * (1 - (1 + i)^-n) / i"""
    if payment <= ZERO or months <= 0:
        return ZERO
    if monthly_rate <= ZERO:
        return payment * months
    return payment * (ONE - (ONE + monthly_rate) ** -months) / monthly_rate


def constant_amortization_installments(principal: Decimal, monthly_rate: Decimal, months: int) -> Installments:
    """
    First and last installment of a SAC schedule.

    Principal is repaid in equal slices (PV / n), so the first installment
    carries interest on the whole balance and the last only on the final slice.
    """
    if principal <= ZERO or months <= 0:
        return Installments(first=ZERO, last=ZERO)

    rate = max(monthly_rate, ZERO)
    amortization = principal / months
    return Installments(
        first=amortization + principal * rate,
        last=amortization + amortization * rate,
    )


def principal_from_first_installment(payment: Decimal, monthly_rate: Decimal, months: int) -> Decimal:
    """Inverse of the SAC first installment: PMT / (1/n + i)"""
    if payment <= ZERO or months <= 0:
        return ZERO
    return payment / (ONE / months + max(monthly_rate, ZERO))


def installments(
    principal: Decimal,
    monthly_rate: Decimal,
    months: int,
    system: AmortizationSystem,
) -> Installments:
    """First/last installment for either amortization system"""
    if system == AmortizationSystem.SAC:
        return constant_amortization_installments(principal, monthly_rate, months)

    payment = constant_payment(principal, monthly_rate, months)
    return Installments(first=payment, last=payment)


def principal_from_installment(
    payment: Decimal,
    monthly_rate: Decimal,
    months: int,
    system: AmortizationSystem,
) -> Decimal:
    """Principal whose first installment equals payment under the given system"""
    if system == AmortizationSystem.SAC:
        return principal_from_first_installment(payment, monthly_rate, months)
    return present_value_from_payment(payment, monthly_rate, months)


def select_system(annual_rate: Decimal, threshold: Decimal) -> AmortizationSystem:
    """Counter-rate loans (at or above threshold) amortize with SAC, the rest with Price"""
    return AmortizationSystem.SAC if annual_rate >= threshold else AmortizationSystem.PRICE
