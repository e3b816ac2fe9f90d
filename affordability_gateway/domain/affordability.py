"""Affordability caps applied to a resolved bracket"""

from dataclasses import replace
from decimal import Decimal

from affordability_gateway.domain.models import BracketResolution, LendingPolicy
from affordability_gateway.domain.payments import installments, principal_from_installment


def cap_to_income(
    resolution: BracketResolution,
    income: Decimal,
    months: int,
    policy: LendingPolicy,
) -> BracketResolution:
    """
    Shrink the financed amount so the first installment fits the income ceiling.

    Used when both the property price and the income are known: the property
    value is kept, the loan is reduced to what income * affordability_ratio can
    service at the bracket's rate, and the down payment grows accordingly.
    """
    ceiling_payment = income * policy.affordability_ratio
    if resolution.installments.first <= ceiling_payment:
        return resolution

    financed = principal_from_installment(ceiling_payment, resolution.monthly_rate, months, resolution.system)
    return replace(
        resolution,
        financed_amount=financed,
        installments=installments(financed, resolution.monthly_rate, months, resolution.system),
        was_capped=True,
    )


def cap_to_price_ceiling(
    resolution: BracketResolution,
    months: int,
    policy: LendingPolicy,
) -> BracketResolution:
    """
    Truncate the property value to the governing bracket's price ceiling.

    Used in purchasing-power mode when the income-derived price overflows the
    last bracket of a table whose ceilings are all finite. The loan is
    recomputed from the truncated price at the same rate.
    """
    ceiling = resolution.bracket.price_ceiling
    if resolution.property_value <= ceiling:
        return resolution

    financed = ceiling * policy.loan_to_value
    return replace(
        resolution,
        property_value=ceiling,
        financed_amount=financed,
        installments=installments(financed, resolution.monthly_rate, months, resolution.system),
        was_capped=True,
    )
