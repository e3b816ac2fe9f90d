"""GET /v1/rate-table - Configured rate brackets"""

from fastapi import APIRouter, Depends

from affordability_gateway.api.dependencies import get_resolver
from affordability_gateway.api.v1.schemas import RateBracketSchema, RateTableResponse
from affordability_gateway.domain.resolver import LoanResolver

router = APIRouter()


@router.get("/rate-table", response_model=RateTableResponse)
def get_rate_table(resolver: LoanResolver = Depends(get_resolver)):
    """
    Retrieve the rate brackets and ratios the resolver applies.

    Returns:
        Brackets in ascending order; the last one (null ceilings) is the counter rate
    """
    policy = resolver.policy
    return RateTableResponse(
        loan_to_value=float(policy.loan_to_value),
        affordability_ratio=float(policy.affordability_ratio),
        sac_rate_threshold=float(policy.sac_rate_threshold),
        default_term_years=float(policy.default_term_years),
        brackets=[
            RateBracketSchema.from_bracket(index, bracket)
            for index, bracket in enumerate(resolver.rate_table.brackets)
        ],
    )
