"""Pydantic schemas for API request/response validation"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from affordability_gateway.domain.models import (
    AmortizationSystem,
    EgiQuote,
    EgiScenario,
    LoanQuote,
    QuoteMode,
    RateBracket,
)


class QuoteOptions(BaseModel):
    """Fields shared by every financing request"""

    term_years: Optional[Decimal] = Field(None, gt=0, le=50, description="Loan term, default from configuration")
    amortization_system: Optional[AmortizationSystem] = Field(
        None, description="Force price or sac instead of choosing by rate"
    )


class IncomeQuoteRequest(QuoteOptions):
    """Request body for POST /v1/quotes/income"""

    income: Decimal = Field(..., gt=0, description="Gross monthly income")


class PriceQuoteRequest(QuoteOptions):
    """Request body for POST /v1/quotes/price"""

    price: Decimal = Field(..., gt=0, description="Property price")


class PriceIncomeQuoteRequest(QuoteOptions):
    """Request body for POST /v1/quotes/price-income"""

    price: Decimal = Field(..., gt=0, description="Property price")
    income: Decimal = Field(..., gt=0, description="Gross monthly income")


class InstallmentQuoteRequest(QuoteOptions):
    """Request body for POST /v1/quotes/installment"""

    installment: Decimal = Field(..., gt=0, description="Target first installment")


class DownPaymentQuoteRequest(QuoteOptions):
    """Request body for POST /v1/quotes/down-payment"""

    income: Decimal = Field(..., gt=0, description="Gross monthly income")
    down_payment: Decimal = Field(..., gt=0, description="Savings available for the down payment")


class LoanQuoteResponse(BaseModel):
    """Financing quote, amounts rounded to cents"""

    property_value: float
    financed_amount: float
    down_payment: float
    closing_costs: float
    nominal_rate: float
    effective_rate: float
    first_installment: float
    last_installment: float
    required_income: Optional[float] = None
    was_capped: bool
    amortization_system: AmortizationSystem
    mode: QuoteMode
    bracket_index: int

    @classmethod
    def from_quote(cls, quote: LoanQuote) -> "LoanQuoteResponse":
        return cls(
            property_value=float(quote.property_value),
            financed_amount=float(quote.financed_amount),
            down_payment=float(quote.down_payment),
            closing_costs=float(quote.closing_costs),
            nominal_rate=float(quote.nominal_rate),
            effective_rate=float(quote.effective_rate),
            first_installment=float(quote.first_installment),
            last_installment=float(quote.last_installment),
            required_income=float(quote.required_income) if quote.required_income is not None else None,
            was_capped=quote.was_capped,
            amortization_system=quote.amortization_system,
            mode=quote.mode,
            bracket_index=quote.bracket_index,
        )


class EgiQuoteRequest(BaseModel):
    """Request body for POST /v1/egi/quote"""

    price: Decimal = Field(..., gt=0, description="Appraised value of the owned property")
    existing_debt: Decimal = Field(Decimal("0"), ge=0, description="Outstanding debt secured by the property")
    income: Decimal = Field(..., gt=0, description="Gross monthly income")
    simultaneous_settlement: bool = Field(False, description="Settle the existing debt with the new credit")


class EgiQuoteResponse(BaseModel):
    """Equity-release quote; error is set on business-rule rejections"""

    scenario: EgiScenario
    credit_base: float
    max_financeable: float
    max_installment: float
    estimated_installment: float
    applied_annual_rate: float
    applied_term_years: int
    error: Optional[str] = None

    @classmethod
    def from_quote(cls, quote: EgiQuote) -> "EgiQuoteResponse":
        return cls(
            scenario=quote.scenario,
            credit_base=float(quote.credit_base),
            max_financeable=float(quote.max_financeable),
            max_installment=float(quote.max_installment),
            estimated_installment=float(quote.estimated_installment),
            applied_annual_rate=float(quote.applied_annual_rate),
            applied_term_years=quote.applied_term_years,
            error=quote.error,
        )


class RateBracketSchema(BaseModel):
    """Single bracket; null ceilings are unbounded"""

    index: int
    income_ceiling: Optional[float] = None
    price_ceiling: Optional[float] = None
    annual_rate: float

    @classmethod
    def from_bracket(cls, index: int, bracket: RateBracket) -> "RateBracketSchema":
        return cls(
            index=index,
            income_ceiling=float(bracket.income_ceiling) if bracket.income_ceiling.is_finite() else None,
            price_ceiling=float(bracket.price_ceiling) if bracket.price_ceiling.is_finite() else None,
            annual_rate=float(bracket.annual_rate),
        )


class RateTableResponse(BaseModel):
    """Response for GET /v1/rate-table"""

    loan_to_value: float
    affordability_ratio: float
    sac_rate_threshold: float
    default_term_years: float
    brackets: List[RateBracketSchema]
