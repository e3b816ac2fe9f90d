"""POST /v1/quotes/* - Tiered-rate financing simulations"""

import time
import logging
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, Request

from affordability_gateway.api.dependencies import get_request_id, get_resolver
from affordability_gateway.api.v1.schemas import (
    DownPaymentQuoteRequest,
    IncomeQuoteRequest,
    InstallmentQuoteRequest,
    LoanQuoteResponse,
    PriceIncomeQuoteRequest,
    PriceQuoteRequest,
)
from affordability_gateway.domain.exceptions import InvalidInputError, NonConvergenceError
from affordability_gateway.domain.models import LoanQuote
from affordability_gateway.domain.resolver import LoanResolver
from affordability_gateway.infrastructure.observability.logging import log_quote
from affordability_gateway.infrastructure.observability.metrics import non_convergence_counter, record_quote

router = APIRouter()


def _respond(request: Request, compute: Callable[[], LoanQuote]) -> LoanQuoteResponse:
    """Run a resolution, map domain errors to HTTP and record metrics/logs"""
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        quote = compute()

    except InvalidInputError as e:
        logging.warning(f"Invalid input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except NonConvergenceError as e:
        non_convergence_counter.inc()
        logging.error(f"Bracket resolution did not converge: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Rate bracket resolution did not converge")

    duration_ms = (time.time() - start_time) * 1000
    record_quote(quote)
    log_quote(request_id, quote, duration_ms)

    return LoanQuoteResponse.from_quote(quote)


@router.post("/quotes/income", response_model=LoanQuoteResponse)
def quote_by_income(
    body: IncomeQuoteRequest,
    request: Request,
    resolver: LoanResolver = Depends(get_resolver),
):
    """
    Purchasing power from a monthly income.

    Steps to dearer brackets while the affordable property overflows the
    bracket price ceiling; truncates to the last ceiling (was_capped) when the
    table runs out.
    """
    return _respond(
        request,
        lambda: resolver.resolve_by_income(body.income, body.term_years, body.amortization_system),
    )


@router.post("/quotes/price", response_model=LoanQuoteResponse)
def quote_by_price(
    body: PriceQuoteRequest,
    request: Request,
    resolver: LoanResolver = Depends(get_resolver),
):
    """Financing and required income for a known property price"""
    return _respond(
        request,
        lambda: resolver.resolve_by_price(body.price, body.term_years, body.amortization_system),
    )


@router.post("/quotes/price-income", response_model=LoanQuoteResponse)
def quote_by_price_and_income(
    body: PriceIncomeQuoteRequest,
    request: Request,
    resolver: LoanResolver = Depends(get_resolver),
):
    """Viability of a property for an income; the loan shrinks to fit the income"""
    return _respond(
        request,
        lambda: resolver.resolve_by_price_and_income(
            body.price, body.income, body.term_years, body.amortization_system
        ),
    )


@router.post("/quotes/installment", response_model=LoanQuoteResponse)
def quote_by_installment(
    body: InstallmentQuoteRequest,
    request: Request,
    resolver: LoanResolver = Depends(get_resolver),
):
    """Purchasing power from a target first installment"""
    return _respond(
        request,
        lambda: resolver.resolve_by_installment(body.installment, body.term_years, body.amortization_system),
    )


@router.post("/quotes/down-payment", response_model=LoanQuoteResponse)
def quote_by_down_payment(
    body: DownPaymentQuoteRequest,
    request: Request,
    resolver: LoanResolver = Depends(get_resolver),
):
    """Purchasing power bounded by both income and available down payment"""
    return _respond(
        request,
        lambda: resolver.resolve_by_down_payment(
            body.income, body.down_payment, body.term_years, body.amortization_system
        ),
    )
