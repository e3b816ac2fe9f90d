"""POST /v1/egi/quote - Equity-release (home equity) simulation endpoint"""

import time
import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from affordability_gateway.api.dependencies import get_request_id, get_resolver
from affordability_gateway.api.v1.schemas import EgiQuoteRequest, EgiQuoteResponse
from affordability_gateway.domain.exceptions import InvalidInputError
from affordability_gateway.domain.resolver import LoanResolver
from affordability_gateway.infrastructure.observability.logging import log_egi_quote
from affordability_gateway.infrastructure.observability.metrics import record_egi_quote

router = APIRouter()


@router.post("/egi/quote", response_model=EgiQuoteResponse)
def create_egi_quote(
    body: EgiQuoteRequest,
    request: Request,
    resolver: LoanResolver = Depends(get_resolver),
):
    """
    Simulate credit secured by an owned property.

    Business-rule rejections (settlement below the rate cutoff, property below
    the minimum value, credit below the minimum ticket) come back as 200 with
    `error` set and every amount zeroed.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        quote = resolver.resolve_egi(
            body.price, body.existing_debt, body.income, body.simultaneous_settlement
        )
    except InvalidInputError as e:
        logging.warning(f"Invalid input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    duration_ms = (time.time() - start_time) * 1000
    record_egi_quote(quote)
    log_egi_quote(request_id, quote, duration_ms)

    return EgiQuoteResponse.from_quote(quote)
