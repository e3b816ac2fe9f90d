"""Prometheus metrics for monitoring quote volume, rate brackets and EGI outcomes"""

from prometheus_client import Counter, Histogram

from affordability_gateway.domain.models import EgiQuote, LoanQuote

# Financing quote metrics
quote_counter = Counter(
    "affordability_quote_total",
    "Total financing quotes produced",
    ["mode", "amortization_system"],  # income | price | price_income | installment | down_payment
)

quote_bracket_counter = Counter(
    "affordability_quote_bracket",
    "Financing quotes by governing rate bracket",
    ["bracket"],
)

capped_quote_counter = Counter(
    "affordability_capped_quote_total",
    "Quotes limited by income ceiling or bracket price ceiling",
    ["mode"],
)

financed_amount_histogram = Histogram(
    "affordability_financed_amount",
    "Financed amount per quote",
    buckets=[50_000, 100_000, 200_000, 350_000, 500_000, 1_000_000, 2_000_000],
)

# Equity-release metrics
egi_decision_counter = Counter(
    "affordability_egi_decision_total",
    "Equity-release simulations by scenario and outcome",
    ["scenario", "outcome"],  # approved | rejected
)

# Domain failures
non_convergence_counter = Counter(
    "affordability_non_convergence_total",
    "Bracket resolutions that exhausted their iteration budget",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_quote(quote: LoanQuote) -> None:
    """Record quote metrics for monitoring bracket distribution and caps"""
    quote_counter.labels(mode=quote.mode.value, amortization_system=quote.amortization_system.value).inc()
    quote_bracket_counter.labels(bracket=str(quote.bracket_index)).inc()
    if quote.was_capped:
        capped_quote_counter.labels(mode=quote.mode.value).inc()
    financed_amount_histogram.observe(float(quote.financed_amount))


def record_egi_quote(quote: EgiQuote) -> None:
    outcome = "rejected" if quote.rejected else "approved"
    egi_decision_counter.labels(scenario=quote.scenario.value, outcome=outcome).inc()
