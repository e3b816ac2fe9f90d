"""
E2E tests for borrower personas going through the HTTP API.

Borrower personas:
- first_home: Low income, cheapest subsidised bracket
- ceiling_bound: Income buys more than its bracket allows, escalated
- upgrader: Knows the property, checks it against income
- high_earner: Counter-rate bracket, SAC amortization
- saver: Income is fine, down payment is the limit
- homeowner_*: Equity release on an owned property
"""

import pytest
from fastapi.testclient import TestClient


@pytest.mark.integration
def test_first_home_subsidised_bracket(client: TestClient):
    """
    first_home: 2000/month
    Expected: Cheapest bracket, Price amortization, property under 210000
    """
    response = client.post("/v1/quotes/income", json={"income": 2000, "term_years": 30})

    assert response.status_code == 200
    data = response.json()
    assert data["bracket_index"] == 0
    assert data["nominal_rate"] == 0.048548
    assert data["amortization_system"] == "price"
    assert data["property_value"] < 210000
    assert data["first_installment"] == 600.0


@pytest.mark.integration
def test_ceiling_bound_escalated(client: TestClient):
    """
    ceiling_bound: 3500/month
    Expected: Outgrows the 210000 ceiling at brackets 2 and 3, quoted at bracket 4
    """
    response = client.post("/v1/quotes/income", json={"income": 3500, "term_years": 30})

    data = response.json()
    assert data["bracket_index"] == 4, "3500/month should settle in the dearest bracket it fits"
    assert data["nominal_rate"] == 0.07229
    assert data["was_capped"] is False
    assert data["property_value"] <= 210000.0
    assert data["first_installment"] == 1050.0


@pytest.mark.integration
def test_upgrader_property_fits_income(client: TestClient):
    """
    upgrader: 6500/month looking at a 300000 property
    Expected: Full 80% loan, installment within 30% of income
    """
    response = client.post(
        "/v1/quotes/price-income",
        json={"price": 300000, "income": 6500, "term_years": 30},
    )

    data = response.json()
    assert data["was_capped"] is False
    assert data["financed_amount"] == 240000.0
    assert data["first_installment"] <= 1950.0
    assert data["required_income"] <= 6500


@pytest.mark.integration
def test_upgrader_cannot_afford_price(client: TestClient):
    """
    upgrader: Same property on 3000/month
    Expected: Loan shrinks, down payment grows, required income reported
    """
    response = client.post(
        "/v1/quotes/price-income",
        json={"price": 300000, "income": 3000, "term_years": 30},
    )

    data = response.json()
    assert data["was_capped"] is True
    assert data["financed_amount"] < 240000
    assert data["down_payment"] > 60000
    assert data["required_income"] > 3000


@pytest.mark.integration
def test_high_earner_counter_rate(client: TestClient):
    """
    high_earner: 25000/month
    Expected: Counter-rate bracket, SAC with declining installments
    """
    response = client.post("/v1/quotes/income", json={"income": 25000})

    data = response.json()
    assert data["bracket_index"] == 7
    assert data["amortization_system"] == "sac"
    assert data["first_installment"] == 7500.0
    assert data["last_installment"] < data["first_installment"]


@pytest.mark.integration
def test_saver_limited_by_down_payment(client: TestClient):
    """
    saver: 5000/month with 30000 saved
    Expected: Property limited to 150000 by the 20% down payment
    """
    by_income = client.post("/v1/quotes/income", json={"income": 5000}).json()
    response = client.post("/v1/quotes/down-payment", json={"income": 5000, "down_payment": 30000})

    data = response.json()
    assert data["property_value"] == 150000.0
    assert data["property_value"] < by_income["property_value"]
    assert data["down_payment"] == 30000.0


@pytest.mark.integration
def test_homeowner_owned_outright(client: TestClient):
    """
    homeowner_quitado: 500000 property, no debt, 8000/month
    Expected: Approved, 20-year term, limited by the 300000 credit base
    """
    response = client.post("/v1/egi/quote", json={"price": 500000, "income": 8000})

    data = response.json()
    assert data["error"] is None
    assert data["scenario"] == "quitado"
    assert data["credit_base"] == 300000.0
    assert data["applied_term_years"] == 20
    assert 50000 <= data["max_financeable"] <= 300000


@pytest.mark.integration
def test_homeowner_keeps_mortgage(client: TestClient):
    """
    homeowner_financiado: 400000 property with 100000 still owed
    Expected: Approved at the financiado rate over 15 years
    """
    response = client.post(
        "/v1/egi/quote",
        json={"price": 400000, "existing_debt": 100000, "income": 15000},
    )

    data = response.json()
    assert data["error"] is None
    assert data["scenario"] == "financiado"
    assert data["applied_annual_rate"] == 0.1499
    assert data["max_financeable"] == 240000.0


@pytest.mark.integration
def test_homeowner_settlement_too_small(client: TestClient):
    """
    homeowner_liquidacao: 120000 property, settling debt in the low tier
    Expected: Rejected, amounts zeroed, HTTP 200
    """
    response = client.post(
        "/v1/egi/quote",
        json={
            "price": 120000,
            "existing_debt": 30000,
            "income": 10000,
            "simultaneous_settlement": True,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["scenario"] == "liquidacao"
    assert data["error"] is not None
    assert data["credit_base"] == 0
