"""Pytest fixtures for testing"""

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient
from affordability_gateway.api.main import create_app
from affordability_gateway.api.dependencies import build_resolver, get_resolver
from affordability_gateway.config import Settings
from affordability_gateway.domain.brackets import RateTable
from affordability_gateway.domain.models import LendingPolicy, RateBracket
from affordability_gateway.domain.resolver import LoanResolver


@pytest.fixture
def test_settings() -> Settings:
    """Default configuration, independent of the environment"""
    return Settings(_env_file=None)


@pytest.fixture
def resolver(test_settings: Settings) -> LoanResolver:
    """Resolver built from the default rate table and ratios"""
    return build_resolver(test_settings)


@pytest.fixture
def rate_table(resolver: LoanResolver) -> RateTable:
    return resolver.rate_table


@pytest.fixture
def policy(resolver: LoanResolver) -> LendingPolicy:
    return resolver.policy


@pytest.fixture
def small_table() -> RateTable:
    """Three-bracket table with round numbers for hand-checked cases"""
    return RateTable(
        [
            RateBracket(income_ceiling=Decimal("3000"), price_ceiling=Decimal("200000"), annual_rate=Decimal("0.06")),
            RateBracket(income_ceiling=Decimal("8000"), price_ceiling=Decimal("400000"), annual_rate=Decimal("0.09")),
            RateBracket(
                income_ceiling=Decimal("Infinity"),
                price_ceiling=Decimal("Infinity"),
                annual_rate=Decimal("0.12"),
            ),
        ]
    )


@pytest.fixture
def client(resolver: LoanResolver) -> TestClient:
    """Create FastAPI test client wired to the default-configuration resolver"""
    app = create_app()
    app.dependency_overrides[get_resolver] = lambda: resolver
    return TestClient(app)
