"""
Shared pytest fixtures for the booking price engine tests.

Provides mock database sessions and sample service / pricing option objects
that mirror production ORM models without requiring a live database
connection.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from swissmarket.models.service import (
    BillingInterval,
    PriceUnit,
    Service,
    ServicePricingOption,
)


# ---------------------------------------------------------------------------
# Database session mock
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_db() -> AsyncMock:
    """Async mock of ``AsyncSession``.

    Individual tests configure ``mock_db.execute.return_value`` (or
    ``side_effect``) to control query results.
    """
    session = AsyncMock()
    session.add = MagicMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


# ---------------------------------------------------------------------------
# Service fixtures
# ---------------------------------------------------------------------------


def _make_service(price, unit: PriceUnit, currency: str = "CHF") -> Service:
    service = MagicMock(spec=Service)
    service.id = uuid.uuid4()
    service.title = f"Sample {unit.value} service"
    service.price = price
    service.price_unit = unit
    service.currency = currency
    service.created_at = datetime(2025, 1, 1, tzinfo=timezone.utc)
    service.updated_at = datetime(2025, 1, 1, tzinfo=timezone.utc)
    return service


@pytest.fixture
def hourly_service() -> Service:
    """A cleaning service listed at CHF 20.00 per hour."""
    return _make_service(Decimal("20.00"), PriceUnit.HOUR)


@pytest.fixture
def daily_service() -> Service:
    """A van rental listed at CHF 80.00 per day."""
    return _make_service(Decimal("80.00"), PriceUnit.DAY)


@pytest.fixture
def job_service() -> Service:
    """A furniture assembly job at a flat CHF 150.00."""
    return _make_service(Decimal("150.00"), PriceUnit.JOB)


# ---------------------------------------------------------------------------
# Pricing option fixtures
# ---------------------------------------------------------------------------


def _make_option(
    service_id: uuid.UUID,
    label: str,
    price: Decimal,
    interval: BillingInterval,
    currency: str = "CHF",
    duration_minutes=None,
) -> ServicePricingOption:
    option = MagicMock(spec=ServicePricingOption)
    option.id = uuid.uuid4()
    option.service_id = service_id
    option.label = label
    option.price = price
    option.currency = currency
    option.billing_interval = interval
    option.duration_minutes = duration_minutes
    option.sort_order = 0
    option.is_active = True
    return option


@pytest.fixture
def deep_clean_option(hourly_service: Service) -> ServicePricingOption:
    """A one-time "Deep Clean" package at CHF 250.00."""
    return _make_option(
        hourly_service.id,
        "Deep Clean",
        Decimal("250.00"),
        BillingInterval.ONE_TIME,
        duration_minutes=240,
    )


@pytest.fixture
def hourly_option(hourly_service: Service) -> ServicePricingOption:
    """An hourly "Express" tier at CHF 35.00 per hour."""
    return _make_option(
        hourly_service.id,
        "Express",
        Decimal("35.00"),
        BillingInterval.HOURLY,
    )


@pytest.fixture
def daily_option(hourly_service: Service) -> ServicePricingOption:
    """A daily "Full Day" tier at CHF 120.00 per day."""
    return _make_option(
        hourly_service.id,
        "Full Day",
        Decimal("120.00"),
        BillingInterval.DAILY,
    )


@pytest.fixture
def monthly_option(hourly_service: Service) -> ServicePricingOption:
    """A monthly maintenance subscription at CHF 400.00."""
    return _make_option(
        hourly_service.id,
        "Monthly Maintenance",
        Decimal("400.00"),
        BillingInterval.MONTHLY,
        currency="EUR",
    )
