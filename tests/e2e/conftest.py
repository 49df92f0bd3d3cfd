"""
E2E test fixtures for the booking price engine.

Provides:
- An async SQLite database (in-memory) with the full schema created
- Seeded services and pricing options with stable ids

Quotes are exercised through ``bookingQuoteService`` so the full
lookup -> resolution -> pricing flow runs against real ORM rows.
"""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import AsyncGenerator

import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

from swissmarket.models import (
    Base,
    BillingInterval,
    PriceUnit,
    Service,
    ServicePricingOption,
)


@compiles(UUID, "sqlite")
def compile_uuid_sqlite(type_, compiler, **kw):
    # TEXT affinity; all-digit hex would otherwise be stored as a number
    return "CHAR(32)"


# ---------------------------------------------------------------------------
# Test IDs (stable across tests so cross-references work)
# ---------------------------------------------------------------------------

CLEANING_SERVICE_ID = uuid.UUID("aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa")
VAN_RENTAL_SERVICE_ID = uuid.UUID("bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb")
ASSEMBLY_SERVICE_ID = uuid.UUID("cccccccc-cccc-cccc-cccc-cccccccccccc")

DEEP_CLEAN_OPTION_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")
EXPRESS_OPTION_ID = uuid.UUID("22222222-2222-2222-2222-222222222222")
MAINTENANCE_OPTION_ID = uuid.UUID("33333333-3333-3333-3333-333333333333")


# ---------------------------------------------------------------------------
# Async engine + session (in-memory SQLite)
# ---------------------------------------------------------------------------

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def _test_engine():
    """One in-memory database per test."""
    engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)

    # SQLite does not enforce foreign keys by default
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_fk(dbapi_conn, _):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(_test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Yield a session over a freshly seeded database."""
    session_factory = async_sessionmaker(
        bind=_test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        await _seed(session)
        # Quotes must load rows from the database, not the identity map
        session.expunge_all()
        yield session


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------


async def _seed(session: AsyncSession) -> None:
    cleaning = Service(
        id=CLEANING_SERVICE_ID,
        title="Apartment Cleaning",
        price=Decimal("20.00"),
        price_unit=PriceUnit.HOUR,
        currency="CHF",
    )
    van_rental = Service(
        id=VAN_RENTAL_SERVICE_ID,
        title="Moving Van Rental",
        price=Decimal("80.00"),
        price_unit=PriceUnit.DAY,
        currency="CHF",
    )
    assembly = Service(
        id=ASSEMBLY_SERVICE_ID,
        title="Furniture Assembly",
        price=Decimal("150.00"),
        price_unit=PriceUnit.JOB,
        currency="CHF",
    )
    session.add_all([cleaning, van_rental, assembly])
    await session.flush()

    session.add_all([
        ServicePricingOption(
            id=DEEP_CLEAN_OPTION_ID,
            service_id=CLEANING_SERVICE_ID,
            label="Deep Clean",
            price=Decimal("250.00"),
            currency="CHF",
            billing_interval=BillingInterval.ONE_TIME,
            duration_minutes=240,
            sort_order=0,
        ),
        ServicePricingOption(
            id=EXPRESS_OPTION_ID,
            service_id=CLEANING_SERVICE_ID,
            label="Express",
            price=Decimal("35.00"),
            currency="CHF",
            billing_interval=BillingInterval.HOURLY,
            sort_order=1,
        ),
        ServicePricingOption(
            id=MAINTENANCE_OPTION_ID,
            service_id=ASSEMBLY_SERVICE_ID,
            label="Monthly Maintenance",
            price=Decimal("400.00"),
            currency="CHF",
            billing_interval=BillingInterval.MONTHLY,
            sort_order=0,
        ),
    ])
    await session.commit()
