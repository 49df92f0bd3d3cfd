"""
Booking Quote Service
=====================

Database-backed entry points for booking quotes.  Resolves the service and
(optionally) the chosen pricing option by id, then hands the records to the
pure calculation pipeline in ``pricingCalculationService``.

Read-only: quotes are never persisted here.  The order subsystem decides
whether to snapshot a breakdown onto a stored order.

All methods are async and accept an ``AsyncSession``.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from swissmarket.models import Service, ServicePricingOption
from swissmarket.services.pricingCalculationService import (
    PricingBreakdown,
    QuickEstimate,
    calculate_booking_price,
    get_quick_estimate,
    unavailable_estimate,
)
from swissmarket.services.surchargeCalculator import HolidayCalendar

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ServiceNotFoundError(Exception):
    """Raised when a service cannot be found by ID."""

    def __init__(self, service_id: uuid.UUID) -> None:
        self.service_id = service_id
        super().__init__(f"Service with id '{service_id}' not found.")


class PricingOptionNotFoundError(Exception):
    """Raised when a pricing option does not exist for the given service."""

    def __init__(self, option_id: uuid.UUID, service_id: uuid.UUID) -> None:
        self.option_id = option_id
        self.service_id = service_id
        super().__init__(
            f"Pricing option '{option_id}' not found for service '{service_id}'."
        )


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

async def get_service(db: AsyncSession, service_id: uuid.UUID) -> Service:
    """Fetch a service by ID or raise ServiceNotFoundError."""
    result = await db.execute(select(Service).where(Service.id == service_id))
    service = result.scalar_one_or_none()
    if service is None:
        raise ServiceNotFoundError(service_id)
    return service


async def get_pricing_option(
    db: AsyncSession,
    option_id: uuid.UUID,
    service_id: uuid.UUID,
) -> ServicePricingOption:
    """Fetch a pricing option of a service or raise PricingOptionNotFoundError."""
    stmt = select(ServicePricingOption).where(
        ServicePricingOption.id == option_id,
        ServicePricingOption.service_id == service_id,
    )
    result = await db.execute(stmt)
    option = result.scalar_one_or_none()
    if option is None:
        raise PricingOptionNotFoundError(option_id, service_id)
    return option


# ---------------------------------------------------------------------------
# Quotes
# ---------------------------------------------------------------------------

async def quote_booking(
    db: AsyncSession,
    service_id: uuid.UUID,
    start_time: datetime,
    end_time: datetime,
    pricing_option_id: Optional[uuid.UUID] = None,
    holiday_calendar: Optional[HolidayCalendar] = None,
) -> PricingBreakdown:
    """Calculate a booking price for a stored service.

    Args:
        db: Async database session.
        service_id: UUID of the service being booked.
        start_time: Start of the booking.
        end_time: End of the booking.
        pricing_option_id: Optional UUID of the chosen pricing option.
        holiday_calendar: Calendar for holiday surcharges.

    Returns:
        PricingBreakdown for the requested range.

    Raises:
        ServiceNotFoundError: If the service does not exist.
        PricingOptionNotFoundError: If the option does not belong to the service.
        InvalidRangeError: If ``end_time`` is not after ``start_time``.
    """
    service = await get_service(db, service_id)
    option = None
    if pricing_option_id is not None:
        option = await get_pricing_option(db, pricing_option_id, service_id)

    breakdown = calculate_booking_price(
        service,
        start_time,
        end_time,
        pricing_option=option,
        holiday_calendar=holiday_calendar,
    )

    logger.info(
        "Quoted service %s (option=%s): %s %s via %s",
        service_id,
        pricing_option_id,
        breakdown.total,
        breakdown.currency,
        breakdown.calculation_method.value,
    )
    return breakdown


async def quote_quick_estimate(
    db: AsyncSession,
    service_id: uuid.UUID,
    pricing_option_id: Optional[uuid.UUID] = None,
    hours: Optional[int] = None,
    days: int = 0,
) -> QuickEstimate:
    """Quick price preview for a stored service.

    Lookup failures degrade to the zero estimate just like calculation
    failures do.
    """
    option = None
    try:
        service = await get_service(db, service_id)
        if pricing_option_id is not None:
            option = await get_pricing_option(db, pricing_option_id, service_id)
    except Exception:
        logger.warning(
            "Quick estimate lookup failed for service %s (option=%s)",
            service_id,
            pricing_option_id,
            exc_info=True,
        )
        return unavailable_estimate()

    return get_quick_estimate(service, pricing_option=option, hours=hours, days=days)
