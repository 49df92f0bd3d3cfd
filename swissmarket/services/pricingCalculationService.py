"""
Booking Price Calculation Service
=================================

Turns a requested time range plus a service's pricing configuration into a
fully itemized, fee-inclusive ``PricingBreakdown``:

  1. Duration        -- elapsed hours/days of the requested range
  2. Config          -- normalize the service record / pricing option
  3. Strategy        -- fixed, hourly, daily or cost-minimizing mixed
  4. Surcharges      -- weekend/holiday, proportional to calendar overlap
  5. Assembly        -- round to cents, add the platform fee

The pipeline is a pure function of its inputs: no I/O, no shared mutable
state, safe to call concurrently.  Records are resolved by the caller (see
``bookingQuoteService`` for the database-backed facade).

Money amounts are ``Decimal`` and rounded to 2 decimal places only when the
breakdown is assembled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Optional

from swissmarket.algorithms.billingStrategies import (
    HOURS_PER_DAY,
    BookingDuration,
    CalculationMethod,
    LineItem,
    ServicePricingConfig,
    StrategyResult,
    run_strategy,
    select_strategy,
)
from swissmarket.core.config import settings
from swissmarket.core.money import ZERO, round_money
from swissmarket.models.service import BillingInterval
from swissmarket.schemas.pricing import PricingOptionRecord, ServiceRecord
from swissmarket.services.surchargeCalculator import (
    HolidayCalendar,
    SurchargeItem,
    calculate_surcharges,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

ONE_HOUR_MICROSECONDS = Decimal(3_600_000_000)

QUICK_ESTIMATE_FAILURE_NOTE = "Unable to calculate estimate"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class InvalidRangeError(ValueError):
    """Raised when a booking range does not end after it starts."""

    def __init__(self, start: datetime, end: datetime) -> None:
        self.start = start
        self.end = end
        super().__init__(
            f"Booking end ({end.isoformat()}) must be after start ({start.isoformat()})."
        )


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DateTimeRange:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class PricingBreakdown:
    """Fully itemized, fee-inclusive price for one booking request.

    Invariants: ``subtotal == sum(line.total)``,
    ``platform_fee == round(subtotal * fee_rate, 2)`` and
    ``total == subtotal + platform_fee``.
    """

    # Time breakdown
    total_hours: Decimal
    total_days: Decimal
    full_days: Decimal
    extra_hours: Decimal

    # Cost breakdown
    base_cost: Decimal
    daily_cost: Decimal
    hourly_cost: Decimal
    surcharges: tuple[SurchargeItem, ...]
    discount: Decimal

    # Final amounts
    subtotal: Decimal
    platform_fee: Decimal
    total: Decimal
    currency: str

    line_items: tuple[LineItem, ...]
    calculation_method: CalculationMethod


@dataclass(frozen=True)
class QuickEstimate:
    """Price preview for UI display."""

    estimate: Decimal
    currency: str
    note: str


# ---------------------------------------------------------------------------
# Pipeline steps
# ---------------------------------------------------------------------------

def calculate_duration(date_range: DateTimeRange) -> BookingDuration:
    """Elapsed hours and days of a range, unrounded.

    Raises:
        InvalidRangeError: If ``end`` is not after ``start``.
    """
    if date_range.end <= date_range.start:
        raise InvalidRangeError(date_range.start, date_range.end)

    elapsed = date_range.end - date_range.start
    microseconds = (elapsed.days * 86_400 + elapsed.seconds) * 1_000_000 + elapsed.microseconds
    total_hours = Decimal(microseconds) / ONE_HOUR_MICROSECONDS
    return BookingDuration(total_hours=total_hours, total_days=total_hours / HOURS_PER_DAY)


def resolve_pricing_config(
    service: ServiceRecord,
    pricing_option: Optional[PricingOptionRecord] = None,
) -> ServicePricingConfig:
    """Normalize a service record and optional pricing option.

    An explicit option sets exactly one of hourly rate, daily rate or base
    price.  Without one the service's ``price_unit`` decides.  Surcharge
    percentages are not configurable per service yet and resolve to 0.
    """
    minimums = dict(
        minimum_hours=Decimal(settings.minimum_billable_hours),
        minimum_days=settings.minimum_billable_days,
    )

    if pricing_option is not None:
        interval = pricing_option.billing_interval
        price = pricing_option.price
        return ServicePricingConfig(
            currency=pricing_option.currency or settings.default_currency,
            hourly_rate=price if interval == BillingInterval.HOURLY else None,
            daily_rate=price if interval == BillingInterval.DAILY else None,
            base_price=(
                price
                if interval not in (BillingInterval.HOURLY, BillingInterval.DAILY)
                else None
            ),
            **minimums,
        )

    unit = service.price_unit
    price = service.price
    return ServicePricingConfig(
        currency=service.currency or settings.default_currency,
        hourly_rate=price if unit == "hour" else None,
        daily_rate=price if unit == "day" else None,
        base_price=price if unit not in ("hour", "day") else None,
        **minimums,
    )


def assemble_breakdown(
    duration: BookingDuration,
    result: StrategyResult,
    surcharges: tuple[SurchargeItem, ...],
    currency: Optional[str] = None,
) -> PricingBreakdown:
    """Round every line to cents and apply the platform fee."""
    line_items = tuple(
        LineItem(
            description=line.description,
            quantity=line.quantity,
            unit_price=round_money(line.unit_price),
            total=round_money(line.total),
            type=line.type,
        )
        for line in result.line_items
    ) + tuple(surcharge.as_line_item() for surcharge in surcharges)

    subtotal = round_money(sum((line.total for line in line_items), ZERO))
    platform_fee = round_money(subtotal * settings.platform_fee_rate)

    return PricingBreakdown(
        total_hours=duration.total_hours,
        total_days=duration.total_days,
        full_days=result.full_days,
        extra_hours=result.extra_hours,
        base_cost=round_money(result.base_cost),
        daily_cost=round_money(result.daily_cost),
        hourly_cost=round_money(result.hourly_cost),
        surcharges=surcharges,
        discount=round_money(ZERO),
        subtotal=subtotal,
        platform_fee=platform_fee,
        total=subtotal + platform_fee,
        currency=currency or settings.default_currency,
        line_items=line_items,
        calculation_method=result.method,
    )


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def calculate_price_for_config(
    config: ServicePricingConfig,
    start_time: datetime,
    end_time: datetime,
    billing_interval: Optional[BillingInterval] = None,
    label: Optional[str] = None,
    holiday_calendar: Optional[HolidayCalendar] = None,
) -> PricingBreakdown:
    """Price a booking range against an already-resolved configuration.

    Args:
        config: Resolved pricing configuration.
        start_time: Start of the booking.
        end_time: End of the booking (must be after ``start_time``).
        billing_interval: Interval of the explicit pricing option, if any.
        label: Pricing option label, used for fixed-price line items.
        holiday_calendar: Calendar for holiday surcharges (defaults to the
            configured Swiss canton).

    Returns:
        PricingBreakdown with line items, surcharges and platform fee.

    Raises:
        InvalidRangeError: If ``end_time`` is not after ``start_time``.
    """
    date_range = DateTimeRange(start=start_time, end=end_time)
    duration = calculate_duration(date_range)

    method = select_strategy(config, billing_interval)
    result = run_strategy(method, duration, config, label)
    surcharges = calculate_surcharges(
        date_range.start,
        date_range.end,
        result.charged_cost,
        config,
        holiday_calendar,
    )
    breakdown = assemble_breakdown(duration, result, surcharges, config.currency)

    logger.debug(
        "Priced %s hours via %s: subtotal=%s fee=%s total=%s %s",
        duration.total_hours,
        breakdown.calculation_method.value,
        breakdown.subtotal,
        breakdown.platform_fee,
        breakdown.total,
        breakdown.currency,
    )
    return breakdown


def calculate_booking_price(
    service: Any,
    start_time: datetime,
    end_time: datetime,
    pricing_option: Any = None,
    holiday_calendar: Optional[HolidayCalendar] = None,
) -> PricingBreakdown:
    """Calculate the price of a booking for a resolved service.

    Args:
        service: The service record (``ServiceRecord``, ORM row or mapping
            with ``price``, ``price_unit`` and ``currency``).
        start_time: Start of the booking.
        end_time: End of the booking.
        pricing_option: Optional explicit pricing option (``PricingOptionRecord``,
            ORM row or mapping).
        holiday_calendar: Calendar for holiday surcharges.

    Returns:
        PricingBreakdown for the requested range.

    Raises:
        InvalidRangeError: If ``end_time`` is not after ``start_time``.
        pydantic.ValidationError: If a record cannot be read at all.
    """
    # Validate the range before looking at the records
    calculate_duration(DateTimeRange(start=start_time, end=end_time))

    service_record = ServiceRecord.model_validate(service)
    option_record = (
        PricingOptionRecord.model_validate(pricing_option)
        if pricing_option is not None
        else None
    )
    config = resolve_pricing_config(service_record, option_record)

    return calculate_price_for_config(
        config,
        start_time,
        end_time,
        billing_interval=option_record.billing_interval if option_record else None,
        label=(
            option_record.label
            if option_record and option_record.billing_interval == BillingInterval.ONE_TIME
            else None
        ),
        holiday_calendar=holiday_calendar,
    )


def unavailable_estimate() -> QuickEstimate:
    """The zero estimate shown when a preview cannot be priced."""
    return QuickEstimate(
        estimate=Decimal("0"),
        currency=settings.default_currency,
        note=QUICK_ESTIMATE_FAILURE_NOTE,
    )


def get_quick_estimate(
    service: Any,
    pricing_option: Any = None,
    hours: Optional[int] = None,
    days: int = 0,
    now: Optional[datetime] = None,
    holiday_calendar: Optional[HolidayCalendar] = None,
) -> QuickEstimate:
    """Preview the price of a booking starting now.

    Never raises: any failure yields a zero estimate so UI previews degrade
    quietly.  This is the only place pricing errors are swallowed.
    """
    if hours is None:
        hours = settings.quick_estimate_default_hours

    try:
        start_time = now or datetime.now(timezone.utc)
        end_time = start_time
        if days > 0:
            end_time += timedelta(days=days)
        if hours > 0:
            end_time += timedelta(hours=hours)

        breakdown = calculate_booking_price(
            service,
            start_time,
            end_time,
            pricing_option=pricing_option,
            holiday_calendar=holiday_calendar,
        )
    except Exception:
        logger.warning(
            "Quick estimate failed (hours=%s, days=%s); returning zero estimate",
            hours,
            days,
            exc_info=True,
        )
        return unavailable_estimate()

    parts = []
    if days > 0:
        parts.append(f"{days} day(s)")
    if hours > 0:
        parts.append(f"{hours} hour(s)")
    return QuickEstimate(
        estimate=breakdown.total,
        currency=breakdown.currency,
        note=f"Estimated price for {' '.join(parts)}",
    )
