"""
Booking Billing Strategies
==========================

Turns an elapsed booking duration plus a resolved pricing configuration into
a base cost and itemized lines, using one of four billing strategies:

  1. FIXED  -- one flat price, independent of the booked range
  2. HOURLY -- billable hours (at least ``minimum_hours``) times the hourly rate
  3. DAILY  -- started days (at least ``minimum_days``) times the daily rate
  4. MIXED  -- both rates configured: price the range all-hourly, all-daily
               and as full days plus overflow, then bill the cheapest

Selection is deterministic.  In MIXED pricing, candidates are compared with a
strict ``<`` in the order hourly, daily, mixed, so ties resolve to the
earliest-listed method.

Amounts are left unrounded here; rounding to cents happens when the final
breakdown is assembled.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional

from swissmarket.core.money import ZERO, format_currency
from swissmarket.models.service import BillingInterval

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

HOURS_PER_DAY = Decimal("24")

# Label used when the fixed strategy falls back to the service base price
BASE_PRICE_LABEL = "Base Price"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class CalculationMethod(str, enum.Enum):
    HOURLY = "hourly"
    DAILY = "daily"
    MIXED = "mixed"
    FIXED = "fixed"


class LineItemType(str, enum.Enum):
    BASE = "base"
    HOURLY = "hourly"
    DAILY = "daily"
    SURCHARGE = "surcharge"
    DISCOUNT = "discount"


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BookingDuration:
    """Elapsed time of a booking range, unrounded."""

    total_hours: Decimal
    total_days: Decimal


@dataclass(frozen=True)
class ServicePricingConfig:
    """Normalized pricing configuration for one quote.

    When an explicit pricing option drove resolution exactly one of
    ``hourly_rate`` / ``daily_rate`` / ``base_price`` is set.
    """

    currency: str
    hourly_rate: Optional[Decimal] = None
    daily_rate: Optional[Decimal] = None
    base_price: Optional[Decimal] = None
    minimum_hours: Decimal = Decimal("1")
    minimum_days: int = 1
    weekend_surcharge_percent: Decimal = ZERO
    holiday_surcharge_percent: Decimal = ZERO


@dataclass(frozen=True)
class LineItem:
    """One itemized charge contributing to the subtotal."""

    description: str
    quantity: Decimal
    unit_price: Decimal
    total: Decimal
    type: LineItemType


@dataclass(frozen=True)
class StrategyResult:
    """What a billing strategy charges, before surcharges and fees."""

    method: CalculationMethod
    line_items: tuple[LineItem, ...]
    base_cost: Decimal = ZERO
    daily_cost: Decimal = ZERO
    hourly_cost: Decimal = ZERO
    full_days: Decimal = ZERO
    extra_hours: Decimal = ZERO

    @property
    def charged_cost(self) -> Decimal:
        """The amount surcharges are computed on."""
        return self.base_cost + self.daily_cost + self.hourly_cost


# ---------------------------------------------------------------------------
# Line item builders
# ---------------------------------------------------------------------------

def _plural_days(days: int) -> str:
    return f"{days} day{'s' if days != 1 else ''}"


def _hourly_line(hours: Decimal, rate: Decimal, currency: str, extra: bool = False) -> LineItem:
    label = "extra hours" if extra else "hours"
    return LineItem(
        description=f"{hours:.1f} {label} @ {format_currency(rate, currency)}/hr",
        quantity=hours,
        unit_price=rate,
        total=hours * rate,
        type=LineItemType.HOURLY,
    )


def _daily_line(days: int, rate: Decimal, currency: str) -> LineItem:
    return LineItem(
        description=f"{_plural_days(days)} @ {format_currency(rate, currency)}/day",
        quantity=Decimal(days),
        unit_price=rate,
        total=days * rate,
        type=LineItemType.DAILY,
    )


# ---------------------------------------------------------------------------
# Strategy selection
# ---------------------------------------------------------------------------

def select_strategy(
    config: ServicePricingConfig,
    billing_interval: Optional[BillingInterval] = None,
) -> CalculationMethod:
    """Pick the billing strategy for a quote.

    ``billing_interval`` is the interval of the explicit pricing option, or
    ``None`` when the service's own price is used.  First match wins:

    1. explicit ``one_time``                                -> FIXED
    2. explicit ``hourly``, or only an hourly rate set      -> HOURLY
    3. explicit ``daily``, or only a daily rate set         -> DAILY
    4. no explicit option and both rates set                -> MIXED
    5. anything else (weekly/monthly/yearly, no rate)       -> FIXED
    """
    explicit = billing_interval is not None
    has_hourly = config.hourly_rate is not None
    has_daily = config.daily_rate is not None

    if billing_interval == BillingInterval.ONE_TIME:
        return CalculationMethod.FIXED
    if billing_interval == BillingInterval.HOURLY or (
        not explicit and has_hourly and not has_daily
    ):
        return CalculationMethod.HOURLY
    if billing_interval == BillingInterval.DAILY or (
        not explicit and has_daily and not has_hourly
    ):
        return CalculationMethod.DAILY
    if not explicit and has_hourly and has_daily:
        return CalculationMethod.MIXED
    return CalculationMethod.FIXED


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

def fixed_strategy(
    duration: BookingDuration,
    config: ServicePricingConfig,
    label: Optional[str] = None,
) -> StrategyResult:
    """Flat price; the booked range only shows up in the time fields."""
    price = config.base_price if config.base_price is not None else ZERO
    line = LineItem(
        description=label or BASE_PRICE_LABEL,
        quantity=Decimal("1"),
        unit_price=price,
        total=price,
        type=LineItemType.BASE,
    )
    return StrategyResult(
        method=CalculationMethod.FIXED,
        line_items=(line,),
        base_cost=price,
        full_days=Decimal(math.floor(duration.total_days)),
        extra_hours=duration.total_hours % HOURS_PER_DAY,
    )


def hourly_strategy(
    duration: BookingDuration,
    config: ServicePricingConfig,
    label: Optional[str] = None,
) -> StrategyResult:
    """Bill the exact hours, never rounded up, but at least the minimum."""
    rate = config.hourly_rate if config.hourly_rate is not None else ZERO
    billable_hours = max(duration.total_hours, config.minimum_hours)
    line = _hourly_line(billable_hours, rate, config.currency)
    return StrategyResult(
        method=CalculationMethod.HOURLY,
        line_items=(line,),
        hourly_cost=line.total,
        extra_hours=duration.total_hours,
    )


def daily_strategy(
    duration: BookingDuration,
    config: ServicePricingConfig,
    label: Optional[str] = None,
) -> StrategyResult:
    """Bill every started day, at least the minimum number of days."""
    rate = config.daily_rate if config.daily_rate is not None else ZERO
    billable_days = max(math.ceil(duration.total_days), config.minimum_days)
    line = _daily_line(billable_days, rate, config.currency)
    return StrategyResult(
        method=CalculationMethod.DAILY,
        line_items=(line,),
        daily_cost=line.total,
        full_days=Decimal(billable_days),
    )


def mixed_strategy(
    duration: BookingDuration,
    config: ServicePricingConfig,
    label: Optional[str] = None,
) -> StrategyResult:
    """Bill whichever of all-hourly, all-daily or days-plus-overflow is cheapest.

    The overflow after the last full day is billed by the hour unless that
    costs at least as much as one more day, in which case a whole day is
    added instead.
    """
    hourly_rate = config.hourly_rate if config.hourly_rate is not None else ZERO
    daily_rate = config.daily_rate if config.daily_rate is not None else ZERO
    total_hours = duration.total_hours
    currency = config.currency

    full_days = math.floor(duration.total_days)
    started_days = math.ceil(duration.total_days)
    extra_hours = total_hours - full_days * HOURS_PER_DAY
    extra_hourly_cost = extra_hours * hourly_rate
    use_extra_hours = extra_hourly_cost < daily_rate

    all_hourly_cost = total_hours * hourly_rate
    all_daily_cost = started_days * daily_rate
    mixed_cost = full_days * daily_rate
    if extra_hours > 0:
        mixed_cost += min(extra_hourly_cost, daily_rate)

    candidates = (
        (CalculationMethod.HOURLY, all_hourly_cost),
        (CalculationMethod.DAILY, all_daily_cost),
        (CalculationMethod.MIXED, mixed_cost),
    )
    chosen, cheapest = candidates[0]
    for method, cost in candidates[1:]:
        if cost < cheapest:
            chosen, cheapest = method, cost

    logger.debug(
        "Mixed pricing candidates: hourly=%s daily=%s mixed=%s -> %s",
        all_hourly_cost,
        all_daily_cost,
        mixed_cost,
        chosen.value,
    )

    if chosen == CalculationMethod.HOURLY:
        return StrategyResult(
            method=chosen,
            line_items=(_hourly_line(total_hours, hourly_rate, currency),),
            hourly_cost=all_hourly_cost,
            extra_hours=total_hours,
        )

    if chosen == CalculationMethod.DAILY:
        return StrategyResult(
            method=chosen,
            line_items=(_daily_line(started_days, daily_rate, currency),),
            daily_cost=all_daily_cost,
            full_days=Decimal(started_days),
        )

    lines: list[LineItem] = []
    daily_cost = ZERO
    hourly_cost = ZERO
    billed_days = 0
    billed_extra_hours = ZERO

    if full_days > 0:
        lines.append(_daily_line(full_days, daily_rate, currency))
        daily_cost = full_days * daily_rate
        billed_days = full_days

    if extra_hours > 0:
        if use_extra_hours:
            lines.append(_hourly_line(extra_hours, hourly_rate, currency, extra=True))
            hourly_cost = extra_hourly_cost
            billed_extra_hours = extra_hours
        else:
            lines.append(LineItem(
                description=f"1 additional day (cheaper than {extra_hours:.1f} hours)",
                quantity=Decimal("1"),
                unit_price=daily_rate,
                total=daily_rate,
                type=LineItemType.DAILY,
            ))
            daily_cost += daily_rate
            billed_days += 1

    return StrategyResult(
        method=chosen,
        line_items=tuple(lines),
        daily_cost=daily_cost,
        hourly_cost=hourly_cost,
        full_days=Decimal(billed_days),
        extra_hours=billed_extra_hours,
    )


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

Strategy = Callable[[BookingDuration, ServicePricingConfig, Optional[str]], StrategyResult]

STRATEGIES: dict[CalculationMethod, Strategy] = {
    CalculationMethod.FIXED: fixed_strategy,
    CalculationMethod.HOURLY: hourly_strategy,
    CalculationMethod.DAILY: daily_strategy,
    CalculationMethod.MIXED: mixed_strategy,
}

_missing = set(CalculationMethod) - set(STRATEGIES)
if _missing:
    raise RuntimeError(f"No billing strategy registered for: {sorted(m.value for m in _missing)}")


def run_strategy(
    method: CalculationMethod,
    duration: BookingDuration,
    config: ServicePricingConfig,
    label: Optional[str] = None,
) -> StrategyResult:
    """Run the strategy registered for ``method``."""
    return STRATEGIES[method](duration, config, label)
