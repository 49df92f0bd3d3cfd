"""
Weekend / Holiday Surcharge Calculator
======================================

Surcharges are proportional to calendar overlap: a booking that touches
2 weekend days out of 4 calendar days pays half of the configured weekend
percentage on its base cost.

Holidays are looked up through an injected ``HolidayCalendar`` so quotes are
not tied to one hardcoded year.  ``SwissHolidayCalendar`` (the default) uses
the ``holidays`` package for the configured canton.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from functools import lru_cache
from typing import Iterable, Iterator, Optional, Protocol
from zoneinfo import ZoneInfo

import holidays

from swissmarket.algorithms.billingStrategies import (
    LineItem,
    LineItemType,
    ServicePricingConfig,
)
from swissmarket.core.config import settings
from swissmarket.core.money import ZERO, round_money

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)

# Saturday=5, Sunday=6
WEEKEND_WEEKDAYS = frozenset({5, 6})


class SurchargeType(str, enum.Enum):
    WEEKEND = "weekend"
    HOLIDAY = "holiday"
    RUSH = "rush"
    CUSTOM = "custom"


@dataclass(frozen=True)
class SurchargeItem:
    """A proportional add-on charge."""

    type: SurchargeType
    description: str
    amount: Decimal
    percentage: Optional[Decimal] = None

    def as_line_item(self) -> LineItem:
        return LineItem(
            description=self.description,
            quantity=Decimal("1"),
            unit_price=self.amount,
            total=self.amount,
            type=LineItemType.SURCHARGE,
        )


# ---------------------------------------------------------------------------
# Holiday calendars
# ---------------------------------------------------------------------------

class HolidayCalendar(Protocol):
    """Answers whether a calendar date is a public holiday."""

    def is_holiday(self, day: date) -> bool:
        ...


@lru_cache(maxsize=128)
def _holiday_dates(country: str, subdivision: Optional[str], year: int) -> frozenset[date]:
    return frozenset(
        holidays.country_holidays(country, subdiv=subdivision, years=year).keys()
    )


class SwissHolidayCalendar:
    """Public holidays for Switzerland, optionally for one canton.

    Without a canton only the nationwide holidays apply.
    """

    def __init__(self, subdivision: Optional[str] = None, country: str = "CH") -> None:
        self.country = country
        self.subdivision = subdivision

    def is_holiday(self, day: date) -> bool:
        return day in _holiday_dates(self.country, self.subdivision, day.year)

    def __repr__(self) -> str:
        return f"<SwissHolidayCalendar(country={self.country}, subdivision={self.subdivision})>"


class StaticHolidayCalendar:
    """A fixed set of holiday dates supplied by the caller."""

    def __init__(self, dates: Iterable[date]) -> None:
        self._dates = frozenset(dates)

    def is_holiday(self, day: date) -> bool:
        return day in self._dates


def default_holiday_calendar() -> HolidayCalendar:
    """Holiday calendar for the configured country and canton."""
    return SwissHolidayCalendar(
        subdivision=settings.holiday_subdivision,
        country=settings.holiday_country,
    )


# ---------------------------------------------------------------------------
# Calendar day helpers
# ---------------------------------------------------------------------------

def _to_local(moment: datetime) -> datetime:
    """Wall-clock time in the configured zone; naive datetimes are already local."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(ZoneInfo(settings.local_timezone)).replace(tzinfo=None)


def _iter_calendar_days(start: datetime, end: datetime) -> Iterator[date]:
    """Yield the local date of ``start``, ``start + 1 day``, ... while before ``end``."""
    current = _to_local(start)
    end = _to_local(end)
    while current < end:
        yield current.date()
        current += ONE_DAY


def count_weekend_days(start: datetime, end: datetime) -> int:
    return sum(1 for day in _iter_calendar_days(start, end) if day.weekday() in WEEKEND_WEEKDAYS)


def count_holiday_days(start: datetime, end: datetime, calendar: HolidayCalendar) -> int:
    return sum(1 for day in _iter_calendar_days(start, end) if calendar.is_holiday(day))


def count_calendar_days(start: datetime, end: datetime) -> int:
    """Started days in the range, never less than 1."""
    days, remainder = divmod(end - start, ONE_DAY)
    return max(1, days + (1 if remainder else 0))


def _format_percent(percent: Decimal) -> str:
    return f"{Decimal(percent).normalize():f}"


def _proportional_surcharge(
    base_cost: Decimal,
    percent: Decimal,
    matching_days: int,
    total_days: int,
) -> Decimal:
    return round_money(
        base_cost * (percent / Decimal("100")) * (Decimal(matching_days) / Decimal(total_days))
    )


# ---------------------------------------------------------------------------
# Surcharge calculation
# ---------------------------------------------------------------------------

def calculate_surcharges(
    start: datetime,
    end: datetime,
    base_cost: Decimal,
    config: ServicePricingConfig,
    calendar: Optional[HolidayCalendar] = None,
) -> tuple[SurchargeItem, ...]:
    """Compute weekend and holiday surcharges for a booking range.

    A category is only emitted when its percentage is positive and the
    rounded amount is above zero.  A day that is both a weekend day and a
    holiday counts towards both categories.

    Timezone-aware datetimes are converted to ``settings.local_timezone``
    before days are classified; naive datetimes are taken as local time.
    """
    surcharges: list[SurchargeItem] = []
    total_days = count_calendar_days(start, end)

    weekend_percent = config.weekend_surcharge_percent
    if weekend_percent > 0:
        weekend_days = count_weekend_days(start, end)
        amount = _proportional_surcharge(base_cost, weekend_percent, weekend_days, total_days)
        if weekend_days > 0 and amount > ZERO:
            surcharges.append(SurchargeItem(
                type=SurchargeType.WEEKEND,
                description=f"Weekend surcharge ({_format_percent(weekend_percent)}%)",
                amount=amount,
                percentage=weekend_percent,
            ))

    holiday_percent = config.holiday_surcharge_percent
    if holiday_percent > 0:
        holiday_days = count_holiday_days(start, end, calendar or default_holiday_calendar())
        amount = _proportional_surcharge(base_cost, holiday_percent, holiday_days, total_days)
        if holiday_days > 0 and amount > ZERO:
            surcharges.append(SurchargeItem(
                type=SurchargeType.HOLIDAY,
                description=f"Holiday surcharge ({_format_percent(holiday_percent)}%)",
                amount=amount,
                percentage=holiday_percent,
            ))

    if surcharges:
        logger.debug(
            "Surcharges over %d calendar day(s): %s",
            total_days,
            ", ".join(f"{s.type.value}={s.amount}" for s in surcharges),
        )

    return tuple(surcharges)
