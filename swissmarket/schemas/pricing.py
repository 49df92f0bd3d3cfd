"""
Pydantic v2 schemas for the booking price engine.

Covers:
- Inbound service and pricing option records (validated from ORM rows,
  mappings or other objects via ``from_attributes``)
- Outbound price breakdowns and quick estimates, serialized with camelCase
  keys for the web client (``model_dump(by_alias=True)``)
"""

from __future__ import annotations

import enum
import uuid
from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field, field_validator

from swissmarket.algorithms.billingStrategies import CalculationMethod, LineItemType
from swissmarket.core.money import to_decimal
from swissmarket.models.service import BillingInterval
from swissmarket.services.surchargeCalculator import SurchargeType


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _to_camel(name: str) -> str:
    """Convert a snake_case string to camelCase."""
    parts = name.split("_")
    return parts[0] + "".join(word.capitalize() for word in parts[1:])


# ---------------------------------------------------------------------------
# Inbound records
# ---------------------------------------------------------------------------

class ServiceRecord(BaseModel):
    """The pricing-relevant fields of a service listing.

    A missing or non-numeric ``price`` degrades to 0 rather than failing.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    price: Decimal = Field(default=Decimal("0"))
    price_unit: Optional[str] = Field(
        default=None,
        description="hour, day, job, consultation, month; anything but hour/day bills as a base price",
    )
    currency: Optional[str] = None

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Any) -> Decimal:
        return to_decimal(value)

    @field_validator("price_unit", mode="before")
    @classmethod
    def _unwrap_price_unit(cls, value: Any) -> Any:
        if isinstance(value, enum.Enum):
            return value.value
        return value


class PricingOptionRecord(BaseModel):
    """Snapshot of an explicit pricing option chosen by the customer."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: Optional[Union[uuid.UUID, str]] = None
    label: str = ""
    price: Decimal = Field(default=Decimal("0"))
    currency: Optional[str] = None
    billing_interval: BillingInterval
    duration_minutes: Optional[int] = None

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Any) -> Decimal:
        return to_decimal(value)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

_OUT_CONFIG = ConfigDict(
    from_attributes=True,
    alias_generator=AliasGenerator(serialization_alias=_to_camel),
)


class LineItemOut(BaseModel):
    """One itemized charge."""

    model_config = _OUT_CONFIG

    description: str
    quantity: Decimal
    unit_price: Decimal
    total: Decimal
    type: LineItemType


class SurchargeItemOut(BaseModel):
    """A proportional weekend/holiday surcharge."""

    model_config = _OUT_CONFIG

    type: SurchargeType
    description: str
    amount: Decimal
    percentage: Optional[Decimal] = None


class PricingBreakdownOut(BaseModel):
    """Fully itemized, fee-inclusive booking price."""

    model_config = _OUT_CONFIG

    # Time breakdown
    total_hours: Decimal
    total_days: Decimal
    full_days: Decimal
    extra_hours: Decimal

    # Cost breakdown
    base_cost: Decimal
    daily_cost: Decimal
    hourly_cost: Decimal
    surcharges: list[SurchargeItemOut] = Field(default_factory=list)
    discount: Decimal

    # Final amounts
    subtotal: Decimal
    platform_fee: Decimal
    total: Decimal
    currency: str

    line_items: list[LineItemOut] = Field(default_factory=list)
    calculation_method: CalculationMethod = Field(
        description="Which billing strategy produced the breakdown: hourly, daily, mixed or fixed",
    )


class QuickEstimateOut(BaseModel):
    """Low-stakes price preview."""

    model_config = _OUT_CONFIG

    estimate: Decimal
    currency: str
    note: str
