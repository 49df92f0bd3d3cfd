"""
SQLAlchemy models for services and service_pricing_options.

Only the columns the booking price engine reads are mapped here; listing
content (images, locations, contact data) belongs to the listings module.
"""

import enum
import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class PriceUnit(str, enum.Enum):
    HOUR = "hour"
    JOB = "job"
    CONSULTATION = "consultation"
    DAY = "day"
    MONTH = "month"


class BillingInterval(str, enum.Enum):
    ONE_TIME = "one_time"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Store enum values (e.g. "hour"), not member names."""
    return [member.value for member in enum_cls]


class Service(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "services"

    title: Mapped[str] = mapped_column(String(200), nullable=False)

    # Listing price; NULL for "price on request" listings
    price: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    price_unit: Mapped[PriceUnit] = mapped_column(
        Enum(PriceUnit, name="price_unit", values_callable=_enum_values),
        nullable=False,
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="CHF")

    # Relationships
    pricing_options: Mapped[list["ServicePricingOption"]] = relationship(
        "ServicePricingOption",
        back_populates="service",
        cascade="all, delete-orphan",
        order_by="ServicePricingOption.sort_order",
    )

    def __repr__(self) -> str:
        return (
            f"<Service(id={self.id}, title={self.title}, "
            f"price={self.price}, unit={self.price_unit})>"
        )


class ServicePricingOption(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A named price tier attached to a service (e.g. "Deep Clean")."""

    __tablename__ = "service_pricing_options"

    service_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("services.id", ondelete="CASCADE"),
        nullable=False,
    )
    label: Mapped[str] = mapped_column(String(100), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="CHF")
    billing_interval: Mapped[BillingInterval] = mapped_column(
        Enum(BillingInterval, name="billing_interval", values_callable=_enum_values),
        nullable=False,
        default=BillingInterval.ONE_TIME,
    )
    duration_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Display
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    service: Mapped["Service"] = relationship(
        "Service", back_populates="pricing_options"
    )

    def __repr__(self) -> str:
        return (
            f"<ServicePricingOption(id={self.id}, label={self.label}, "
            f"price={self.price}, interval={self.billing_interval})>"
        )
