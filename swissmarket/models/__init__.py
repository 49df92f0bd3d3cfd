"""
Swiss Market SQLAlchemy Models
=============================

Central import point for the ORM models read by the pricing engine. Import
``Base`` from here for the ``create_all`` convenience in tests.

Usage::

    from swissmarket.models import Base, Service, ServicePricingOption
"""

# -- Base & Mixins --
from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin

# -- Services & pricing options --
from .service import BillingInterval, PriceUnit, Service, ServicePricingOption

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    # Services
    "BillingInterval",
    "PriceUnit",
    "Service",
    "ServicePricingOption",
]
