"""Business logic on top of the store."""

from mappins.services.categories import CategoryService
from mappins.services.pins import PinService

__all__ = ["CategoryService", "PinService"]
