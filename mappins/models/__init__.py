"""Database models for Map Pins."""

from mappins.models.base import Base, utcnow
from mappins.models.category import Category
from mappins.models.pin import Pin
from mappins.models.visit import Visit

__all__ = ["Base", "Category", "Pin", "Visit", "utcnow"]
