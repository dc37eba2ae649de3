"""Domain errors raised by the store and services.

Each error carries the message returned to clients. The HTTP status each one
maps to is registered in :mod:`mappins.main`.
"""

from __future__ import annotations


class MapPinsError(Exception):
    """Base class for all application errors."""

    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MapPinsError):
    """Client input is missing or malformed."""

    default_message = "Validation failed"

    def __init__(self, message: str | None = None, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(MapPinsError):
    """A referenced pin or category does not exist."""

    def __init__(self, resource: str, resource_id: int | None = None) -> None:
        message = f"{resource.capitalize()} not found"
        if resource_id is not None:
            message = f"{resource.capitalize()} {resource_id} not found"
        super().__init__(message)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(MapPinsError):
    """A unique value (category name) is already taken."""

    default_message = "A category with this name already exists"


class CategoryInUseError(MapPinsError):
    """The category is still referenced by at least one pin."""

    default_message = "Cannot delete a category that is used by pins"

    def __init__(self, name: str | None = None, pin_count: int = 0) -> None:
        super().__init__()
        self.name = name
        self.pin_count = pin_count


class StoreError(MapPinsError):
    """The persistence backend failed."""

    default_message = "Internal server error"


class StoreConnectionError(StoreError):
    """The persistence backend is unreachable or not configured."""

    default_message = "Database connection error"
