"""Persistence contract shared by every storage backend."""

from __future__ import annotations

from abc import ABC, abstractmethod

from mappins.schemas import CategoryRead, DeleteResult, PinRead, VisitRead


class PinStore(ABC):
    """Pins, categories and visit history.

    Backends must behave identically; nothing outside :mod:`mappins.store`
    may depend on which one is in use.
    """

    backend_name: str = "abstract"

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables and seed the default categories.

        Safe to call repeatedly. Existing categories are never overwritten.

        Raises:
            StoreConnectionError: No usable connection target.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying connections. Safe to call more than once."""

    # Pins

    @abstractmethod
    async def list_pins(self) -> list[PinRead]:
        """Return all pins, newest first, with the joined category fields."""

    @abstractmethod
    async def get_pin(self, pin_id: int) -> PinRead | None:
        """Return one pin or ``None``."""

    @abstractmethod
    async def create_pin(
        self,
        *,
        name: str,
        latitude: float,
        longitude: float,
        created_by: str,
        description: str | None = None,
        category: str | None = None,
    ) -> PinRead:
        """Insert a pin, copying the category's current color onto it.

        Raises:
            ValidationError: A required field is empty.
        """

    @abstractmethod
    async def update_pin(
        self,
        pin_id: int,
        *,
        name: str,
        latitude: float,
        longitude: float,
        updated_by: str,
        description: str | None = None,
        category: str | None = None,
    ) -> PinRead | None:
        """Replace a pin's mutable fields.

        Category and color only change when ``category`` is given. Returns
        ``None`` when the pin does not exist.
        """

    @abstractmethod
    async def delete_pin(self, pin_id: int) -> DeleteResult:
        """Delete a pin together with its visits."""

    # Visits

    @abstractmethod
    async def add_visit(
        self, pin_id: int, username: str, comment: str | None = None
    ) -> VisitRead:
        """Append a visit to a pin's history.

        Raises:
            ValidationError: ``username`` is empty.
            NotFoundError: The pin does not exist.
        """

    @abstractmethod
    async def list_visits(self, pin_id: int) -> list[VisitRead]:
        """Return the most recent visits of a pin, newest first."""

    # Categories

    @abstractmethod
    async def list_categories(self) -> list[CategoryRead]:
        """Return all categories ordered by name."""

    @abstractmethod
    async def get_category(self, category_id: int) -> CategoryRead | None:
        """Return one category or ``None``."""

    @abstractmethod
    async def create_category(self, name: str, color: str) -> CategoryRead:
        """Insert a category.

        Raises:
            ConflictError: The name is taken.
        """

    @abstractmethod
    async def update_category(
        self, category_id: int, name: str, color: str
    ) -> CategoryRead | None:
        """Rename/recolor a category. Pins keep their stored color.

        Raises:
            ConflictError: The new name is taken.
        """

    @abstractmethod
    async def delete_category(self, category_id: int) -> DeleteResult:
        """Delete a category that no pin references.

        Raises:
            CategoryInUseError: At least one pin uses the category's name.
        """
