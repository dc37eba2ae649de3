"""SQLAlchemy implementation of the store contract."""

from __future__ import annotations

import logging
from abc import abstractmethod
from collections.abc import Sequence
from typing import Any

from sqlalchemy import Select, delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.sql.base import Executable

from mappins.config import config
from mappins.exceptions import (
    CategoryInUseError,
    ConflictError,
    NotFoundError,
    StoreConnectionError,
    ValidationError,
)
from mappins.models import Base, Category, Pin, Visit, utcnow
from mappins.schemas import CategoryRead, DeleteResult, PinRead, VisitRead
from mappins.store.base import PinStore

logger = logging.getLogger(__name__)


def _require(field_name: str, value: str | None) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field_name} is required", field=field_name)
    return cleaned


class SQLAlchemyStore(PinStore):
    """Store backed by an async SQLAlchemy engine.

    Subclasses only decide how the engine is built and how the seed rows are
    inserted without clobbering existing categories. The engine is created on
    first use and kept until :meth:`close`.
    """

    def __init__(
        self,
        *,
        echo: bool = False,
        default_categories: Sequence[tuple[str, str]] = config.DEFAULT_CATEGORIES,
        default_category: str = config.DEFAULT_CATEGORY,
        default_color: str = config.DEFAULT_COLOR,
        visit_limit: int = config.VISIT_HISTORY_LIMIT,
    ) -> None:
        self.echo = echo
        self.default_categories = tuple(default_categories)
        self.default_category = default_category
        self.default_color = default_color
        self.visit_limit = visit_limit
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    @abstractmethod
    def _create_engine(self) -> AsyncEngine:
        """Build the backend's engine."""

    @abstractmethod
    def _insert_ignore_categories(self, rows: list[dict[str, Any]]) -> Executable:
        """Insert statement that skips rows whose name already exists."""

    def _connect(self) -> async_sessionmaker[AsyncSession]:
        if self._sessionmaker is None:
            self._engine = self._create_engine()
            self._sessionmaker = async_sessionmaker(
                self._engine, class_=AsyncSession, expire_on_commit=False
            )
        return self._sessionmaker

    @property
    def engine(self) -> AsyncEngine:
        self._connect()
        assert self._engine is not None
        return self._engine

    def _session(self) -> AsyncSession:
        return self._connect()()

    async def initialize(self) -> None:
        now = utcnow()
        rows = [
            {"name": name, "color": color, "created_at": now}
            for name, color in self.default_categories
        ]
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
                if rows:
                    await conn.execute(self._insert_ignore_categories(rows))
        except (SQLAlchemyError, OSError) as exc:
            logger.exception("Failed to initialize %s store", self.backend_name)
            raise StoreConnectionError(
                f"Could not initialize the {self.backend_name} database"
            ) from exc
        logger.info("Initialized %s store", self.backend_name)

    async def close(self) -> None:
        if self._engine is None:
            return
        engine, self._engine, self._sessionmaker = self._engine, None, None
        await engine.dispose()
        logger.debug("Closed %s store", self.backend_name)

    # Pins

    @staticmethod
    def _pin_select() -> Select[Any]:
        return select(
            Pin,
            Category.name.label("category_name"),
            Category.color.label("category_color"),
        ).outerjoin(Category, Pin.category == Category.name)

    @staticmethod
    def _pin_read(
        pin: Pin, category_name: str | None, category_color: str | None
    ) -> PinRead:
        return PinRead.model_validate(pin).model_copy(
            update={"category_name": category_name, "category_color": category_color}
        )

    async def _pin_with_category(self, session: AsyncSession, pin: Pin) -> PinRead:
        await session.refresh(pin)
        category = await session.scalar(
            select(Category).where(Category.name == pin.category)
        )
        if category is None:
            return self._pin_read(pin, None, None)
        return self._pin_read(pin, category.name, category.color)

    async def _resolve_color(self, session: AsyncSession, category: str) -> str:
        color = await session.scalar(
            select(Category.color).where(Category.name == category)
        )
        return color or self.default_color

    async def list_pins(self) -> list[PinRead]:
        async with self._session() as session:
            result = await session.execute(
                self._pin_select().order_by(Pin.created_at.desc(), Pin.id.desc())
            )
            return [self._pin_read(*row) for row in result.all()]

    async def get_pin(self, pin_id: int) -> PinRead | None:
        async with self._session() as session:
            result = await session.execute(self._pin_select().where(Pin.id == pin_id))
            row = result.first()
            if row is None:
                return None
            return self._pin_read(*row)

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
        name = _require("name", name)
        created_by = _require("created_by", created_by)
        if latitude is None or longitude is None:
            raise ValidationError("latitude and longitude are required")
        category = (category or "").strip() or self.default_category

        async with self._session() as session:
            now = utcnow()
            pin = Pin(
                name=name,
                description=description,
                latitude=latitude,
                longitude=longitude,
                category=category,
                color=await self._resolve_color(session, category),
                created_by=created_by,
                created_at=now,
                updated_at=now,
            )
            session.add(pin)
            await session.commit()
            return await self._pin_with_category(session, pin)

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
        name = _require("name", name)
        updated_by = _require("updated_by", updated_by)
        if latitude is None or longitude is None:
            raise ValidationError("latitude and longitude are required")

        async with self._session() as session:
            pin = await session.get(Pin, pin_id)
            if pin is None:
                return None

            pin.name = name
            pin.description = description
            pin.latitude = latitude
            pin.longitude = longitude
            pin.updated_by = updated_by
            pin.updated_at = utcnow()
            category = (category or "").strip()
            if category:
                pin.category = category
                pin.color = await self._resolve_color(session, category)

            await session.commit()
            return await self._pin_with_category(session, pin)

    async def delete_pin(self, pin_id: int) -> DeleteResult:
        async with self._session() as session:
            result = await session.execute(delete(Pin).where(Pin.id == pin_id))
            await session.commit()
            return DeleteResult(id=pin_id, deleted=result.rowcount > 0)

    # Visits

    async def add_visit(
        self, pin_id: int, username: str, comment: str | None = None
    ) -> VisitRead:
        username = _require("username", username)
        async with self._session() as session:
            visit = Visit(
                pin_id=pin_id, username=username, comment=comment, visited_at=utcnow()
            )
            session.add(visit)
            try:
                await session.commit()
            except IntegrityError as exc:
                raise NotFoundError("pin", pin_id) from exc
            await session.refresh(visit)
            return VisitRead.model_validate(visit)

    async def list_visits(self, pin_id: int) -> list[VisitRead]:
        async with self._session() as session:
            result = await session.scalars(
                select(Visit)
                .where(Visit.pin_id == pin_id)
                .order_by(Visit.visited_at.desc(), Visit.id.desc())
                .limit(self.visit_limit)
            )
            return [VisitRead.model_validate(visit) for visit in result]

    # Categories

    async def list_categories(self) -> list[CategoryRead]:
        async with self._session() as session:
            result = await session.scalars(select(Category).order_by(Category.name))
            return [CategoryRead.model_validate(category) for category in result]

    async def get_category(self, category_id: int) -> CategoryRead | None:
        async with self._session() as session:
            category = await session.get(Category, category_id)
            if category is None:
                return None
            return CategoryRead.model_validate(category)

    async def create_category(self, name: str, color: str) -> CategoryRead:
        async with self._session() as session:
            category = Category(name=name, color=color, created_at=utcnow())
            session.add(category)
            try:
                await session.commit()
            except IntegrityError as exc:
                raise ConflictError() from exc
            await session.refresh(category)
            return CategoryRead.model_validate(category)

    async def update_category(
        self, category_id: int, name: str, color: str
    ) -> CategoryRead | None:
        async with self._session() as session:
            category = await session.get(Category, category_id)
            if category is None:
                return None
            category.name = name
            category.color = color
            try:
                await session.commit()
            except IntegrityError as exc:
                raise ConflictError() from exc
            await session.refresh(category)
            return CategoryRead.model_validate(category)

    async def delete_category(self, category_id: int) -> DeleteResult:
        async with self._session() as session:
            category = await session.get(Category, category_id)
            if category is None:
                return DeleteResult(id=category_id, deleted=False)

            # Not atomic with the delete below: a pin created in between keeps
            # a dangling category name.
            in_use = await session.scalar(
                select(func.count())
                .select_from(Pin)
                .where(Pin.category == category.name)
            )
            if in_use:
                raise CategoryInUseError(category.name, in_use)

            result = await session.execute(
                delete(Category).where(Category.id == category_id)
            )
            await session.commit()
            return DeleteResult(id=category_id, deleted=result.rowcount > 0)
