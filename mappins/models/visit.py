"""Visit history model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from mappins.models.base import Base, utcnow


class Visit(Base):
    """Append-only record of someone visiting a pin."""

    __tablename__ = "visit_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    pin_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("pins.id", ondelete="CASCADE"), index=True, nullable=False
    )
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    visited_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        index=True,
    )
