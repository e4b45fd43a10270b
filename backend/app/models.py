from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Index, Numeric, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class DutchingEntry(Base):
    __tablename__ = "dutching_history"
    __table_args__ = (Index("ix_dutching_history_user_created", "user_id", "created_at"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    total_invested: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False)
    odds: Mapped[list[float]] = mapped_column(JSON, nullable=False)
    stakes: Mapped[list[float]] = mapped_column(JSON, nullable=False)
    guaranteed_return: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False)
    profit: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False)
    roi: Mapped[Decimal] = mapped_column(Numeric(12, 6), nullable=False)
    observation: Mapped[str | None] = mapped_column(Text, nullable=True)
