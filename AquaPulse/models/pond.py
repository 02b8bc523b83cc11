from __future__ import annotations

from datetime import datetime
from sqlalchemy import String, DateTime, Numeric, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from utils.db import Base, IdType


class Pond(Base):
    __tablename__ = "pond"

    pond_id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    season_id: Mapped[int] = mapped_column(IdType, ForeignKey("season.season_id", ondelete="RESTRICT"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    size: Mapped[float] = mapped_column(Numeric(14, 2, asdecimal=False), default=0, nullable=False)  # m²
    capacity: Mapped[float] = mapped_column(Numeric(14, 2, asdecimal=False), default=0, nullable=False)  # organismos
    status: Mapped[str] = mapped_column(String(20), default="Inactive", nullable=False)  # Active/Completed/Inactive/Maintenance
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now(), nullable=False)

    season: Mapped["Season"] = relationship("Season", back_populates="ponds")
