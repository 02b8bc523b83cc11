from __future__ import annotations

from datetime import datetime
from sqlalchemy import DateTime, Numeric, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from utils.db import Base, IdType


class GrowthSampling(Base):
    __tablename__ = "growth_sampling"

    growth_sampling_id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    season_id: Mapped[int] = mapped_column(IdType, ForeignKey("season.season_id"), nullable=False, index=True)
    pond_id: Mapped[int] = mapped_column(IdType, ForeignKey("pond.pond_id"), nullable=False, index=True)

    date: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, index=True)
    total_weight: Mapped[float] = mapped_column(Numeric(12, 3, asdecimal=False), nullable=False)  # kg
    total_count: Mapped[int] = mapped_column(Integer, nullable=False)
