from __future__ import annotations

from datetime import datetime
from sqlalchemy import DateTime, Numeric, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from utils.db import Base, IdType


class WaterQualityInput(Base):
    __tablename__ = "water_quality_input"

    water_quality_input_id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    season_id: Mapped[int] = mapped_column(IdType, ForeignKey("season.season_id"), nullable=False, index=True)
    pond_id: Mapped[int] = mapped_column(IdType, ForeignKey("pond.pond_id"), nullable=False, index=True)

    date: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, index=True)
    ph: Mapped[float | None] = mapped_column(Numeric(5, 2, asdecimal=False))
    dissolved_oxygen: Mapped[float | None] = mapped_column(Numeric(6, 2, asdecimal=False))  # mg/L
    temperature: Mapped[float | None] = mapped_column(Numeric(5, 2, asdecimal=False))  # °C
    salinity: Mapped[float | None] = mapped_column(Numeric(6, 2, asdecimal=False))  # ppt
    ammonia: Mapped[float | None] = mapped_column(Numeric(6, 3, asdecimal=False))  # mg/L
