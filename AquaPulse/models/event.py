from __future__ import annotations

from datetime import datetime
from sqlalchemy import DateTime, Numeric, String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from utils.db import Base, IdType


class Event(Base):
    """
    Evento operativo de un estanque (siembra, cosecha parcial/total, recambio...).
    harvest_weight / average_weight solo aplican a cosechas.
    """
    __tablename__ = "event"

    event_id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    season_id: Mapped[int] = mapped_column(IdType, ForeignKey("season.season_id"), nullable=False, index=True)
    pond_id: Mapped[int] = mapped_column(IdType, ForeignKey("pond.pond_id"), nullable=False, index=True)

    date: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, index=True)
    event_type: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    harvest_weight: Mapped[float | None] = mapped_column(Numeric(12, 3, asdecimal=False))  # kg
    average_weight: Mapped[float | None] = mapped_column(Numeric(8, 3, asdecimal=False))  # g
    notes: Mapped[str | None] = mapped_column(String(255))
