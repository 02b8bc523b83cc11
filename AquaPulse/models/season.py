from __future__ import annotations

from datetime import datetime, date
from sqlalchemy import String, Date, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from utils.db import Base, IdType


class Season(Base):
    __tablename__ = "season"

    season_id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date)
    status: Mapped[str] = mapped_column(String(20), default="Planning", nullable=False)  # Planning/Active/Completed
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now(), nullable=False)

    ponds: Mapped[list["Pond"]] = relationship("Pond", back_populates="season")
