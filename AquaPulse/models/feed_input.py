from __future__ import annotations

from datetime import datetime
from sqlalchemy import DateTime, Numeric, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from utils.db import Base, IdType


class FeedInput(Base):
    __tablename__ = "feed_input"

    feed_input_id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    season_id: Mapped[int] = mapped_column(IdType, ForeignKey("season.season_id"), nullable=False, index=True)
    pond_id: Mapped[int] = mapped_column(IdType, ForeignKey("pond.pond_id"), nullable=False, index=True)
    inventory_item_id: Mapped[int | None] = mapped_column(IdType, ForeignKey("inventory_item.inventory_item_id"))

    date: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, index=True)
    quantity: Mapped[float] = mapped_column(Numeric(12, 3, asdecimal=False), nullable=False)  # kg
    notes: Mapped[str | None] = mapped_column(String(255))

    feed_item: Mapped["InventoryItem | None"] = relationship("InventoryItem", foreign_keys=[inventory_item_id])
