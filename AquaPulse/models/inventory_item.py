from __future__ import annotations

from sqlalchemy import String, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from utils.db import Base, IdType


class InventoryItem(Base):
    """Insumo de inventario. Para alimento: nombre comercial y costo unitario por kg."""
    __tablename__ = "inventory_item"

    inventory_item_id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    item_name: Mapped[str] = mapped_column(String(120), nullable=False)
    item_type: Mapped[str] = mapped_column(String(40), default="Feed", nullable=False)
    unit_cost: Mapped[float | None] = mapped_column(Numeric(12, 4, asdecimal=False))
