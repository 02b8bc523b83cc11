# schemas/records.py
"""
Registros normalizados que consume el motor de analytics.

El adaptador del record store (services/record_store.py) convierte las filas
ORM a estos modelos inmutables antes de cualquier cálculo; el motor nunca
recibe objetos SQLAlchemy ni referencias "a veces pobladas".
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from enums.enums import ReadingKindEnum


class _Frozen(BaseModel):
    model_config = {"frozen": True}


class SeasonRecord(_Frozen):
    season_id: int
    name: str
    start_date: date
    end_date: Optional[date] = None
    status: str


class PondRecord(_Frozen):
    pond_id: int
    season_id: int
    name: str
    size: float = 0.0
    capacity: float = 0.0
    status: str


class MetricReading(_Frozen):
    """
    Lectura operativa con campos numéricos nombrados.

    - feed: quantity, unit_cost (opcional) + feed_type
    - water_quality: ph, dissolved_oxygen, temperature, salinity, ammonia
    - growth: total_weight, total_count
    Un campo ausente significa "sin medición", distinto de 0.
    """
    kind: ReadingKindEnum
    pond_id: int
    season_id: int
    timestamp: datetime
    values: Dict[str, float] = Field(default_factory=dict)
    feed_type: Optional[str] = None

    def get(self, field: str) -> Optional[float]:
        return self.values.get(field)


class HarvestEvent(_Frozen):
    pond_id: int
    season_id: int
    timestamp: datetime
    event_type: str  # PartialHarvest | FullHarvest
    harvest_weight: Optional[float] = None
    average_weight: Optional[float] = None


class StockingEvent(_Frozen):
    pond_id: int
    season_id: int
    stocking_date: datetime


class EventCount(_Frozen):
    event_type: str
    count: int


class FeedTypeBreakdown(_Frozen):
    feed_type: str
    total_quantity: float
    total_cost: float
    feeding_count: int


class SeasonSnapshot(_Frozen):
    """Foto inmutable de una temporada, leída una sola vez al inicio del request."""
    season: SeasonRecord
    ponds: List[PondRecord] = Field(default_factory=list)
    feed: List[MetricReading] = Field(default_factory=list)
    water_quality: List[MetricReading] = Field(default_factory=list)
    growth: List[MetricReading] = Field(default_factory=list)
    harvests: List[HarvestEvent] = Field(default_factory=list)
    events: List[EventCount] = Field(default_factory=list)
    feed_breakdown: List[FeedTypeBreakdown] = Field(default_factory=list)
