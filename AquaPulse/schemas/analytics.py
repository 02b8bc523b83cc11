from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from enums.enums import BucketSizeEnum, PriorityEnum


def _round(value: Optional[float], ndigits: int) -> Optional[float]:
    return round(value, ndigits) if value is not None else None


# =====================================================
# 🟣 KPIs DE TEMPORADA
# =====================================================

class WaterQualitySummary(BaseModel):
    total_readings: int = 0
    avg_ph: Optional[float] = None
    avg_dissolved_oxygen: Optional[float] = None
    avg_temperature: Optional[float] = None
    avg_salinity: Optional[float] = None


class GrowthSummary(BaseModel):
    total_samplings: int = 0
    average_shrimp_weight: Optional[float] = None
    total_biomass: float = 0.0


class KpiSet(BaseModel):
    """
    KPIs de una temporada. Valores a precisión completa; usar presented()
    para la versión redondeada que se entrega al cliente.
    """
    season_id: int

    # Estanques
    total_ponds: int = 0
    active_ponds: int = 0
    completed_ponds: int = 0
    inactive_ponds: int = 0
    total_capacity: float = 0.0
    total_area: float = 0.0

    # Alimento
    total_feed_consumed: float = 0.0
    total_feed_entries: int = 0
    avg_daily_feed: Optional[float] = None

    # Crecimiento
    total_samplings: int = 0
    avg_shrimp_weight: Optional[float] = None
    total_biomass: float = 0.0
    total_shrimp_count: int = 0

    # Calidad de agua
    water_quality: WaterQualitySummary = Field(default_factory=WaterQualitySummary)

    # Cosechas
    total_harvests: int = 0
    total_harvest_weight: float = 0.0
    avg_harvest_weight: Optional[float] = None

    # Derivados
    average_fcr: Optional[float] = None
    pond_utilization: Optional[float] = None
    survival_rate: Optional[float] = None

    def presented(self) -> Dict[str, object]:
        data = self.model_dump()
        data["average_fcr"] = _round(self.average_fcr, 2)
        data["pond_utilization"] = _round(self.pond_utilization, 1)
        data["survival_rate"] = _round(self.survival_rate, 1)
        return data


# =====================================================
# 📈 TENDENCIAS
# =====================================================

class TrendWindow(BaseModel):
    days: int = Field(..., gt=0)
    bucket: BucketSizeEnum = BucketSizeEnum.day


class QualityIndicator(BaseModel):
    """Porcentaje de lecturas de `field` dentro de [min_value, max_value] (límites opcionales)."""
    name: str
    field: str
    min_value: Optional[float] = None
    max_value: Optional[float] = None

    def matches(self, value: float) -> bool:
        if self.min_value is not None and value < self.min_value:
            return False
        if self.max_value is not None and value > self.max_value:
            return False
        return True


class FieldStats(BaseModel):
    min: float
    avg: float
    max: float
    count: int


class TrendBucket(BaseModel):
    bucket_key: str
    reading_count: int
    metrics: Dict[str, FieldStats] = Field(default_factory=dict)


class IndicatorResult(BaseModel):
    count: int = 0
    percentage: float = 0.0


class TrendSummary(BaseModel):
    total_readings: int = 0
    averages: Dict[str, Optional[float]] = Field(default_factory=dict)
    quality_indicators: Dict[str, IndicatorResult] = Field(default_factory=dict)


class TrendResult(BaseModel):
    time_range: str
    start_date: datetime
    end_date: datetime
    bucket_size: BucketSizeEnum
    buckets: List[TrendBucket] = Field(default_factory=list)
    summary: TrendSummary = Field(default_factory=TrendSummary)


class FeedTypeUsage(BaseModel):
    feed_type: str
    quantity: float
    cost: float
    feeding_count: int
    avg_quantity_per_feeding: float


class FeedTrendBucket(BaseModel):
    bucket_key: str
    total_quantity: float
    total_cost: float
    total_feedings: int
    avg_feed_per_session: float
    feed_types: List[FeedTypeUsage] = Field(default_factory=list)


class FeedTrendSummary(BaseModel):
    total_quantity: float = 0.0
    total_cost: float = 0.0
    total_feedings: int = 0
    avg_quantity_per_feeding: Optional[float] = None
    avg_cost_per_kg: Optional[float] = None


class FeedTrendResult(BaseModel):
    time_range: str
    start_date: datetime
    end_date: datetime
    bucket_size: BucketSizeEnum
    buckets: List[FeedTrendBucket] = Field(default_factory=list)
    summary: FeedTrendSummary = Field(default_factory=FeedTrendSummary)


# =====================================================
# 💡 RECOMENDACIONES
# =====================================================

class Recommendation(BaseModel):
    category: str
    priority: PriorityEnum
    issue: str
    recommendation: str
    current_value: Union[float, str, None] = None
    target_range: str
