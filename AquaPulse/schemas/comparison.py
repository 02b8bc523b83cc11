from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from enums.enums import AlignmentModeEnum


# =====================================================
# 🟢 INPUT SCHEMAS
# =====================================================

class ComparisonRequest(BaseModel):
    """
    Cuerpo de las comparaciones de estanques.
    Las reglas de negocio (pond_a != pond_b, al menos una métrica, rango válido)
    se validan en el servicio y se reportan como ValidationError (400).
    """
    pond_a_id: int = Field(..., gt=0)
    pond_b_id: int = Field(..., gt=0)
    metrics: List[str] = Field(default_factory=list)
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class ComparisonExportRequest(ComparisonRequest):
    mode: AlignmentModeEnum = AlignmentModeEnum.absolute


# =====================================================
# 🟣 OUTPUT SCHEMAS
# =====================================================

class SeriesPoint(BaseModel):
    timestamp: datetime
    value: float


class ComparisonPoint(BaseModel):
    """Punto alineado. None = sin lectura para esa llave (distinto de 0)."""
    key: Union[str, int]
    label: str
    pond_a_value: Optional[float] = None
    pond_b_value: Optional[float] = None
    difference: Optional[float] = None


class ComparisonSummary(BaseModel):
    pond_a_data_points: int = 0
    pond_b_data_points: int = 0
    average_difference: Optional[float] = None


class MetricComparison(BaseModel):
    metric: str
    pond_a_series: List[SeriesPoint] = Field(default_factory=list)
    pond_b_series: List[SeriesPoint] = Field(default_factory=list)
    differences: List[ComparisonPoint] = Field(default_factory=list)
    summary: ComparisonSummary = Field(default_factory=ComparisonSummary)


class PondRef(BaseModel):
    pond_id: int
    name: str
    season_id: int
    season_name: Optional[str] = None
    origin: Optional[datetime] = None


class ComparisonResult(BaseModel):
    mode: AlignmentModeEnum
    pond_a: Optional[PondRef] = None
    pond_b: Optional[PondRef] = None
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    metrics: Dict[str, MetricComparison] = Field(default_factory=dict)


class SeasonOut(BaseModel):
    season_id: int
    name: str
    start_date: date
    end_date: Optional[date] = None
    status: str


class PondListItemOut(BaseModel):
    pond_id: int
    name: str
    status: str
    season: SeasonOut
