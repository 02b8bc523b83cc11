"""
Endpoints de analytics de temporada: KPIs, tendencias y reporte de granja.
"""

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import Dict, Any

from enums.enums import ReportFormatEnum, TimeRangeEnum
from schemas.analytics import FeedTrendResult, TrendResult
from utils.db import get_db
from utils.datetime_utils import now_local

from services.analytics_service import (
    get_farm_kpis,
    get_water_quality_trends,
    get_feed_consumption_trends,
)
from services.reporting_service import generate_farm_report, render_report

router = APIRouter(prefix="/analytics", tags=["Analytics"])


# ==========================================
# GET - KPIs de la temporada
# ==========================================

@router.get(
    "/seasons/{season_id}/kpis",
    response_model=Dict[str, Any],
    summary="KPIs de la temporada",
    description=(
            "Retorna los KPIs agregados de la temporada:\n\n"
            "- Estanques totales / activos / completados / inactivos\n"
            "- Alimento total y promedio por registro (kg)\n"
            "- Peso promedio ponderado y biomasa de muestreos\n"
            "- Promedios de calidad de agua\n"
            "- FCR, utilización de estanques y supervivencia\n\n"
            "Los KPIs sin datos se devuelven como null."
    )
)
def season_kpis(
        season_id: int = Path(..., gt=0, description="ID de la temporada"),
        db: Session = Depends(get_db),
) -> Dict[str, Any]:
    return get_farm_kpis(db, season_id)


# ==========================================
# GET - Tendencias
# ==========================================

@router.get(
    "/seasons/{season_id}/water-quality-trends",
    response_model=TrendResult,
    summary="Tendencias de calidad de agua",
)
def water_quality_trends(
        season_id: int = Path(..., gt=0, description="ID de la temporada"),
        time_range: TimeRangeEnum = Query(TimeRangeEnum.week, description="week | month | quarter"),
        db: Session = Depends(get_db),
):
    return get_water_quality_trends(db, season_id, time_range.value)


@router.get(
    "/seasons/{season_id}/feed-consumption-trends",
    response_model=FeedTrendResult,
    summary="Tendencias de consumo de alimento",
)
def feed_consumption_trends(
        season_id: int = Path(..., gt=0, description="ID de la temporada"),
        time_range: TimeRangeEnum = Query(TimeRangeEnum.week, description="week | month | quarter"),
        db: Session = Depends(get_db),
):
    return get_feed_consumption_trends(db, season_id, time_range.value)


# ==========================================
# GET - Reporte de granja
# ==========================================

@router.get(
    "/seasons/{season_id}/report",
    summary="Reporte de granja de la temporada",
    description="format=json devuelve el reporte completo; format=csv descarga el resumen.",
)
def farm_report(
        season_id: int = Path(..., gt=0, description="ID de la temporada"),
        format: str = Query(ReportFormatEnum.json.value, description="json | csv"),
        db: Session = Depends(get_db),
):
    now = now_local()
    report = generate_farm_report(db, season_id, now=now)
    rendered = render_report(report, format)
    if isinstance(rendered, str):
        filename = f"farm-report-{season_id}-{now.strftime('%Y%m%d%H%M%S')}.csv"
        return Response(
            content=rendered,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )
    return rendered
