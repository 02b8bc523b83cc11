# services/reporting_service.py
"""
Compilador del reporte de granja por temporada.

compile_report arma un solo objeto anidado (metadatos, resumen ejecutivo,
análisis detallado por área, recomendaciones y apéndice de estanques) a
partir de valores ya agregados. La salida CSV es un post-proceso del mismo
objeto: nunca vuelve a agregar.
"""
import csv
import io
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Union

from sqlalchemy.orm import Session

from enums.enums import PondStatusEnum, ReportFormatEnum
from schemas.analytics import GrowthSummary, KpiSet, WaterQualitySummary
from schemas.records import EventCount, FeedTypeBreakdown, PondRecord, SeasonRecord
from services import record_store
from services.calculation_service import percentage
from services.kpi_service import compute_kpis, summarize_growth, summarize_water_quality
from services.recommendation_service import generate_recommendations
from utils.datetime_utils import now_local
from utils.errors import ValidationError
from utils.logging import get_logger

logger = get_logger(__name__)

REPORT_VERSION = "1.0"


def _r(value: Optional[float], ndigits: int = 2) -> Optional[float]:
    return round(value, ndigits) if value is not None else None


# ==================== SECCIONES ====================

def _pond_management(ponds: Sequence[PondRecord]) -> Dict[str, Any]:
    return {
        "total_ponds": len(ponds),
        "pond_distribution": {
            "active": sum(1 for p in ponds if p.status == PondStatusEnum.active.value),
            "completed": sum(1 for p in ponds if p.status == PondStatusEnum.completed.value),
            "inactive": sum(1 for p in ponds if p.status == PondStatusEnum.inactive.value),
        },
        "total_area": sum(p.size or 0 for p in ponds),
        "total_capacity": sum(p.capacity or 0 for p in ponds),
    }


def _feed_management(feed_breakdown: Sequence[FeedTypeBreakdown]) -> Dict[str, Any]:
    return {
        "feed_types": [f.model_dump() for f in feed_breakdown],
        "total_feed_consumed": sum(f.total_quantity for f in feed_breakdown),
        "total_feed_cost": sum(f.total_cost for f in feed_breakdown),
        "total_feedings": sum(f.feeding_count for f in feed_breakdown),
    }


def _water_quality_management(summary: WaterQualitySummary) -> Dict[str, Any]:
    return {
        "total_readings": summary.total_readings,
        "average_parameters": {
            "ph": _r(summary.avg_ph),
            "dissolved_oxygen": _r(summary.avg_dissolved_oxygen),
            "temperature": _r(summary.avg_temperature),
            "salinity": _r(summary.avg_salinity),
        },
    }


def _growth_performance(summary: GrowthSummary) -> Dict[str, Any]:
    # Peso promedio en kg por organismo; se conservan 4 decimales para no perder gramos
    return {
        "total_samplings": summary.total_samplings,
        "average_shrimp_weight": _r(summary.average_shrimp_weight, 4),
        "total_biomass": _r(summary.total_biomass),
    }


def _events_summary(events: Sequence[EventCount]) -> Dict[str, Any]:
    return {
        "event_types": [e.model_dump() for e in events],
        "total_events": sum(e.count for e in events),
    }


def _season_period(season: SeasonRecord) -> str:
    end = season.end_date.isoformat() if season.end_date else "N/A"
    return f"{season.start_date.isoformat()} to {end}"


# ==================== COMPILACIÓN ====================

def compile_report(
        season: SeasonRecord,
        kpis: KpiSet,
        pond_details: Sequence[PondRecord],
        feed_breakdown: Sequence[FeedTypeBreakdown],
        water_quality_summary: WaterQualitySummary,
        growth_summary: GrowthSummary,
        event_breakdown: Sequence[EventCount],
        generated_at: datetime,
        generated_by: str = "System",
) -> Dict[str, Any]:
    """
    Reporte completo de la temporada.

    - total_investment = costo total de alimento (Σ cantidad × costo unitario)
    - total_production = peso total cosechado
    - completion_rate = completados / total × 100 (0 sin estanques)
    """
    feed_section = _feed_management(feed_breakdown)
    completion = percentage(kpis.completed_ponds, kpis.total_ponds)
    recommendations = generate_recommendations(kpis, water_quality_summary)

    return {
        "report_metadata": {
            "generated_at": generated_at.isoformat(),
            "season_id": season.season_id,
            "season_name": season.name,
            "generated_by": generated_by,
            "report_version": REPORT_VERSION,
        },
        "executive_summary": {
            "season_period": _season_period(season),
            "total_ponds": kpis.total_ponds,
            "active_ponds": kpis.active_ponds,
            "completion_rate": round(completion, 1) if completion is not None else 0.0,
            "total_investment": feed_section["total_feed_cost"],
            "total_production": kpis.total_harvest_weight,
            "overall_fcr": _r(kpis.average_fcr),
        },
        "detailed_analysis": {
            "pond_management": _pond_management(pond_details),
            "feed_management": feed_section,
            "water_quality_management": _water_quality_management(water_quality_summary),
            "growth_performance": _growth_performance(growth_summary),
            "events_summary": _events_summary(event_breakdown),
        },
        "recommendations": [r.model_dump(mode="json") for r in recommendations],
        "appendices": {
            "pond_details": [
                {
                    "id": p.pond_id,
                    "name": p.name,
                    "size": p.size,
                    "capacity": p.capacity,
                    "status": p.status,
                }
                for p in pond_details
            ],
        },
    }


# ==================== SALIDA ====================

def _cell(value: Any) -> str:
    return "N/A" if value is None else str(value)


def flatten_report_csv(report: Dict[str, Any]) -> str:
    """
    CSV de resumen: metadatos, resumen ejecutivo y recomendaciones.
    El writer de csv entrecomilla solo las celdas que lo necesitan (comas,
    comillas o saltos de línea dentro del texto).
    """
    meta = report["report_metadata"]
    summary = report["executive_summary"]

    rows: List[List[str]] = [
        ["Farm Report Summary"],
        ["Generated At", meta["generated_at"]],
        ["Season", meta["season_name"]],
        [""],
        ["Executive Summary"],
        ["Total Ponds", _cell(summary["total_ponds"])],
        ["Active Ponds", _cell(summary["active_ponds"])],
        ["Completion Rate (%)", _cell(summary["completion_rate"])],
        ["Total Investment", _cell(summary["total_investment"])],
        ["Total Production", _cell(summary["total_production"])],
        ["Overall FCR", _cell(summary["overall_fcr"])],
        [""],
        ["Recommendations"],
    ]
    for rec in report["recommendations"]:
        rows.append([rec["category"], rec["priority"], rec["issue"], rec["recommendation"]])

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue()


def render_report(report: Dict[str, Any], fmt: Union[str, ReportFormatEnum]) -> Union[Dict[str, Any], str]:
    try:
        fmt = ReportFormatEnum(fmt)
    except ValueError:
        raise ValidationError("Formato inválido. Formatos soportados: json, csv")
    if fmt == ReportFormatEnum.csv:
        return flatten_report_csv(report)
    return report


# ==================== ORQUESTACIÓN (BD) ====================

def generate_farm_report(db: Session, season_id: int, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Lee la foto de la temporada una sola vez y compila el reporte."""
    if not season_id:
        raise ValidationError("season_id es requerido")

    snapshot = record_store.load_season_snapshot(db, season_id)
    kpis = compute_kpis(
        season_id,
        snapshot.ponds,
        snapshot.feed,
        snapshot.water_quality,
        snapshot.growth,
        snapshot.harvests,
    )
    report = compile_report(
        season=snapshot.season,
        kpis=kpis,
        pond_details=snapshot.ponds,
        feed_breakdown=snapshot.feed_breakdown,
        water_quality_summary=summarize_water_quality(snapshot.water_quality),
        growth_summary=summarize_growth(snapshot.growth),
        event_breakdown=snapshot.events,
        generated_at=now or now_local(),
    )

    logger.info(
        "farm_report_generated",
        season_id=season_id,
        ponds=kpis.total_ponds,
        recommendations=len(report["recommendations"]),
    )
    return report
