# services/kpi_service.py
"""
Agregador de KPIs de temporada.

Reduce los registros crudos de una temporada (estanques, alimento, calidad de
agua, muestreos de crecimiento y cosechas) a un KpiSet. Es puro e idempotente:
no consulta la BD, no muta los registros y no guarda estado entre llamadas.
"""
from typing import Iterable, List, Sequence, TypeVar

from enums.enums import PondStatusEnum
from schemas.analytics import GrowthSummary, KpiSet, WaterQualitySummary
from schemas.records import HarvestEvent, MetricReading, PondRecord
from services.calculation_service import (
    calculate_fcr,
    calculate_survival_rate,
    calculate_weighted_avg_weight,
    field_values,
    percentage,
    safe_mean,
)

T = TypeVar("T")


def _in_season(records: Iterable[T], season_id: int) -> List[T]:
    # Sin fugas entre temporadas: lo que no pertenece a la temporada se ignora
    return [r for r in records if r.season_id == season_id]


# ==================== RESÚMENES PARCIALES ====================

def summarize_water_quality(readings: Sequence[MetricReading]) -> WaterQualitySummary:
    """Promedio aritmético por parámetro; None si no hay lecturas de ese parámetro."""
    return WaterQualitySummary(
        total_readings=len(readings),
        avg_ph=safe_mean(field_values(readings, "ph")),
        avg_dissolved_oxygen=safe_mean(field_values(readings, "dissolved_oxygen")),
        avg_temperature=safe_mean(field_values(readings, "temperature")),
        avg_salinity=safe_mean(field_values(readings, "salinity")),
    )


def summarize_growth(readings: Sequence[MetricReading]) -> GrowthSummary:
    total_weight = sum(field_values(readings, "total_weight"))
    total_count = sum(field_values(readings, "total_count"))
    return GrowthSummary(
        total_samplings=len(readings),
        average_shrimp_weight=calculate_weighted_avg_weight(total_weight, total_count),
        total_biomass=total_weight,
    )


# ==================== KPIs ====================

def compute_kpis(
        season_id: int,
        ponds: Sequence[PondRecord],
        feed: Sequence[MetricReading],
        water_quality: Sequence[MetricReading],
        growth: Sequence[MetricReading],
        harvests: Sequence[HarvestEvent] = (),
) -> KpiSet:
    """
    KPIs de la temporada.

    Reglas:
    - inactivos = total - activos - completados (estatus desconocido cuenta como inactivo)
    - avg_daily_feed es el promedio por REGISTRO de alimento, no por día calendario
    - avg_shrimp_weight = Σ peso / Σ conteo (ponderado)
    - FCR = alimento / biomasa, solo con biomasa > 0
    - utilización = activos / total × 100, None sin estanques
    - supervivencia = conteo / capacidad × 100, None sin conteo o sin capacidad
    """
    ponds = _in_season(ponds, season_id)
    feed = _in_season(feed, season_id)
    water_quality = _in_season(water_quality, season_id)
    growth = _in_season(growth, season_id)
    harvests = _in_season(harvests, season_id)

    total_ponds = len(ponds)
    active_ponds = sum(1 for p in ponds if p.status == PondStatusEnum.active.value)
    completed_ponds = sum(1 for p in ponds if p.status == PondStatusEnum.completed.value)
    total_capacity = sum(p.capacity or 0 for p in ponds)
    total_area = sum(p.size or 0 for p in ponds)

    quantities = field_values(feed, "quantity")
    total_feed = sum(quantities)

    growth_summary = summarize_growth(growth)
    total_count = int(sum(field_values(growth, "total_count")))

    harvest_weights = [h.harvest_weight for h in harvests if h.harvest_weight is not None]
    harvest_avg_weights = [h.average_weight for h in harvests if h.average_weight is not None]

    return KpiSet(
        season_id=season_id,
        total_ponds=total_ponds,
        active_ponds=active_ponds,
        completed_ponds=completed_ponds,
        inactive_ponds=total_ponds - active_ponds - completed_ponds,
        total_capacity=total_capacity,
        total_area=total_area,
        total_feed_consumed=total_feed,
        total_feed_entries=len(feed),
        avg_daily_feed=safe_mean(quantities),
        total_samplings=growth_summary.total_samplings,
        avg_shrimp_weight=growth_summary.average_shrimp_weight,
        total_biomass=growth_summary.total_biomass,
        total_shrimp_count=total_count,
        water_quality=summarize_water_quality(water_quality),
        total_harvests=len(harvests),
        total_harvest_weight=sum(harvest_weights),
        avg_harvest_weight=safe_mean(harvest_avg_weights),
        average_fcr=calculate_fcr(total_feed, growth_summary.total_biomass),
        pond_utilization=percentage(active_ponds, total_ponds),
        survival_rate=calculate_survival_rate(total_count, total_capacity),
    )
