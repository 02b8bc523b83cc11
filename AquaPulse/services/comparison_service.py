# services/comparison_service.py
"""
Comparación de dos estanques por métrica.

Por cada métrica: serie cruda de cada estanque → alineación temporal →
diferencia (A - B) solo donde ambos lados tienen valor → resumen.

MODOS:
- absolute: misma temporada o rango de fechas explícito; eje = fecha calendario.
- relative: entre temporadas; eje = "día N" desde el origen de cada estanque
  (inicio de temporada o fecha de siembra, según settings.RELATIVE_ORIGIN).
"""
from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from config.settings import settings
from enums.enums import AlignmentModeEnum, ComparisonMetricEnum, DayZeroOriginEnum, ReadingKindEnum
from schemas.comparison import (
    ComparisonPoint,
    ComparisonRequest,
    ComparisonResult,
    ComparisonSummary,
    MetricComparison,
    PondRef,
    SeriesPoint,
)
from schemas.records import MetricReading, PondRecord, SeasonRecord
from services import record_store
from services.alignment_service import Reducer, align, reduce_mean, reduce_sum
from services.calculation_service import calculate_average_weight_g, safe_mean
from utils.datetime_utils import as_datetime, now_local
from utils.errors import ValidationError
from utils.logging import get_logger

logger = get_logger(__name__)

DateRange = Tuple[datetime, datetime]


# ==================== CATÁLOGO DE MÉTRICAS ====================

@dataclass(frozen=True)
class MetricSpec:
    metric_id: str
    kind: ReadingKindEnum
    extract: Callable[[MetricReading], Optional[float]]
    reducer: Reducer = reduce_mean


def _field(name: str) -> Callable[[MetricReading], Optional[float]]:
    return lambda r: r.get(name)


def _average_weight_g(reading: MetricReading) -> Optional[float]:
    weight = reading.get("total_weight")
    count = reading.get("total_count")
    if weight is None or count is None:
        return None
    return calculate_average_weight_g(weight, count)


METRICS: Dict[str, MetricSpec] = {
    spec.metric_id: spec
    for spec in (
        MetricSpec(ComparisonMetricEnum.temperature.value, ReadingKindEnum.water_quality, _field("temperature")),
        MetricSpec(ComparisonMetricEnum.ph.value, ReadingKindEnum.water_quality, _field("ph")),
        MetricSpec(ComparisonMetricEnum.dissolved_oxygen.value, ReadingKindEnum.water_quality, _field("dissolved_oxygen")),
        MetricSpec(ComparisonMetricEnum.ammonia.value, ReadingKindEnum.water_quality, _field("ammonia")),
        MetricSpec(ComparisonMetricEnum.salinity.value, ReadingKindEnum.water_quality, _field("salinity")),
        MetricSpec(ComparisonMetricEnum.feed_consumption.value, ReadingKindEnum.feed, _field("quantity"), reduce_sum),
        MetricSpec(ComparisonMetricEnum.average_weight.value, ReadingKindEnum.growth, _average_weight_g),
    )
}


def to_series(readings: Sequence[MetricReading], spec: MetricSpec) -> List[SeriesPoint]:
    """Serie cronológica de la métrica; lecturas sin el campo se omiten."""
    points = []
    for r in sorted(readings, key=lambda r: r.timestamp):
        value = spec.extract(r)
        if value is not None:
            points.append(SeriesPoint(timestamp=r.timestamp, value=value))
    return points


# ==================== NÚCLEO PURO ====================

def validate_comparison(pond_a_id: int, pond_b_id: int, metric_ids: Sequence[str]) -> None:
    if pond_a_id == pond_b_id:
        raise ValidationError("No se puede comparar un estanque consigo mismo")
    if not metric_ids:
        raise ValidationError("Se requiere al menos una métrica")
    unknown = [m for m in metric_ids if m not in METRICS]
    if unknown:
        raise ValidationError(
            f"Métricas desconocidas: {', '.join(unknown)}. Valores: {', '.join(METRICS)}"
        )


def compare_series(
        metric_id: str,
        series_a: Sequence[SeriesPoint],
        series_b: Sequence[SeriesPoint],
        mode: AlignmentModeEnum,
        origin_a: Optional[datetime] = None,
        origin_b: Optional[datetime] = None,
        reducer: Reducer = reduce_mean,
) -> MetricComparison:
    aligned = align(series_a, series_b, mode, origin_a, origin_b, reducer=reducer)

    differences = []
    for point in aligned:
        diff = None
        if point.pond_a_value is not None and point.pond_b_value is not None:
            diff = point.pond_a_value - point.pond_b_value
        differences.append(ComparisonPoint(
            key=point.key,
            label=point.label,
            pond_a_value=point.pond_a_value,
            pond_b_value=point.pond_b_value,
            difference=diff,
        ))

    summary = ComparisonSummary(
        pond_a_data_points=len(series_a),
        pond_b_data_points=len(series_b),
        average_difference=safe_mean([d.difference for d in differences if d.difference is not None]),
    )
    return MetricComparison(
        metric=metric_id,
        pond_a_series=list(series_a),
        pond_b_series=list(series_b),
        differences=differences,
        summary=summary,
    )


def _in_range(readings: Sequence[MetricReading], date_range: Optional[DateRange]) -> List[MetricReading]:
    if date_range is None:
        return list(readings)
    start, end = date_range
    return [r for r in readings if start <= r.timestamp <= end]


def compare(
        pond_a: PondRecord,
        pond_b: PondRecord,
        metric_ids: Sequence[str],
        mode: AlignmentModeEnum,
        date_range: Optional[DateRange],
        readings_a: Mapping[ReadingKindEnum, Sequence[MetricReading]],
        readings_b: Mapping[ReadingKindEnum, Sequence[MetricReading]],
        origin_a: Optional[datetime] = None,
        origin_b: Optional[datetime] = None,
) -> ComparisonResult:
    """
    Comparación completa entre dos estanques con lecturas ya obtenidas.

    Determinista: mismas entradas, misma salida. No depende del reloj.
    En modo absolute, date_range acota las lecturas; en relative se ignora.
    """
    mode = AlignmentModeEnum(mode)
    validate_comparison(pond_a.pond_id, pond_b.pond_id, metric_ids)
    if mode == AlignmentModeEnum.relative and (origin_a is None or origin_b is None):
        raise ValidationError("No se pudo resolver el origen (día 0) de ambos estanques")
    scope = date_range if mode == AlignmentModeEnum.absolute else None

    metrics = {}
    for metric_id in metric_ids:
        spec = METRICS[metric_id]
        series_a = to_series(_in_range(readings_a.get(spec.kind, ()), scope), spec)
        series_b = to_series(_in_range(readings_b.get(spec.kind, ()), scope), spec)
        metrics[metric_id] = compare_series(
            metric_id, series_a, series_b, mode, origin_a, origin_b, reducer=spec.reducer
        )

    return ComparisonResult(
        mode=mode,
        period_start=scope[0] if scope else None,
        period_end=scope[1] if scope else None,
        metrics=metrics,
    )


# ==================== ORQUESTACIÓN (BD) ====================

_FETCHERS = {
    ReadingKindEnum.water_quality: record_store.fetch_water_quality_inputs,
    ReadingKindEnum.feed: record_store.fetch_feed_inputs,
    ReadingKindEnum.growth: record_store.fetch_growth_samplings,
}


def _resolve_date_range(request: ComparisonRequest, now: datetime) -> Tuple[DateRange, bool]:
    """
    Rango inclusivo del modo absolute. Devuelve (rango, explícito).
    Sin fechas: últimos COMPARISON_DEFAULT_RANGE_DAYS días hasta now.
    """
    explicit = request.start_date is not None or request.end_date is not None
    end = datetime.combine(request.end_date, time.max) if request.end_date else now
    if request.start_date:
        start = as_datetime(request.start_date)
    else:
        start = as_datetime((end - timedelta(days=settings.COMPARISON_DEFAULT_RANGE_DAYS)).date())
    if start > end:
        raise ValidationError("start_date no puede ser mayor que end_date")
    return (start, end), explicit


def _ensure_range_in_season(date_range: DateRange, season: SeasonRecord, label: str) -> None:
    start, end = date_range
    if start < as_datetime(season.start_date):
        raise ValidationError(f"El rango de fechas está fuera de la temporada del estanque {label} ({season.name})")
    if season.end_date is not None and end > datetime.combine(season.end_date, time.max):
        raise ValidationError(f"El rango de fechas está fuera de la temporada del estanque {label} ({season.name})")


def resolve_origin(
        db: Session,
        pond: PondRecord,
        season: SeasonRecord,
        policy: DayZeroOriginEnum,
) -> datetime:
    """
    Día 0 del estanque para el modo relativo.

    - season_start: fecha de inicio de la temporada del estanque.
    - stocking_date: fecha de siembra registrada; si hay varias se usa la más reciente.
    """
    if policy == DayZeroOriginEnum.season_start:
        return as_datetime(season.start_date)

    stockings = record_store.fetch_stocking_events(db, pond.season_id, pond_id=pond.pond_id)
    if not stockings:
        raise ValidationError(f"El estanque {pond.name} no tiene siembra registrada en la temporada {season.name}")
    return max(s.stocking_date for s in stockings)


def _pond_ref(pond: PondRecord, season: SeasonRecord, origin: Optional[datetime]) -> PondRef:
    return PondRef(
        pond_id=pond.pond_id,
        name=pond.name,
        season_id=season.season_id,
        season_name=season.name,
        origin=origin,
    )


def compare_ponds(
        db: Session,
        request: ComparisonRequest,
        mode: AlignmentModeEnum,
        now: Optional[datetime] = None,
        origin_policy: Optional[DayZeroOriginEnum] = None,
) -> ComparisonResult:
    validate_comparison(request.pond_a_id, request.pond_b_id, request.metrics)
    mode = AlignmentModeEnum(mode)

    pond_a = record_store.fetch_pond(db, request.pond_a_id)
    pond_b = record_store.fetch_pond(db, request.pond_b_id)
    season_a = record_store.fetch_season(db, pond_a.season_id)
    season_b = record_store.fetch_season(db, pond_b.season_id)

    date_range: Optional[DateRange] = None
    origin_a = origin_b = None
    if mode == AlignmentModeEnum.absolute:
        date_range, explicit = _resolve_date_range(request, now or now_local())
        if explicit:
            _ensure_range_in_season(date_range, season_a, "A")
            _ensure_range_in_season(date_range, season_b, "B")
    else:
        policy = DayZeroOriginEnum(origin_policy or settings.RELATIVE_ORIGIN)
        origin_a = resolve_origin(db, pond_a, season_a, policy)
        origin_b = resolve_origin(db, pond_b, season_b, policy)

    kinds = {METRICS[m].kind for m in request.metrics}
    readings_a = {k: _FETCHERS[k](db, pond_a.season_id, pond_id=pond_a.pond_id, date_range=date_range) for k in kinds}
    readings_b = {k: _FETCHERS[k](db, pond_b.season_id, pond_id=pond_b.pond_id, date_range=date_range) for k in kinds}

    result = compare(
        pond_a, pond_b, request.metrics, mode, date_range,
        readings_a, readings_b, origin_a, origin_b,
    )
    result.pond_a = _pond_ref(pond_a, season_a, origin_a)
    result.pond_b = _pond_ref(pond_b, season_b, origin_b)

    logger.info(
        "ponds_compared",
        mode=mode.value,
        pond_a_id=pond_a.pond_id,
        pond_b_id=pond_b.pond_id,
        metrics=list(request.metrics),
    )
    return result


# ==================== EXPORTACIÓN ====================

def _cell(value: Optional[float]) -> str:
    return "" if value is None else f"{value:.2f}"


def comparison_to_csv(result: ComparisonResult) -> str:
    """CSV plano: una fila por llave alineada y métrica. Celdas vacías = sin lectura."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    header_key = "Date" if result.mode == AlignmentModeEnum.absolute else "Day"
    writer.writerow([header_key, "Metric", "Pond A Value", "Pond B Value", "Difference"])
    for metric_id, comparison in result.metrics.items():
        for point in comparison.differences:
            writer.writerow([
                point.label,
                metric_id,
                _cell(point.pond_a_value),
                _cell(point.pond_b_value),
                _cell(point.difference),
            ])
    return buffer.getvalue()
