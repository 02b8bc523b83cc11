# services/trend_service.py
"""
Bucketing de tendencias por calendario.

- time_range (week/month/quarter) se resuelve a una TrendWindow: días de
  ventana hacia atrás desde "now" y tamaño de bucket.
- La tabla de ventanas viene de settings (TREND_WINDOW_DAYS / TREND_BUCKET_SIZE);
  por defecto todos los rangos usan buckets diarios, incluido quarter.
- El resumen se calcula en una pasada aparte sobre las lecturas SIN bucketear,
  no como promedio de buckets.
"""
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from config.settings import settings
from enums.enums import BucketSizeEnum, TimeRangeEnum
from schemas.analytics import (
    FeedTrendBucket,
    FeedTrendResult,
    FeedTrendSummary,
    FeedTypeUsage,
    FieldStats,
    IndicatorResult,
    QualityIndicator,
    TrendBucket,
    TrendResult,
    TrendSummary,
    TrendWindow,
)
from schemas.records import MetricReading
from services.calculation_service import field_values, percentage, safe_mean, safe_ratio
from utils.datetime_utils import date_key, week_key
from utils.errors import ValidationError

WATER_QUALITY_FIELDS: Tuple[str, ...] = ("ph", "dissolved_oxygen", "temperature", "salinity")

DEFAULT_QUALITY_INDICATORS: Tuple[QualityIndicator, ...] = (
    QualityIndicator(name="optimal_ph", field="ph", min_value=7.5, max_value=8.5),
    QualityIndicator(name="optimal_dissolved_oxygen", field="dissolved_oxygen", min_value=5.0),
    QualityIndicator(name="optimal_temperature", field="temperature", min_value=26.0, max_value=32.0),
)

UNKNOWN_FEED_TYPE = "Unknown"

_BUCKET_KEYS: Dict[BucketSizeEnum, Callable[[datetime], str]] = {
    BucketSizeEnum.day: date_key,
    BucketSizeEnum.week: week_key,
}


# ==================== VENTANAS ====================

def default_windows() -> Dict[str, TrendWindow]:
    """Tabla time_range -> ventana a partir de la configuración."""
    windows = {}
    for time_range in TimeRangeEnum:
        days = settings.TREND_WINDOW_DAYS.get(time_range.value)
        if days is None:
            continue
        bucket = settings.TREND_BUCKET_SIZE.get(time_range.value, BucketSizeEnum.day.value)
        windows[time_range.value] = TrendWindow(days=days, bucket=bucket)
    return windows


def resolve_window(time_range: str, windows: Optional[Mapping[str, TrendWindow]] = None) -> TrendWindow:
    table = windows if windows is not None else default_windows()
    window = table.get(time_range)
    if window is None:
        raise ValidationError(
            f"time_range inválido: {time_range}. Valores: {', '.join(sorted(table))}"
        )
    return window


def filter_window(
        readings: Sequence[MetricReading], now: datetime, window: TrendWindow
) -> Tuple[datetime, List[MetricReading]]:
    """Lecturas dentro de [now - ventana, now], en orden cronológico."""
    start = now - timedelta(days=window.days)
    selected = [r for r in readings if start <= r.timestamp <= now]
    selected.sort(key=lambda r: r.timestamp)
    return start, selected


def _group(readings: Sequence[MetricReading], bucket: BucketSizeEnum) -> Dict[str, List[MetricReading]]:
    key_of = _BUCKET_KEYS[bucket]
    groups: Dict[str, List[MetricReading]] = defaultdict(list)
    for r in readings:
        groups[key_of(r.timestamp)].append(r)
    return groups


# ==================== TENDENCIA GENÉRICA ====================

def _field_stats(values: List[float]) -> FieldStats:
    return FieldStats(min=min(values), avg=sum(values) / len(values), max=max(values), count=len(values))


def _summarize(
        readings: Sequence[MetricReading],
        fields: Sequence[str],
        indicators: Sequence[QualityIndicator],
) -> TrendSummary:
    total = len(readings)
    averages = {field: safe_mean(field_values(readings, field)) for field in fields}

    quality = {}
    for indicator in indicators:
        hits = sum(1 for v in field_values(readings, indicator.field) if indicator.matches(v))
        pct = percentage(hits, total)
        quality[indicator.name] = IndicatorResult(count=hits, percentage=round(pct, 1) if pct is not None else 0.0)

    return TrendSummary(total_readings=total, averages=averages, quality_indicators=quality)


def compute_trend(
        readings: Sequence[MetricReading],
        time_range: str,
        now: datetime,
        fields: Sequence[str] = WATER_QUALITY_FIELDS,
        windows: Optional[Mapping[str, TrendWindow]] = None,
        indicators: Optional[Sequence[QualityIndicator]] = None,
) -> TrendResult:
    """
    Tendencia por buckets de una métrica.

    Cada lectura dentro de la ventana cae en exactamente un bucket; las de
    fuera no aparecen. Sin lecturas: buckets vacíos, promedios None e
    indicadores en 0. Nunca lanza por entrada vacía.
    """
    window = resolve_window(time_range, windows)
    start, selected = filter_window(readings, now, window)
    indicators = DEFAULT_QUALITY_INDICATORS if indicators is None else indicators

    buckets = []
    for key, group in sorted(_group(selected, window.bucket).items()):
        metrics = {}
        for field in fields:
            values = field_values(group, field)
            if values:
                metrics[field] = _field_stats(values)
        buckets.append(TrendBucket(bucket_key=key, reading_count=len(group), metrics=metrics))

    return TrendResult(
        time_range=time_range,
        start_date=start,
        end_date=now,
        bucket_size=window.bucket,
        buckets=buckets,
        summary=_summarize(selected, fields, indicators),
    )


# ==================== TENDENCIA DE ALIMENTO ====================

def _feed_cost(reading: MetricReading) -> float:
    unit_cost = reading.get("unit_cost")
    quantity = reading.get("quantity") or 0.0
    return quantity * unit_cost if unit_cost is not None else 0.0


def _feed_type_usage(group: Sequence[MetricReading]) -> List[FeedTypeUsage]:
    by_type: Dict[str, List[MetricReading]] = defaultdict(list)
    for r in group:
        by_type[r.feed_type or UNKNOWN_FEED_TYPE].append(r)

    usage = []
    for feed_type, items in sorted(by_type.items()):
        quantity = sum(field_values(items, "quantity"))
        usage.append(FeedTypeUsage(
            feed_type=feed_type,
            quantity=quantity,
            cost=sum(_feed_cost(r) for r in items),
            feeding_count=len(items),
            avg_quantity_per_feeding=quantity / len(items),
        ))
    return usage


def compute_feed_trend(
        readings: Sequence[MetricReading],
        time_range: str,
        now: datetime,
        windows: Optional[Mapping[str, TrendWindow]] = None,
) -> FeedTrendResult:
    """
    Consumo de alimento por bucket con desglose por tipo de alimento.
    Costo = cantidad × costo unitario del insumo (0 si el insumo no tiene costo).
    """
    window = resolve_window(time_range, windows)
    start, selected = filter_window(readings, now, window)

    buckets = []
    for key, group in sorted(_group(selected, window.bucket).items()):
        quantity = sum(field_values(group, "quantity"))
        buckets.append(FeedTrendBucket(
            bucket_key=key,
            total_quantity=quantity,
            total_cost=sum(_feed_cost(r) for r in group),
            total_feedings=len(group),
            avg_feed_per_session=quantity / len(group),
            feed_types=_feed_type_usage(group),
        ))

    total_quantity = sum(field_values(selected, "quantity"))
    total_cost = sum(_feed_cost(r) for r in selected)
    summary = FeedTrendSummary(
        total_quantity=total_quantity,
        total_cost=total_cost,
        total_feedings=len(selected),
        avg_quantity_per_feeding=safe_mean(field_values(selected, "quantity")),
        avg_cost_per_kg=safe_ratio(total_cost, total_quantity),
    )

    return FeedTrendResult(
        time_range=time_range,
        start_date=start,
        end_date=now,
        bucket_size=window.bucket,
        buckets=buckets,
        summary=summary,
    )
