# services/analytics_service.py
"""
Servicio de analytics para dashboards de temporada.
Consumido por api/analytics.py

Cada función valida la temporada, lee los registros una sola vez por el
adaptador del record store y delega el cálculo al motor puro.
"""
from datetime import datetime, timedelta
from typing import Dict, Optional

from sqlalchemy.orm import Session

from schemas.analytics import FeedTrendResult, TrendResult
from services import record_store
from services.kpi_service import compute_kpis
from services.trend_service import compute_feed_trend, compute_trend, resolve_window
from utils.datetime_utils import now_local
from utils.errors import ValidationError
from utils.logging import get_logger

logger = get_logger(__name__)


def _require_season(db: Session, season_id: Optional[int]):
    if not season_id:
        raise ValidationError("season_id es requerido")
    return record_store.fetch_season(db, season_id)


def _window_range(now: datetime, days: int):
    return now - timedelta(days=days), now


def get_farm_kpis(db: Session, season_id: int) -> Dict[str, object]:
    """KPIs de la temporada ya redondeados para presentación."""
    _require_season(db, season_id)

    kpis = compute_kpis(
        season_id,
        ponds=record_store.fetch_ponds(db, season_id),
        feed=record_store.fetch_feed_inputs(db, season_id),
        water_quality=record_store.fetch_water_quality_inputs(db, season_id),
        growth=record_store.fetch_growth_samplings(db, season_id),
        harvests=record_store.fetch_harvest_events(db, season_id),
    )

    logger.info(
        "farm_kpis_computed",
        season_id=season_id,
        total_ponds=kpis.total_ponds,
        feed_entries=kpis.total_feed_entries,
    )
    return kpis.presented()


def get_water_quality_trends(
        db: Session,
        season_id: int,
        time_range: str = "week",
        now: Optional[datetime] = None,
) -> TrendResult:
    _require_season(db, season_id)
    window = resolve_window(time_range)
    now = now or now_local()

    readings = record_store.fetch_water_quality_inputs(db, season_id, date_range=_window_range(now, window.days))
    result = compute_trend(readings, time_range, now)

    logger.info(
        "water_quality_trends_computed",
        season_id=season_id,
        time_range=time_range,
        window_days=window.days,
        buckets=len(result.buckets),
        readings=result.summary.total_readings,
    )
    return result


def get_feed_consumption_trends(
        db: Session,
        season_id: int,
        time_range: str = "week",
        now: Optional[datetime] = None,
) -> FeedTrendResult:
    _require_season(db, season_id)
    window = resolve_window(time_range)
    now = now or now_local()

    readings = record_store.fetch_feed_inputs(db, season_id, date_range=_window_range(now, window.days))
    result = compute_feed_trend(readings, time_range, now)

    logger.info(
        "feed_consumption_trends_computed",
        season_id=season_id,
        time_range=time_range,
        window_days=window.days,
        buckets=len(result.buckets),
        feedings=result.summary.total_feedings,
    )
    return result
