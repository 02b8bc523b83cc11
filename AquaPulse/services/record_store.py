# services/record_store.py
"""
Adaptador del record store.

Única capa del motor que toca la BD. Lee filas ORM y las convierte a los
registros normalizados de schemas/records.py; los servicios de cálculo solo
reciben esas fotos inmutables.

Filtros comunes:
- season_id: obligatorio en todas las lecturas.
- pond_id: opcional.
- date_range: (inicio, fin) inclusivo sobre la fecha de la lectura.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import desc, func
from sqlalchemy.orm import Query, Session

from enums.enums import EventTypeEnum, HARVEST_EVENT_TYPES, ReadingKindEnum, SeasonStatusEnum
from models.event import Event
from models.feed_input import FeedInput
from models.growth_sampling import GrowthSampling
from models.inventory_item import InventoryItem
from models.pond import Pond
from models.season import Season
from models.water_quality import WaterQualityInput
from schemas.records import (
    EventCount,
    FeedTypeBreakdown,
    HarvestEvent,
    MetricReading,
    PondRecord,
    SeasonRecord,
    SeasonSnapshot,
    StockingEvent,
)
from utils.datetime_utils import DateLike, to_day_bounds
from utils.errors import NotFoundError

DateRange = Tuple[DateLike, DateLike]

_WATER_FIELDS = ("ph", "dissolved_oxygen", "temperature", "salinity", "ammonia")


# -------- conversión ORM -> registro --------

def _season_record(row: Season) -> SeasonRecord:
    return SeasonRecord(
        season_id=int(row.season_id),
        name=row.name,
        start_date=row.start_date,
        end_date=row.end_date,
        status=row.status,
    )


def _pond_record(row: Pond) -> PondRecord:
    return PondRecord(
        pond_id=int(row.pond_id),
        season_id=int(row.season_id),
        name=row.name,
        size=float(row.size or 0),
        capacity=float(row.capacity or 0),
        status=row.status,
    )


def _numeric_values(row, fields) -> dict:
    # Solo campos con medición; None no se convierte en 0
    return {f: float(getattr(row, f)) for f in fields if getattr(row, f) is not None}


def _apply_filters(q: Query, model, season_id: int, pond_id: Optional[int], date_range: Optional[DateRange]) -> Query:
    q = q.filter(model.season_id == season_id)
    if pond_id is not None:
        q = q.filter(model.pond_id == pond_id)
    if date_range is not None:
        start, end = to_day_bounds(*date_range)
        q = q.filter(model.date >= start, model.date <= end)
    return q.order_by(model.date.asc())


# -------- temporadas / estanques --------

def fetch_season(db: Session, season_id: int) -> SeasonRecord:
    row = db.get(Season, season_id)
    if not row:
        raise NotFoundError("Temporada")
    return _season_record(row)


def fetch_pond(db: Session, pond_id: int) -> PondRecord:
    row = db.get(Pond, pond_id)
    if not row:
        raise NotFoundError("Estanque")
    return _pond_record(row)


def fetch_ponds(db: Session, season_id: int) -> List[PondRecord]:
    rows = db.query(Pond).filter(Pond.season_id == season_id).order_by(Pond.pond_id.asc()).all()
    return [_pond_record(r) for r in rows]


def list_ponds_for_season(db: Session, season_id: int) -> List[PondRecord]:
    """Estanques de una temporada existente; NotFoundError si la temporada no existe."""
    fetch_season(db, season_id)
    return fetch_ponds(db, season_id)


def list_seasons(db: Session) -> List[SeasonRecord]:
    rows = db.query(Season).order_by(desc(Season.start_date)).all()
    return [_season_record(r) for r in rows]


def current_season(db: Session) -> Optional[SeasonRecord]:
    """Temporada activa más reciente; si no hay activa, la más reciente."""
    row = (
        db.query(Season)
        .filter(Season.status == SeasonStatusEnum.active.value)
        .order_by(desc(Season.start_date))
        .first()
    ) or db.query(Season).order_by(desc(Season.start_date)).first()
    return _season_record(row) if row else None


# -------- lecturas --------

def fetch_feed_inputs(
        db: Session,
        season_id: int,
        pond_id: Optional[int] = None,
        date_range: Optional[DateRange] = None,
) -> List[MetricReading]:
    q = (
        db.query(FeedInput, InventoryItem.item_name, InventoryItem.unit_cost)
        .outerjoin(InventoryItem, FeedInput.inventory_item_id == InventoryItem.inventory_item_id)
    )
    rows = _apply_filters(q, FeedInput, season_id, pond_id, date_range).all()

    readings = []
    for feed, item_name, unit_cost in rows:
        values = {"quantity": float(feed.quantity)}
        if unit_cost is not None:
            values["unit_cost"] = float(unit_cost)
        readings.append(MetricReading(
            kind=ReadingKindEnum.feed,
            pond_id=int(feed.pond_id),
            season_id=int(feed.season_id),
            timestamp=feed.date,
            values=values,
            feed_type=item_name,
        ))
    return readings


def fetch_water_quality_inputs(
        db: Session,
        season_id: int,
        pond_id: Optional[int] = None,
        date_range: Optional[DateRange] = None,
) -> List[MetricReading]:
    rows = _apply_filters(db.query(WaterQualityInput), WaterQualityInput, season_id, pond_id, date_range).all()
    return [
        MetricReading(
            kind=ReadingKindEnum.water_quality,
            pond_id=int(r.pond_id),
            season_id=int(r.season_id),
            timestamp=r.date,
            values=_numeric_values(r, _WATER_FIELDS),
        )
        for r in rows
    ]


def fetch_growth_samplings(
        db: Session,
        season_id: int,
        pond_id: Optional[int] = None,
        date_range: Optional[DateRange] = None,
) -> List[MetricReading]:
    rows = _apply_filters(db.query(GrowthSampling), GrowthSampling, season_id, pond_id, date_range).all()
    return [
        MetricReading(
            kind=ReadingKindEnum.growth,
            pond_id=int(r.pond_id),
            season_id=int(r.season_id),
            timestamp=r.date,
            values=_numeric_values(r, ("total_weight", "total_count")),
        )
        for r in rows
    ]


# -------- eventos --------

def fetch_harvest_events(
        db: Session,
        season_id: int,
        pond_id: Optional[int] = None,
        date_range: Optional[DateRange] = None,
) -> List[HarvestEvent]:
    q = db.query(Event).filter(Event.event_type.in_([t.value for t in HARVEST_EVENT_TYPES]))
    rows = _apply_filters(q, Event, season_id, pond_id, date_range).all()
    return [
        HarvestEvent(
            pond_id=int(r.pond_id),
            season_id=int(r.season_id),
            timestamp=r.date,
            event_type=r.event_type,
            harvest_weight=float(r.harvest_weight) if r.harvest_weight is not None else None,
            average_weight=float(r.average_weight) if r.average_weight is not None else None,
        )
        for r in rows
    ]


def fetch_stocking_events(
        db: Session,
        season_id: int,
        pond_id: Optional[int] = None,
        date_range: Optional[DateRange] = None,
) -> List[StockingEvent]:
    q = db.query(Event).filter(Event.event_type == EventTypeEnum.stocking.value)
    rows = _apply_filters(q, Event, season_id, pond_id, date_range).all()
    return [
        StockingEvent(pond_id=int(r.pond_id), season_id=int(r.season_id), stocking_date=r.date)
        for r in rows
    ]


def fetch_event_breakdown(db: Session, season_id: int) -> List[EventCount]:
    rows = (
        db.query(Event.event_type, func.count(Event.event_id))
        .filter(Event.season_id == season_id)
        .group_by(Event.event_type)
        .order_by(Event.event_type.asc())
        .all()
    )
    return [EventCount(event_type=event_type, count=int(count)) for event_type, count in rows]


def fetch_feed_breakdown(db: Session, season_id: int) -> List[FeedTypeBreakdown]:
    """Totales de alimento por insumo: cantidad, costo (cantidad × costo unitario) y número de raciones."""
    rows = (
        db.query(
            InventoryItem.item_name,
            func.coalesce(func.sum(FeedInput.quantity), 0),
            func.coalesce(func.sum(FeedInput.quantity * func.coalesce(InventoryItem.unit_cost, 0)), 0),
            func.count(FeedInput.feed_input_id),
        )
        .select_from(FeedInput)
        .outerjoin(InventoryItem, FeedInput.inventory_item_id == InventoryItem.inventory_item_id)
        .filter(FeedInput.season_id == season_id)
        .group_by(InventoryItem.item_name)
        .all()
    )
    breakdown = [
        FeedTypeBreakdown(
            feed_type=name or "Unknown",
            total_quantity=float(quantity or 0),
            total_cost=float(cost or 0),
            feeding_count=int(count),
        )
        for name, quantity, cost, count in rows
    ]
    return sorted(breakdown, key=lambda b: b.feed_type)


# -------- foto completa de temporada --------

def load_season_snapshot(db: Session, season_id: int) -> SeasonSnapshot:
    """Lee una sola vez todo lo que necesita un reporte de temporada."""
    season = fetch_season(db, season_id)
    return SeasonSnapshot(
        season=season,
        ponds=fetch_ponds(db, season_id),
        feed=fetch_feed_inputs(db, season_id),
        water_quality=fetch_water_quality_inputs(db, season_id),
        growth=fetch_growth_samplings(db, season_id),
        harvests=fetch_harvest_events(db, season_id),
        events=fetch_event_breakdown(db, season_id),
        feed_breakdown=fetch_feed_breakdown(db, season_id),
    )
