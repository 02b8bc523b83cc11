"""
Fixtures compartidas de la suite de AquaPulse.

- Fábricas de registros normalizados para probar el motor puro sin BD.
- Sesión SQLite en memoria (StaticPool) con el esquema completo.
- TestClient de FastAPI con get_db apuntando a esa sesión.
"""

from datetime import date, datetime
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from enums.enums import EventTypeEnum, ReadingKindEnum
from models import (
    Base,
    Event,
    FeedInput,
    GrowthSampling,
    InventoryItem,
    Pond,
    Season,
    WaterQualityInput,
)
from schemas.records import HarvestEvent, MetricReading, PondRecord, SeasonRecord
from utils.db import get_db


# ---------------------------------------------------------------------------
# Fábricas de registros
# ---------------------------------------------------------------------------

def make_season(season_id: int = 1, start: date = date(2023, 1, 1), end: Optional[date] = None, **overrides) -> SeasonRecord:
    defaults = dict(season_id=season_id, name=f"Temporada {season_id}", start_date=start, end_date=end, status="Active")
    defaults.update(overrides)
    return SeasonRecord(**defaults)


def make_pond(pond_id: int = 1, season_id: int = 1, status: str = "Active", capacity: float = 1000.0, size: float = 500.0) -> PondRecord:
    return PondRecord(
        pond_id=pond_id,
        season_id=season_id,
        name=f"Estanque {pond_id}",
        size=size,
        capacity=capacity,
        status=status,
    )


def make_feed(quantity: float, ts: datetime, pond_id: int = 1, season_id: int = 1,
              feed_type: Optional[str] = "Starter", unit_cost: Optional[float] = None) -> MetricReading:
    values = {"quantity": quantity}
    if unit_cost is not None:
        values["unit_cost"] = unit_cost
    return MetricReading(
        kind=ReadingKindEnum.feed,
        pond_id=pond_id,
        season_id=season_id,
        timestamp=ts,
        values=values,
        feed_type=feed_type,
    )


def make_water(ts: datetime, pond_id: int = 1, season_id: int = 1, **values) -> MetricReading:
    return MetricReading(
        kind=ReadingKindEnum.water_quality,
        pond_id=pond_id,
        season_id=season_id,
        timestamp=ts,
        values=values,
    )


def make_growth(total_weight: float, total_count: float, ts: datetime = datetime(2023, 6, 1, 8),
                pond_id: int = 1, season_id: int = 1) -> MetricReading:
    return MetricReading(
        kind=ReadingKindEnum.growth,
        pond_id=pond_id,
        season_id=season_id,
        timestamp=ts,
        values={"total_weight": total_weight, "total_count": total_count},
    )


def make_harvest(harvest_weight: float, average_weight: Optional[float] = None, pond_id: int = 1,
                 season_id: int = 1, ts: datetime = datetime(2023, 7, 1, 6)) -> HarvestEvent:
    return HarvestEvent(
        pond_id=pond_id,
        season_id=season_id,
        timestamp=ts,
        event_type=EventTypeEnum.full_harvest.value,
        harvest_weight=harvest_weight,
        average_weight=average_weight,
    )


# ---------------------------------------------------------------------------
# Base de datos
# ---------------------------------------------------------------------------

@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def seeded(db):
    """
    Dos temporadas con un estanque cada una, más un segundo estanque en la temporada 1.

    Temporada 1 (2023-06-01 .. 2023-08-31): estanques A (Active) y B (Completed)
    Temporada 2 (2024-01-01 ..):            estanque C (Active)
    """
    s1 = Season(name="Verano 2023", start_date=date(2023, 6, 1), end_date=date(2023, 8, 31), status="Completed")
    s2 = Season(name="Invierno 2024", start_date=date(2024, 1, 1), status="Active")
    db.add_all([s1, s2])
    db.flush()

    pond_a = Pond(season_id=s1.season_id, name="A-1", size=1000, capacity=50000, status="Active")
    pond_b = Pond(season_id=s1.season_id, name="B-1", size=800, capacity=40000, status="Completed")
    pond_c = Pond(season_id=s2.season_id, name="C-1", size=900, capacity=45000, status="Active")
    db.add_all([pond_a, pond_b, pond_c])

    starter = InventoryItem(item_name="Starter 35%", item_type="Feed", unit_cost=2.5)
    grower = InventoryItem(item_name="Grower, 30%", item_type="Feed", unit_cost=2.0)
    db.add_all([starter, grower])
    db.flush()

    db.add_all([
        FeedInput(season_id=s1.season_id, pond_id=pond_a.pond_id, inventory_item_id=starter.inventory_item_id,
                  date=datetime(2023, 6, 1, 7), quantity=10),
        FeedInput(season_id=s1.season_id, pond_id=pond_a.pond_id, inventory_item_id=starter.inventory_item_id,
                  date=datetime(2023, 6, 2, 7), quantity=20),
        FeedInput(season_id=s1.season_id, pond_id=pond_b.pond_id, inventory_item_id=grower.inventory_item_id,
                  date=datetime(2023, 6, 2, 7), quantity=30),
        FeedInput(season_id=s2.season_id, pond_id=pond_c.pond_id, inventory_item_id=grower.inventory_item_id,
                  date=datetime(2024, 1, 5, 7), quantity=99),

        WaterQualityInput(season_id=s1.season_id, pond_id=pond_a.pond_id, date=datetime(2023, 6, 1, 6),
                          ph=9.0, dissolved_oxygen=6.0, temperature=28.0, salinity=30.0, ammonia=0.1),
        WaterQualityInput(season_id=s1.season_id, pond_id=pond_a.pond_id, date=datetime(2023, 6, 2, 6),
                          ph=9.0, dissolved_oxygen=6.0, temperature=29.0, salinity=30.0, ammonia=0.2),
        WaterQualityInput(season_id=s1.season_id, pond_id=pond_b.pond_id, date=datetime(2023, 6, 2, 6),
                          ph=9.0, dissolved_oxygen=6.0, temperature=27.0, salinity=31.0),
        WaterQualityInput(season_id=s2.season_id, pond_id=pond_c.pond_id, date=datetime(2024, 1, 5, 6),
                          ph=8.0, dissolved_oxygen=5.5, temperature=26.0, salinity=32.0),

        GrowthSampling(season_id=s1.season_id, pond_id=pond_a.pond_id, date=datetime(2023, 6, 2, 9),
                       total_weight=20, total_count=1000),
        GrowthSampling(season_id=s2.season_id, pond_id=pond_c.pond_id, date=datetime(2024, 1, 5, 9),
                       total_weight=5, total_count=500),

        Event(season_id=s1.season_id, pond_id=pond_a.pond_id, date=datetime(2023, 6, 1, 5),
              event_type=EventTypeEnum.stocking.value),
        Event(season_id=s1.season_id, pond_id=pond_b.pond_id, date=datetime(2023, 8, 30, 5),
              event_type=EventTypeEnum.full_harvest.value, harvest_weight=150, average_weight=18.5),
        Event(season_id=s2.season_id, pond_id=pond_c.pond_id, date=datetime(2024, 1, 3, 5),
              event_type=EventTypeEnum.stocking.value),
    ])
    db.commit()

    return {
        "season_1": s1.season_id,
        "season_2": s2.season_id,
        "pond_a": pond_a.pond_id,
        "pond_b": pond_b.pond_id,
        "pond_c": pond_c.pond_id,
    }


@pytest.fixture
def client(db):
    from main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
