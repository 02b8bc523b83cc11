from datetime import date, datetime

import pytest

from enums.enums import ReadingKindEnum
from services import record_store
from utils.errors import NotFoundError


def test_fetch_season_and_pond(db, seeded):
    season = record_store.fetch_season(db, seeded["season_1"])
    pond = record_store.fetch_pond(db, seeded["pond_a"])

    assert season.name == "Verano 2023"
    assert season.end_date == date(2023, 8, 31)
    assert pond.season_id == seeded["season_1"]
    assert pond.capacity == 50000


@pytest.mark.parametrize("fetch", [record_store.fetch_season, record_store.fetch_pond])
def test_missing_rows_raise_not_found(db, fetch):
    with pytest.raises(NotFoundError):
        fetch(db, 12345)


def test_feed_inputs_carry_feed_type_and_cost(db, seeded):
    readings = record_store.fetch_feed_inputs(db, seeded["season_1"], pond_id=seeded["pond_a"])

    assert [r.get("quantity") for r in readings] == [10, 20]
    assert readings[0].kind == ReadingKindEnum.feed
    assert readings[0].feed_type == "Starter 35%"
    assert readings[0].get("unit_cost") == 2.5


def test_readings_are_scoped_to_season(db, seeded):
    season_1 = record_store.fetch_water_quality_inputs(db, seeded["season_1"])
    season_2 = record_store.fetch_water_quality_inputs(db, seeded["season_2"])

    assert len(season_1) == 3
    assert len(season_2) == 1
    assert {r.season_id for r in season_1} == {seeded["season_1"]}


def test_missing_measurements_are_absent_not_zero(db, seeded):
    readings = record_store.fetch_water_quality_inputs(db, seeded["season_1"], pond_id=seeded["pond_b"])

    assert readings[0].get("ammonia") is None
    assert "ammonia" not in readings[0].values


def test_date_end_bound_covers_whole_day(db, seeded):
    readings = record_store.fetch_feed_inputs(
        db, seeded["season_1"], date_range=(date(2023, 6, 2), date(2023, 6, 2))
    )
    assert sorted(r.get("quantity") for r in readings) == [20, 30]

    narrow = record_store.fetch_feed_inputs(
        db, seeded["season_1"], date_range=(datetime(2023, 6, 1), datetime(2023, 6, 1, 12))
    )
    assert [r.get("quantity") for r in narrow] == [10]


def test_harvest_and_stocking_events(db, seeded):
    harvests = record_store.fetch_harvest_events(db, seeded["season_1"])
    stockings = record_store.fetch_stocking_events(db, seeded["season_1"], pond_id=seeded["pond_a"])

    assert len(harvests) == 1
    assert harvests[0].harvest_weight == 150
    assert harvests[0].average_weight == 18.5
    assert stockings[0].stocking_date == datetime(2023, 6, 1, 5)


def test_breakdowns(db, seeded):
    events = record_store.fetch_event_breakdown(db, seeded["season_1"])
    feed = record_store.fetch_feed_breakdown(db, seeded["season_1"])

    assert [(e.event_type, e.count) for e in events] == [("FullHarvest", 1), ("Stocking", 1)]
    assert [(f.feed_type, f.total_quantity, f.feeding_count) for f in feed] == [
        ("Grower, 30%", 30, 1),
        ("Starter 35%", 30, 2),
    ]
    assert feed[1].total_cost == pytest.approx(75.0)


def test_season_listing_and_current_season(db, seeded):
    seasons = record_store.list_seasons(db)

    assert [s.name for s in seasons] == ["Invierno 2024", "Verano 2023"]
    assert record_store.current_season(db).season_id == seeded["season_2"]
    assert [p.name for p in record_store.list_ponds_for_season(db, seeded["season_1"])] == ["A-1", "B-1"]


def test_current_season_is_none_without_seasons(db):
    assert record_store.current_season(db) is None


def test_season_snapshot(db, seeded):
    snapshot = record_store.load_season_snapshot(db, seeded["season_2"])

    assert snapshot.season.name == "Invierno 2024"
    assert len(snapshot.ponds) == 1
    assert len(snapshot.feed) == 1
    assert len(snapshot.growth) == 1
    assert snapshot.harvests == []
    assert [e.event_type for e in snapshot.events] == ["Stocking"]
