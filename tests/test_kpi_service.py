from datetime import datetime

import pytest

from services.kpi_service import compute_kpis, summarize_growth, summarize_water_quality
from tests.conftest import make_feed, make_growth, make_harvest, make_pond, make_water

T0 = datetime(2023, 6, 1, 8)


def test_empty_season_degrades_to_zero_and_null():
    kpis = compute_kpis(1, ponds=[], feed=[], water_quality=[], growth=[])

    assert kpis.total_ponds == 0
    assert kpis.active_ponds == 0
    assert kpis.inactive_ponds == 0
    assert kpis.total_feed_consumed == 0
    assert kpis.avg_daily_feed is None
    assert kpis.avg_shrimp_weight is None
    assert kpis.average_fcr is None
    assert kpis.pond_utilization is None
    assert kpis.survival_rate is None
    assert kpis.water_quality.avg_ph is None


def test_fcr_is_feed_over_biomass():
    feed = [make_feed(q, T0) for q in (10, 20, 30)]
    kpis = compute_kpis(1, [make_pond()], feed, [], [make_growth(20, 1000)])

    assert kpis.total_feed_consumed == 60
    assert kpis.average_fcr == pytest.approx(3.0)
    assert kpis.presented()["average_fcr"] == 3.0


def test_fcr_null_without_biomass():
    kpis = compute_kpis(1, [make_pond()], [make_feed(10, T0)], [], [])
    assert kpis.average_fcr is None


def test_avg_daily_feed_is_mean_per_entry():
    # Dos registros el mismo día: promedio por registro, no por día calendario
    feed = [make_feed(10, T0), make_feed(30, T0.replace(hour=17))]
    kpis = compute_kpis(1, [make_pond()], feed, [], [])
    assert kpis.avg_daily_feed == 20
    assert kpis.total_feed_entries == 2


def test_avg_shrimp_weight_is_weighted_by_count():
    growth = [make_growth(10, 1000), make_growth(1, 10)]
    summary = summarize_growth(growth)

    assert summary.average_shrimp_weight == pytest.approx(11 / 1010)
    assert summary.total_biomass == 11
    assert summary.total_samplings == 2


def test_pond_status_counts_and_utilization():
    ponds = [
        make_pond(1, status="Active"),
        make_pond(2, status="Completed"),
        make_pond(3, status="Inactive"),
        make_pond(4, status="Maintenance"),
    ]
    kpis = compute_kpis(1, ponds, [], [], [])

    assert kpis.active_ponds == 1
    assert kpis.completed_ponds == 1
    assert kpis.inactive_ponds == 2
    assert kpis.pond_utilization == pytest.approx(25.0)


def test_survival_rate_against_capacity():
    ponds = [make_pond(1, capacity=600), make_pond(2, capacity=400)]
    kpis = compute_kpis(1, ponds, [], [], [make_growth(8, 800)])
    assert kpis.survival_rate == pytest.approx(80.0)


def test_survival_rate_null_without_capacity():
    kpis = compute_kpis(1, [make_pond(capacity=0)], [], [], [make_growth(8, 800)])
    assert kpis.survival_rate is None


def test_water_quality_averages_skip_missing_fields():
    readings = [
        make_water(T0, ph=8.0, dissolved_oxygen=5.0),
        make_water(T0, ph=7.0),
    ]
    summary = summarize_water_quality(readings)

    assert summary.total_readings == 2
    assert summary.avg_ph == pytest.approx(7.5)
    assert summary.avg_dissolved_oxygen == pytest.approx(5.0)
    assert summary.avg_temperature is None


def test_records_from_other_seasons_are_ignored():
    feed = [make_feed(10, T0), make_feed(500, T0, season_id=2)]
    ponds = [make_pond(1), make_pond(2, season_id=2)]
    kpis = compute_kpis(1, ponds, feed, [], [make_growth(5, 100, season_id=2)])

    assert kpis.total_ponds == 1
    assert kpis.total_feed_consumed == 10
    assert kpis.total_biomass == 0


def test_harvest_totals():
    harvests = [make_harvest(100, 15.0), make_harvest(50, 20.0), make_harvest(25)]
    kpis = compute_kpis(1, [make_pond()], [], [], [], harvests)

    assert kpis.total_harvests == 3
    assert kpis.total_harvest_weight == 175
    assert kpis.avg_harvest_weight == pytest.approx(17.5)


def test_compute_kpis_is_idempotent():
    ponds = [make_pond(1), make_pond(2, status="Completed")]
    feed = [make_feed(q, T0) for q in (12.5, 7.25)]
    water = [make_water(T0, ph=8.1, temperature=28.4)]
    growth = [make_growth(3.3, 210)]

    first = compute_kpis(1, ponds, feed, water, growth)
    second = compute_kpis(1, ponds, feed, water, growth)

    assert first.model_dump_json() == second.model_dump_json()


def test_presented_rounds_only_derived_ratios():
    feed = [make_feed(10, T0)]
    kpis = compute_kpis(1, [make_pond(1), make_pond(2, status="Inactive"), make_pond(3, status="Inactive")],
                        feed, [], [make_growth(3, 1000)])
    presented = kpis.presented()

    assert presented["average_fcr"] == 3.33
    assert presented["pond_utilization"] == 33.3
    assert kpis.average_fcr == pytest.approx(10 / 3)
