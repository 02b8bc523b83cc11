from enums.enums import PriorityEnum
from schemas.analytics import KpiSet, WaterQualitySummary
from services.recommendation_service import generate_recommendations


def _kpis(**overrides) -> KpiSet:
    defaults = dict(season_id=1, average_fcr=1.5, pond_utilization=90.0)
    defaults.update(overrides)
    return KpiSet(**defaults)


def _water(ph=8.0, do=6.0) -> WaterQualitySummary:
    return WaterQualitySummary(total_readings=10, avg_ph=ph, avg_dissolved_oxygen=do)


def test_healthy_season_has_no_recommendations():
    assert generate_recommendations(_kpis(), _water()) == []


def test_high_ph_emits_single_water_quality_recommendation():
    recs = generate_recommendations(_kpis(), _water(ph=9.0))

    assert len(recs) == 1
    assert recs[0].category == "Water Quality"
    assert recs[0].priority == PriorityEnum.high
    assert recs[0].issue == "pH levels outside optimal range (7.5-8.5)"
    assert recs[0].current_value == 9.0
    assert recs[0].target_range == "7.5-8.5"


def test_ph_boundaries_are_inclusive():
    assert generate_recommendations(_kpis(), _water(ph=7.5)) == []
    assert generate_recommendations(_kpis(), _water(ph=8.5)) == []


def test_low_oxygen():
    recs = generate_recommendations(_kpis(), _water(do=4.2))

    assert [r.issue for r in recs] == ["Low dissolved oxygen levels"]
    assert recs[0].target_range == ">5 mg/L"


def test_high_fcr_is_medium_priority():
    recs = generate_recommendations(_kpis(average_fcr=2.345), _water())

    assert recs[0].category == "Feed Management"
    assert recs[0].priority == PriorityEnum.medium
    assert recs[0].current_value == 2.35
    assert recs[0].target_range == "<1.8"


def test_fcr_of_exactly_two_does_not_fire():
    assert generate_recommendations(_kpis(average_fcr=2.0), _water()) == []


def test_low_utilization_formats_percentage():
    recs = generate_recommendations(_kpis(pond_utilization=50.0), _water())

    assert recs[0].category == "Pond Management"
    assert recs[0].priority == PriorityEnum.low
    assert recs[0].current_value == "50.0%"


def test_rules_fire_in_declaration_order():
    recs = generate_recommendations(_kpis(average_fcr=3.0, pond_utilization=10.0), _water(ph=6.0, do=3.0))

    assert [r.category for r in recs] == ["Water Quality", "Water Quality", "Feed Management", "Pond Management"]


def test_missing_inputs_skip_their_rules():
    kpis = _kpis(average_fcr=None, pond_utilization=None)
    water = WaterQualitySummary(total_readings=0)

    assert generate_recommendations(kpis, water) == []


def test_water_summary_defaults_to_kpi_set():
    kpis = _kpis(water_quality=_water(ph=9.5))
    assert len(generate_recommendations(kpis)) == 1
