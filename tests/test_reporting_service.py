import csv
import io
from datetime import date, datetime

import pytest

from schemas.analytics import GrowthSummary, KpiSet, WaterQualitySummary
from services.reporting_service import compile_report, flatten_report_csv, generate_farm_report, render_report
from tests.conftest import make_pond, make_season
from utils.errors import NotFoundError, ValidationError

GENERATED_AT = datetime(2023, 9, 1, 10, 30)


def _report(**kpi_overrides):
    kpis = KpiSet(season_id=1, total_ponds=2, active_ponds=1, completed_ponds=1, average_fcr=2.5,
                  pond_utilization=50.0, total_harvest_weight=120.0, **kpi_overrides)
    return compile_report(
        season=make_season(1, start=date(2023, 6, 1), end=date(2023, 8, 31), name="Verano, 2023"),
        kpis=kpis,
        pond_details=[make_pond(1), make_pond(2, status="Completed")],
        feed_breakdown=[],
        water_quality_summary=WaterQualitySummary(total_readings=1, avg_ph=9.0, avg_dissolved_oxygen=6.0),
        growth_summary=GrowthSummary(),
        event_breakdown=[],
        generated_at=GENERATED_AT,
    )


def test_compile_report_sections():
    report = _report()

    assert report["report_metadata"]["season_name"] == "Verano, 2023"
    assert report["report_metadata"]["generated_by"] == "System"
    assert report["executive_summary"]["season_period"] == "2023-06-01 to 2023-08-31"
    assert report["executive_summary"]["completion_rate"] == 50.0
    assert report["executive_summary"]["total_production"] == 120.0
    assert report["detailed_analysis"]["pond_management"]["pond_distribution"] == {
        "active": 1, "completed": 1, "inactive": 0,
    }
    assert [p["id"] for p in report["appendices"]["pond_details"]] == [1, 2]
    assert [r["category"] for r in report["recommendations"]] == [
        "Water Quality", "Feed Management", "Pond Management",
    ]


def test_completion_rate_without_ponds():
    kpis = KpiSet(season_id=1)
    report = compile_report(
        make_season(1), kpis, [], [], WaterQualitySummary(), GrowthSummary(), [], GENERATED_AT,
    )

    assert report["executive_summary"]["completion_rate"] == 0.0
    assert report["executive_summary"]["overall_fcr"] is None
    assert report["executive_summary"]["season_period"].endswith("to N/A")
    assert report["recommendations"] == []


def test_csv_quotes_embedded_commas():
    text = flatten_report_csv(_report())
    rows = list(csv.reader(io.StringIO(text)))

    assert rows[0] == ["Farm Report Summary"]
    assert rows[2] == ["Season", "Verano, 2023"]
    assert '"Verano, 2023"' in text
    assert ["Overall FCR", "2.5"] in rows
    assert rows[rows.index(["Recommendations"]) + 1][:2] == ["Water Quality", "High"]


def test_csv_renders_null_as_na():
    report = _report()
    report["executive_summary"]["overall_fcr"] = None
    rows = list(csv.reader(io.StringIO(flatten_report_csv(report))))

    assert ["Overall FCR", "N/A"] in rows


def test_render_report_formats():
    report = _report()

    assert render_report(report, "json") is report
    assert render_report(report, "csv").startswith("Farm Report Summary\n")
    with pytest.raises(ValidationError):
        render_report(report, "xml")


def test_generate_farm_report_from_database(db, seeded):
    report = generate_farm_report(db, seeded["season_1"], now=GENERATED_AT)

    summary = report["executive_summary"]
    assert summary["total_ponds"] == 2
    assert summary["overall_fcr"] == 3.0
    assert summary["total_investment"] == pytest.approx(135.0)
    assert summary["total_production"] == 150

    feed = report["detailed_analysis"]["feed_management"]
    assert [f["feed_type"] for f in feed["feed_types"]] == ["Grower, 30%", "Starter 35%"]
    assert feed["total_feedings"] == 3

    events = report["detailed_analysis"]["events_summary"]
    assert events["total_events"] == 2

    assert report["detailed_analysis"]["water_quality_management"]["average_parameters"]["ph"] == 9.0
    assert len(report["recommendations"]) == 3


def test_generate_farm_report_requires_existing_season(db):
    with pytest.raises(NotFoundError):
        generate_farm_report(db, 42)
    with pytest.raises(ValidationError):
        generate_farm_report(db, 0)
