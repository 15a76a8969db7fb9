from run_import.models import Activity
from run_import.zones import to_zone_records


def make_activity(**overrides) -> Activity:
    values = dict(
        collection="callum_runs_dev",
        timestamp=1633782798,
        kcal=584.462,
        activity_type="Running",
        distance_km=8.16,
        duration_mins_f=50.3,
        pace_mins_per_km=6.17,
        elevation_ascended_m=34,
        elevation_maximum_m=46,
        elevation_minimum_m=13,
        heart_rate_a=0.002,
        heart_rate_b=0,
        heart_rate_c=0.091,
        heart_rate_d=0.907,
        heart_rate_e=0,
        heart_rate_avg_rounded_i=164,
        heart_rate_max=172,
        mets_average=11.522,
    )
    values.update(overrides)
    return Activity(**values)


def test_to_zone_records():
    records = to_zone_records(make_activity(), "projectZones")

    assert [record.model_dump() for record in records] == [
        {"collection": "projectZones", "timestamp": 1633782798, "zone": "Easy (A)", "value": 0.2},
        {"collection": "projectZones", "timestamp": 1633782798, "zone": "Fat Burn (B)", "value": 0},
        {"collection": "projectZones", "timestamp": 1633782798, "zone": "Build Fitness (C)", "value": 9.1},
        {"collection": "projectZones", "timestamp": 1633782798, "zone": "Training (D)", "value": 90.7},
        {"collection": "projectZones", "timestamp": 1633782798, "zone": "Extreme (E)", "value": 0},
    ]


def test_missing_zone_fraction_passes_through_as_none():
    records = to_zone_records(make_activity(heart_rate_a=None, heart_rate_e=None), "projectZones")

    assert len(records) == 5
    assert records[0].value is None
    assert records[4].value is None
    assert records[3].value == 90.7


def test_zone_values_rounded_to_one_decimal():
    records = to_zone_records(make_activity(heart_rate_b=0.12341, heart_rate_c=0.33333), "projectZones")

    assert records[1].value == 12.3
    assert records[2].value == 33.3
