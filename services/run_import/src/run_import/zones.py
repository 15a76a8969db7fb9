from typing import List

from run_import.models import Activity, ZoneRecord
from run_import.normalize import round_half_up

# Label shown on the zones graph, and the activity field holding its fraction
ZONES = (
    ("Easy (A)", "heart_rate_a"),
    ("Fat Burn (B)", "heart_rate_b"),
    ("Build Fitness (C)", "heart_rate_c"),
    ("Training (D)", "heart_rate_d"),
    ("Extreme (E)", "heart_rate_e"),
)


def to_zone_records(activity: Activity, collection: str) -> List[ZoneRecord]:
    """Split an activity into one percentage record per heart rate zone, A to E."""
    records = []
    for label, field in ZONES:
        fraction = getattr(activity, field)
        records.append(
            ZoneRecord(
                collection=collection,
                timestamp=activity.timestamp,
                zone=label,
                value=None if fraction is None else round_half_up(fraction * 100, 1),
            )
        )
    return records
