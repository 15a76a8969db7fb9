from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from run_import.exceptions import InvalidRowError
from run_import.models import Activity, HealthExportRow, ScoreBounds
from run_import.score import score_run


def round_half_up(value: float, places: int = 0) -> float:
    """Round halves up, working on the shortest decimal repr of the float (90.70000000000002 -> 90.7)."""
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def round_to_int(value: Optional[float]) -> Optional[int]:
    if value is None:
        return None
    return int(round_half_up(value))


def to_activity(row: HealthExportRow, collection: str, bounds: ScoreBounds) -> Activity:
    """
    Convert a Health Export row to an activity event.

    Args:
        row (HealthExportRow): A validated export row
        collection (str): GraphJSON collection the activity is logged to
        bounds (ScoreBounds): Bounds used to score the run

    Returns:
        Activity: The normalised activity

    Raises:
        InvalidRowError: If distance is not positive or duration is negative.
    """
    if row.distance_km <= 0:
        raise InvalidRowError(f"Distance must be positive, got {row.distance_km}km")
    if row.duration_s < 0:
        raise InvalidRowError(f"Duration must not be negative, got {row.duration_s}s")

    duration_mins = row.duration_s / 60
    pace = duration_mins / row.distance_km

    score = None
    if row.heart_rate_avg is not None:
        score = score_run(
            **bounds.model_dump(),
            average_pace=pace,
            average_heart_rate=row.heart_rate_avg,
        )

    return Activity(
        collection=collection,
        timestamp=row.timestamp,
        kcal=row.active_energy_kcal,
        activity_type=row.activity,
        distance_km=row.distance_km,
        duration_mins_f=round_half_up(duration_mins, 1),
        pace_mins_per_km=round_half_up(pace, 2),
        elevation_ascended_m=round_to_int(row.elevation_ascended_m),
        elevation_maximum_m=round_to_int(row.elevation_maximum_m),
        elevation_minimum_m=round_to_int(row.elevation_minimum_m),
        heart_rate_a=row.heart_rate_zone_a,
        heart_rate_b=row.heart_rate_zone_b,
        heart_rate_c=row.heart_rate_zone_c,
        heart_rate_d=row.heart_rate_zone_d,
        heart_rate_e=row.heart_rate_zone_e,
        heart_rate_avg_rounded_i=round_to_int(row.heart_rate_avg),
        heart_rate_max=row.heart_rate_max,
        mets_average=row.mets_average,
        score=score,
    )
