from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from run_import.timestamps import date_range_to_timestamp

RUNNING = "Running"


class HealthExportRow(BaseModel):
    """One row of the Health Export CSV.

    Aliases are the export's column names and must match exactly, units and
    punctuation included. Blank cells are read as missing values.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=False,
        extra="ignore",
    )

    date_range: str = Field(alias="Date")  # eg. 2021-10-04 08:07:18 - 2021-10-04 08:40:04
    active_energy_kcal: Optional[float] = Field(default=None, alias="Active energy burned(kcal)")
    activity: str = Field(alias="Activity")
    distance_km: float = Field(alias="Distance(km)")
    duration_s: float = Field(alias="Duration(s)")
    elevation_ascended_m: Optional[float] = Field(default=None, alias="Elevation: Ascended(m)")
    elevation_maximum_m: Optional[float] = Field(default=None, alias="Elevation: Maximum(m)")
    elevation_minimum_m: Optional[float] = Field(default=None, alias="Elevation: Minimum(m)")
    heart_rate_zone_a: Optional[float] = Field(default=None, alias="Heart rate zone: A Easy (<115bpm)(%)")
    heart_rate_zone_b: Optional[float] = Field(default=None, alias="Heart rate zone: B Fat Burn (115-135bpm)(%)")
    heart_rate_zone_c: Optional[float] = Field(
        default=None, alias="Heart rate zone: C Moderate Training (135-155bpm)(%)"
    )
    heart_rate_zone_d: Optional[float] = Field(
        default=None, alias="Heart rate zone: D Hard Training (155-175bpm)(%)"
    )
    heart_rate_zone_e: Optional[float] = Field(
        default=None, alias="Heart rate zone: E Extreme Training (>175bpm)(%)"
    )
    heart_rate_avg: Optional[float] = Field(default=None, alias="Heart rate: Average(count/min)")
    heart_rate_max: Optional[float] = Field(default=None, alias="Heart rate: Maximum(count/min)")
    mets_average: Optional[float] = Field(default=None, alias="METs Average(kcal/hr·kg)")
    line_number: Optional[int] = Field(default=None, exclude=True)

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("date_range")
    @classmethod
    def check_date_range(cls, value: str) -> str:
        date_range_to_timestamp(value)
        return value

    @property
    def timestamp(self) -> int:
        return date_range_to_timestamp(self.date_range)


def required_columns() -> list[str]:
    return [
        field.alias
        for field in HealthExportRow.model_fields.values()
        if field.is_required() and field.alias
    ]


class ScoreBounds(BaseModel):
    """Bounds used to normalise pace (mins/km) and average heart rate (bpm)."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    pace_lower_bound: float
    pace_upper_bound: float
    hr_lower_bound: float
    hr_upper_bound: float

    @model_validator(mode="after")
    def check_bounds(self) -> "ScoreBounds":
        if self.pace_upper_bound <= self.pace_lower_bound:
            raise ValueError(
                f"Pace upper bound ({self.pace_upper_bound}) must be greater than "
                f"lower bound ({self.pace_lower_bound})"
            )
        if self.hr_upper_bound <= self.hr_lower_bound:
            raise ValueError(
                f"Heart rate upper bound ({self.hr_upper_bound}) must be greater than "
                f"lower bound ({self.hr_lower_bound})"
            )
        return self


class Activity(BaseModel):
    """Normalised run as logged to the runs collection."""

    collection: str
    timestamp: int
    kcal: Optional[float] = None
    activity_type: str
    distance_km: float
    duration_mins_f: float
    pace_mins_per_km: float
    elevation_ascended_m: Optional[int] = None
    elevation_maximum_m: Optional[int] = None
    elevation_minimum_m: Optional[int] = None
    heart_rate_a: Optional[float] = None
    heart_rate_b: Optional[float] = None
    heart_rate_c: Optional[float] = None
    heart_rate_d: Optional[float] = None
    heart_rate_e: Optional[float] = None
    heart_rate_avg_rounded_i: Optional[int] = None
    heart_rate_max: Optional[float] = None
    mets_average: Optional[float] = None
    score: Optional[float] = None


class ZoneRecord(BaseModel):
    """Share of one heart rate zone for a run, as a percentage."""

    collection: str
    timestamp: int
    zone: str
    value: Optional[float] = None


class Sample(BaseModel):
    timestamp: int
    json_data: Optional[str] = Field(default=None, alias="json")


class RowParseError(BaseModel):
    row: int
    message: str


class EventKind(str, Enum):
    ACTIVITY = "activity"
    ZONE = "zone"


class EventDelivery(BaseModel):
    kind: EventKind
    collection: str
    timestamp: int
    delivered: bool
    error_message: Optional[str] = None


class ImportResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    logged_count: int = 0
    filtered_timestamps_count: int = 0
    processed_count: int = 0
    skipped_existing_count: int = 0
    invalid_row_count: int = 0
    failed_count: int = 0
