import csv
import io
import os
from typing import Dict, List, Optional
from unittest.mock import AsyncMock, patch

import pytest

from run_import.config import get_settings
from run_import.models import HealthExportRow, Sample

HEADER = [
    "Date",
    "Active energy burned(kcal)",
    "Activity",
    "Distance(km)",
    "Duration(s)",
    "Elevation: Ascended(m)",
    "Elevation: Maximum(m)",
    "Elevation: Minimum(m)",
    "Heart rate zone: A Easy (<115bpm)(%)",
    "Heart rate zone: B Fat Burn (115-135bpm)(%)",
    "Heart rate zone: C Moderate Training (135-155bpm)(%)",
    "Heart rate zone: D Hard Training (155-175bpm)(%)",
    "Heart rate zone: E Extreme Training (>175bpm)(%)",
    "Heart rate: Average(count/min)",
    "Heart rate: Maximum(count/min)",
    "METs Average(kcal/hr·kg)",
    "Weather: Humidity(%)",
    "Weather: Temperature(degC)",
]


def make_csv_row(date_range: str, activity: str = "Running", **overrides) -> Dict[str, str]:
    row = {
        "Date": date_range,
        "Active energy burned(kcal)": "584.462",
        "Activity": activity,
        "Distance(km)": "8.16",
        "Duration(s)": "3020.2",
        "Elevation: Ascended(m)": "34.38",
        "Elevation: Maximum(m)": "45.912",
        "Elevation: Minimum(m)": "13.117",
        "Heart rate zone: A Easy (<115bpm)(%)": "0.002",
        "Heart rate zone: B Fat Burn (115-135bpm)(%)": "0",
        "Heart rate zone: C Moderate Training (135-155bpm)(%)": "0.091",
        "Heart rate zone: D Hard Training (155-175bpm)(%)": "0.907",
        "Heart rate zone: E Extreme Training (>175bpm)(%)": "0",
        "Heart rate: Average(count/min)": "163.78",
        "Heart rate: Maximum(count/min)": "172",
        "METs Average(kcal/hr·kg)": "11.522",
        "Weather: Humidity(%)": "",
        "Weather: Temperature(degC)": "",
    }
    row.update(overrides)
    return row


def make_csv(rows: List[Dict[str, str]], header: Optional[List[str]] = None) -> str:
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=header or HEADER, lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    return output.getvalue()


def make_row(date_range: str, **overrides) -> HealthExportRow:
    """Build a validated row from export-style string values."""
    return HealthExportRow.model_validate(make_csv_row(date_range, **overrides))


@pytest.fixture(autouse=True)
def test_env():
    """Ensure we're using test settings."""
    with patch.dict(os.environ, {"ENV_NAME": "test"}):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def mock_client():
    """Create a mock GraphJSON client with no logged samples."""
    client = AsyncMock()
    client.get_samples = AsyncMock(return_value=[])
    client.log_event = AsyncMock(return_value=None)
    return client


@pytest.fixture
def existing_samples():
    return [Sample(timestamp=1234), Sample(timestamp=4567), Sample(timestamp=6789)]
