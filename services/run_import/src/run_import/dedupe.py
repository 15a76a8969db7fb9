from dataclasses import dataclass
import logging
from typing import Iterable, List

from run_import.models import HealthExportRow

logger = logging.getLogger(__name__)

DUPLICATE_WINDOW_SECONDS = 10


@dataclass
class RowGroup:
    representative_timestamp: int
    kept_row: HealthExportRow


def has_elevation(row: HealthExportRow) -> bool:
    # The phone export always has ascended elevation, the watch export never does
    return bool(row.elevation_ascended_m)


def deduplicate(rows: Iterable[HealthExportRow]) -> List[HealthExportRow]:
    """
    Collapse rows describing the same run, recorded by two devices.

    Each row joins the first group whose representative timestamp is within
    DUPLICATE_WINDOW_SECONDS of its own, or starts a new group. The first row
    of a group fixes the representative timestamp. A kept row is only
    replaced by a duplicate that has ascended elevation when the kept row
    lacks it. A replacement can land within DUPLICATE_WINDOW_SECONDS of the
    next group's representative, so running the output through again may
    collapse it further.

    Args:
        rows (Iterable[HealthExportRow]): Rows in source order

    Returns:
        List[HealthExportRow]: One row per group, in the order groups were created
    """
    groups: List[RowGroup] = []
    for row in rows:
        timestamp = row.timestamp
        group = next(
            (
                g
                for g in groups
                if abs(g.representative_timestamp - timestamp) <= DUPLICATE_WINDOW_SECONDS
            ),
            None,
        )
        if group is None:
            groups.append(RowGroup(representative_timestamp=timestamp, kept_row=row))
            continue

        logger.debug(f"Row at {timestamp} duplicates row at {group.representative_timestamp}")
        if not has_elevation(group.kept_row) and has_elevation(row):
            group.kept_row = row

    return [group.kept_row for group in groups]
