import csv
import io
import logging
from typing import List, Tuple

from pydantic import ValidationError

from run_import.models import HealthExportRow, RowParseError, required_columns

logger = logging.getLogger(__name__)


def _format_validation_error(error: ValidationError) -> str:
    messages = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"])
        messages.append(f"{location}: {detail['msg']}" if location else detail["msg"])
    return "; ".join(messages)


def parse_rows(csv_data: str) -> Tuple[List[HealthExportRow], List[RowParseError]]:
    """
    Parse Health Export CSV text into typed rows.

    The first line is the header. Every row is validated against the export
    schema; rows that fail are reported with their line number instead of
    being returned.

    Args:
        csv_data (str): CSV text including the header row

    Returns:
        Tuple[List[HealthExportRow], List[RowParseError]]: Valid rows in file order and
        every row error found.
    """
    reader = csv.DictReader(io.StringIO(csv_data.lstrip("\ufeff")))
    try:
        fieldnames = reader.fieldnames
    except csv.Error as e:
        return [], [RowParseError(row=reader.line_num, message=str(e))]
    if fieldnames is None:
        return [], []

    missing = [column for column in required_columns() if column not in fieldnames]
    if missing:
        return [], [RowParseError(row=1, message=f"Missing column(s): {', '.join(missing)}")]

    rows: List[HealthExportRow] = []
    errors: List[RowParseError] = []
    records = iter(reader)
    while True:
        try:
            record = next(records)
        except StopIteration:
            break
        except csv.Error as e:
            # The reader cannot resume reliably after a malformed line
            errors.append(RowParseError(row=reader.line_num, message=str(e)))
            break

        line_number = reader.line_num
        if None in record or None in record.values():
            errors.append(
                RowParseError(
                    row=line_number,
                    message=f"Expected {len(fieldnames)} fields, found a different number",
                )
            )
            continue

        try:
            rows.append(HealthExportRow.model_validate({**record, "line_number": line_number}))
        except ValidationError as e:
            errors.append(RowParseError(row=line_number, message=_format_validation_error(e)))

    logger.debug(f"Parsed {len(rows)} rows with {len(errors)} errors")
    return rows, errors
