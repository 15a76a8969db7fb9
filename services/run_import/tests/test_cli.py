import json
from unittest.mock import AsyncMock

from conftest import make_csv, make_csv_row

from run_import import cli
from run_import.exceptions import ExternalLookupError
from run_import.models import ImportResult


def test_cli_imports_file(tmp_path, mocker, capsys):
    path = tmp_path / "export.csv"
    path.write_text(make_csv([make_csv_row("2021-10-09 12:33:18 - 2021-10-09 13:23:38")]), encoding="utf-8")
    import_csv = mocker.patch(
        "run_import.cli.ImportPipeline.import_csv",
        AsyncMock(return_value=ImportResult(logged_count=6, filtered_timestamps_count=2)),
    )

    exit_code = cli.main([str(path)])

    assert exit_code == 0
    import_csv.assert_awaited_once_with(path.read_text(encoding="utf-8"))
    output = json.loads(capsys.readouterr().out)
    assert output["loggedCount"] == 6
    assert output["filteredTimestampsCount"] == 2


def test_cli_reports_parse_errors(tmp_path, mocker):
    path = tmp_path / "export.csv"
    path.write_text(make_csv([make_csv_row("2021-10-09 12:33:18")]), encoding="utf-8")
    log_event = mocker.patch("run_import.cli.GraphJSONClient.log_event", AsyncMock())

    assert cli.main([str(path)]) == 1
    log_event.assert_not_awaited()


def test_cli_reports_lookup_failure(tmp_path, mocker):
    path = tmp_path / "export.csv"
    path.write_text(make_csv([make_csv_row("2021-10-09 12:33:18 - 2021-10-09 13:23:38")]), encoding="utf-8")
    mocker.patch(
        "run_import.cli.GraphJSONClient.get_samples",
        AsyncMock(side_effect=ExternalLookupError("timed out")),
    )

    assert cli.main([str(path)]) == 1
