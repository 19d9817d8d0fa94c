import json
from pathlib import Path

from typer.testing import CliRunner

from zengin.cli import app

runner = CliRunner()


def _synthetic(tmp_path: Path, *args: str) -> Path:
    path = tmp_path / "sample.txt"
    result = runner.invoke(app, ["dataset", "synthetic", str(path), *args])
    assert result.exit_code == 0, result.output
    return path


def test_schema_check_passes():
    result = runner.invoke(app, ["schema", "check"])
    assert result.exit_code == 0
    assert "4 layouts" in result.output


def test_validate_synthetic_file(tmp_path: Path):
    path = _synthetic(tmp_path, "--count", "2")
    log = tmp_path / "logs" / "validate.csv"
    result = runner.invoke(app, ["validate", str(path), "--log-csv", str(log)])
    assert result.exit_code == 0, result.output
    assert "Valid" in result.output
    assert log.exists()


def test_validate_fails_without_end_and_bad_count(tmp_path: Path):
    path = tmp_path / "bad.txt"
    path.write_bytes(b"8000005000000001000" + b" " * 101)
    result = runner.invoke(app, ["validate", str(path)])
    assert result.exit_code == 1
    assert "header record not found" in result.output


def test_inspect_writes_json_report(tmp_path: Path):
    path = _synthetic(tmp_path, "--count", "1")
    report = tmp_path / "report.json"
    result = runner.invoke(app, ["inspect", str(path), "--output", str(report)])
    assert result.exit_code == 0, result.output
    payload = json.loads(report.read_bytes())
    assert payload["summary"]["total_records"] == 4
    assert payload["encoding"]["is_target"] is True


def test_inspect_rejects_non_cp932_input(tmp_path: Path):
    path = tmp_path / "garbage.bin"
    path.write_bytes(b"\xff" * 32)
    result = runner.invoke(app, ["inspect", str(path)])
    assert result.exit_code == 1
    assert "Rejected" in result.output


def test_rewrite_round_trips_bytes(tmp_path: Path):
    path = _synthetic(tmp_path, "--count", "3")
    out = tmp_path / "rewritten.txt"
    result = runner.invoke(app, ["rewrite", str(path), str(out)])
    assert result.exit_code == 0, result.output
    assert out.read_bytes() == path.read_bytes()


def test_export_arrow(tmp_path: Path):
    path = _synthetic(tmp_path)
    out = tmp_path / "records.arrow"
    result = runner.invoke(app, ["export", str(path), str(out), "--format", "arrow"])
    assert result.exit_code == 0, result.output
    assert out.exists()


def test_missing_input_is_a_bad_parameter(tmp_path: Path):
    result = runner.invoke(app, ["inspect", str(tmp_path / "nope.txt")])
    assert result.exit_code != 0
