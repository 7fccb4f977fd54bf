"""
Unit tests for pear_calc/main.py

The CLI exits through sys.exit, so each run is wrapped in
pytest.raises(SystemExit) and the exit code checked.  The factor table is
patched to the built-in one so a developer's .env cannot change results.
"""
import json
from unittest.mock import patch

import pytest

from pear_calc.config import Config
from pear_calc.emission_factors import DEFAULT_FACTORS, load_factor_table
from pear_calc.main import build_parser, main

WORKBOOK = {
    "productionName": "Pilot",
    "fuel": [{
        "id": "f1", "equipmentType": "Generator", "fuelType": "Diesel Fuel",
        "calculationMethod": "amount", "fuelAmount": 10, "fuelUnit": "gallons",
    }],
    "evCharging": [{"id": "e1", "electricityUsageKWh": 1000}],
}


@pytest.fixture(autouse=True)
def builtin_factors():
    with patch("pear_calc.main.get_factor_table", return_value=DEFAULT_FACTORS), \
         patch("pear_calc.main.get_config", return_value=Config()):
        yield


def write_workbook(tmp_path, data=WORKBOOK):
    path = tmp_path / "workbook.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def run(argv):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


# ─────────────────────────────────────────────────────────────────────────────
# 1. Argument parsing
# ─────────────────────────────────────────────────────────────────────────────

class TestBuildParser:

    def test_calculate_arguments(self):
        args = build_parser().parse_args(["calculate", "--input", "w.json", "--module", "fuel"])
        assert args.command == "calculate"
        assert args.module == "fuel"
        assert args.out is None
        assert args.save is False

    def test_unknown_module_is_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["calculate", "--input", "w.json", "--module", "catering"])

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


# ─────────────────────────────────────────────────────────────────────────────
# 2. calculate
# ─────────────────────────────────────────────────────────────────────────────

class TestCmdCalculate:

    def test_production_summary(self, tmp_path, capsys):
        assert run(["calculate", "--input", str(write_workbook(tmp_path))]) == 0
        out = capsys.readouterr().out
        assert "Pilot" in out
        assert "Scope 1" in out

    def test_writes_results_file(self, tmp_path):
        dest = tmp_path / "out" / "results.json"
        run(["calculate", "--input", str(write_workbook(tmp_path)), "--out", str(dest)])

        payload = json.loads(dest.read_text(encoding="utf-8"))
        assert payload["scopes"]["scope1"] == pytest.approx(10 * 10.0668)
        assert payload["scopes"]["scope2"] == pytest.approx(369.2)

    def test_save_uses_output_dir(self, tmp_path):
        with patch("pear_calc.main.get_config", return_value=Config(output_dir=str(tmp_path / "rep"))):
            run(["calculate", "--input", str(write_workbook(tmp_path)), "--save"])
        assert (tmp_path / "rep" / "results.json").exists()

    def test_single_module(self, tmp_path):
        dest = tmp_path / "fuel.json"
        code = run([
            "calculate", "--input", str(write_workbook(tmp_path)),
            "--module", "fuel", "--out", str(dest),
        ])

        payload = json.loads(dest.read_text(encoding="utf-8"))
        assert code == 0
        assert payload["module"] == "fuel"
        assert payload["totals"]["totalCO2e"] == pytest.approx(100.668)

    def test_skipped_entry_exits_1(self, tmp_path, capsys):
        data = dict(WORKBOOK, hotels=[{"id": "h1", "roomType": "Igloo", "totalNights": 1}])
        assert run(["calculate", "--input", str(write_workbook(tmp_path, data))]) == 1
        assert "Skipped entries" in capsys.readouterr().out

    def test_missing_file_exits_1(self, tmp_path, capsys):
        assert run(["calculate", "--input", str(tmp_path / "absent.json")]) == 1
        assert "File not found" in capsys.readouterr().out

    def test_invalid_workbook_exits_1(self, tmp_path, capsys):
        data = {"fuel": [{"id": "f1", "fuelType": "Gasoline"}]}
        assert run(["calculate", "--input", str(write_workbook(tmp_path, data))]) == 1
        assert "Invalid workbook" in capsys.readouterr().out

    def test_config_error_exits_1(self, tmp_path):
        with patch("pear_calc.main.get_config", side_effect=EnvironmentError("bad level")):
            assert run(["calculate", "--input", str(write_workbook(tmp_path))]) == 1


# ─────────────────────────────────────────────────────────────────────────────
# 3. factors
# ─────────────────────────────────────────────────────────────────────────────

class TestCmdFactors:

    def test_prints_table(self, capsys):
        assert run(["factors"]) == 0
        out = capsys.readouterr().out
        assert "4.2.9" in out
        assert "Helicopter" in out

    def test_dump_round_trips(self, tmp_path):
        dest = tmp_path / "factors.json"
        assert run(["factors", "--dump", str(dest)]) == 0
        assert load_factor_table(dest) == DEFAULT_FACTORS
