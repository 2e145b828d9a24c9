"""Tests for the placement-vikor command line interface."""

import json
import logging

import pytest
import yaml
from click.testing import CliRunner
from rich.logging import RichHandler

from placement_vikor.app_logging import ROOT_LOGGER_NAME, setup_logging
from placement_vikor.cli import main
from placement_vikor.sample_data import sample_dataset


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "input.json"
    path.write_text(json.dumps(sample_dataset()), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep config auto-discovery away from the developer's own files."""
    monkeypatch.delenv("PLACEMENT_VIKOR_CONFIG", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)


class TestRunCommand:
    """Tests for the run command."""

    def test_json_output(self, runner, sample_file):
        result = runner.invoke(main, ["run", "-i", str(sample_file), "-j"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["metadata"]["total_individuals"] == 8
        assert "Eko Prasetyo" in [d["name"] for d in data["disqualified"]]

    def test_threshold_options_override_file(self, runner, sample_file):
        result = runner.invoke(main, [
            "run", "-i", str(sample_file), "-j", "--c4-threshold", "70",
        ])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [d["name"] for d in data["disqualified"]] == ["Eko Prasetyo"]

    def test_formatted_output(self, runner, sample_file):
        result = runner.invoke(main, ["run", "-i", str(sample_file)])

        assert result.exit_code == 0, result.output
        assert "Hasil VIKOR" in result.output
        assert "Tidak Lolos" in result.output

    def test_writes_json_and_csv(self, runner, sample_file, tmp_path):
        out = tmp_path / "hasil.json"
        csv_out = tmp_path / "hasil_vikor.csv"
        result = runner.invoke(main, [
            "run", "-i", str(sample_file), "-o", str(out), "--csv", str(csv_out),
        ])

        assert result.exit_code == 0, result.output
        assert json.loads(out.read_text(encoding="utf-8"))["metadata"]["alternative_count"] == 5
        assert csv_out.read_bytes().startswith(b"\xef\xbb\xbf")

    def test_weights_option(self, runner, sample_file):
        result = runner.invoke(main, [
            "run", "-i", str(sample_file), "-j", "-w", "0.2,0.2,0.2,0.2,0.2",
        ])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["metadata"]["weights"] == [0.2] * 5

    def test_bad_weights_exit_code(self, runner, sample_file):
        result = runner.invoke(main, ["run", "-i", str(sample_file), "-w", "0.5,0.5"])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_validation_failure_lists_issues(self, runner, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.dump({
            "students": [
                {"nama": "Budi", "c1": 120, "c2": 80, "c4": 80, "c5": 80},
                {"nama": "", "c1": 80, "c2": 80, "c4": 80, "c5": 80},
            ],
            "alternatives": [{"kode": "A1", "nama": "Bank Satu", "jarak": 1}],
        }), encoding="utf-8")

        result = runner.invoke(main, ["run", "-i", str(path)])

        assert result.exit_code == 1
        assert "2 issues" in result.output
        assert "Siswa baris 1" in result.output
        assert "Siswa baris 2" in result.output

    def test_non_mapping_input(self, runner, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")

        result = runner.invoke(main, ["run", "-i", str(path)])
        assert result.exit_code == 1
        assert "must contain an object" in result.output

    def test_bad_threshold_in_file_lists_issue(self, runner, sample_file):
        payload = json.loads(sample_file.read_text(encoding="utf-8"))
        payload["thresholds"] = {"c1": "abc"}
        sample_file.write_text(json.dumps(payload), encoding="utf-8")

        result = runner.invoke(main, ["run", "-i", str(sample_file)])

        assert result.exit_code == 1
        assert "Error: validation failed" in result.output
        assert "Batas minimum C1" in result.output

    def test_thresholds_must_be_a_mapping(self, runner, sample_file):
        payload = json.loads(sample_file.read_text(encoding="utf-8"))
        payload["thresholds"] = [75, 80]
        sample_file.write_text(json.dumps(payload), encoding="utf-8")

        result = runner.invoke(main, ["run", "-i", str(sample_file)])

        assert result.exit_code == 1
        assert "pemetaan" in result.output
        assert "Traceback" not in result.output


class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid_input(self, runner, sample_file):
        result = runner.invoke(main, ["validate", "-i", str(sample_file)])
        assert result.exit_code == 0
        assert "Input valid" in result.output

    def test_invalid_input(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"individuals": [], "alternatives": []}), encoding="utf-8")

        result = runner.invoke(main, ["validate", "-i", str(path)])
        assert result.exit_code == 1
        assert "Input invalid" in result.output

    def test_bad_threshold_reported(self, runner, sample_file):
        payload = json.loads(sample_file.read_text(encoding="utf-8"))
        payload["thresholds"] = {"c4": 150}
        sample_file.write_text(json.dumps(payload), encoding="utf-8")

        result = runner.invoke(main, ["validate", "-i", str(sample_file)])
        assert result.exit_code == 1
        assert "Batas minimum C4" in result.output


class TestSampleAndConfigCommands:
    """Tests for sample and init-config."""

    def test_sample_to_stdout(self, runner):
        result = runner.invoke(main, ["sample"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert len(data["individuals"]) == 8
        assert len(data["alternatives"]) == 5

    def test_sample_to_file(self, runner, tmp_path):
        out = tmp_path / "data" / "sample.json"
        result = runner.invoke(main, ["sample", "-o", str(out)])

        assert result.exit_code == 0
        assert json.loads(out.read_text(encoding="utf-8"))["weights"] == [0.3, 0.2, 0.1, 0.25, 0.15]

    def test_init_config_then_auto_discovery(self, runner, tmp_path, sample_file):
        result = runner.invoke(main, ["init-config"])
        assert result.exit_code == 0
        config_path = tmp_path / "vikor-config.yaml"
        assert config_path.exists()

        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        data["weights"]["v_parameter"] = 0.9
        config_path.write_text(yaml.dump(data), encoding="utf-8")

        # Sample file carries its own v, so drop it to see the config value
        payload = json.loads(sample_file.read_text(encoding="utf-8"))
        del payload["v"]
        sample_file.write_text(json.dumps(payload), encoding="utf-8")

        result = runner.invoke(main, ["run", "-i", str(sample_file), "-j"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["metadata"]["v_parameter"] == 0.9

    def test_explicit_config_option(self, runner, tmp_path, sample_file):
        config_path = tmp_path / "custom.yaml"
        config_path.write_text(yaml.dump({"thresholds": {"c1": 60, "c4": 60}}), encoding="utf-8")

        payload = json.loads(sample_file.read_text(encoding="utf-8"))
        del payload["thresholds"]
        sample_file.write_text(json.dumps(payload), encoding="utf-8")

        result = runner.invoke(main, ["--config", str(config_path), "run", "-i", str(sample_file), "-j"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["disqualified"] == []

    def test_out_of_range_config_threshold(self, runner, tmp_path, sample_file):
        config_path = tmp_path / "custom.yaml"
        config_path.write_text(yaml.dump({"thresholds": {"c1": 150}}), encoding="utf-8")

        result = runner.invoke(main, ["--config", str(config_path), "run", "-i", str(sample_file)])
        assert result.exit_code == 1
        assert "Invalid configuration file" in result.output


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture
def restore_logging():
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    yield logger
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


class TestLogging:
    """Tests for console logging setup."""

    def test_setup_logging_replaces_handler(self, restore_logging):
        logger = setup_logging("DEBUG", dev_mode=False)
        assert logger is restore_logging
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0], RichHandler)

        setup_logging("WARNING")
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
        assert not logger.propagate

    def test_verbose_run_enables_debug(self, runner, sample_file, restore_logging):
        result = runner.invoke(main, ["run", "-i", str(sample_file), "--verbose"])

        assert result.exit_code == 0, result.output
        assert restore_logging.level == logging.DEBUG
        # Verbose output includes the per-student ranking tables
        assert "Siti Nurhaliza" in result.output
