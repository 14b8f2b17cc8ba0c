"""Tests for TOML config loading and CLI > config > stored-settings resolution."""

import pytest
from futureflow.config import (
    apply_overrides,
    create_parser,
    effective_settings,
    load_config,
    resolve,
    resolve_data_path,
)
from futureflow.params import SimulationSettings
from futureflow.storage import DEFAULT_DATA_PATH


class TestLoadConfig:
    def test_missing_file(self, tmp_path):
        assert load_config(tmp_path / "none.toml") == {}

    def test_snake_case(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("prediction_years = 20\ninflation_rate = 2.0\n", encoding="utf-8")
        assert load_config(path) == {"prediction_years": 20, "inflation_rate": 2.0}

    def test_camel_case_and_settings_table(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            'data = "household.json"\n[settings]\npredictionYears = 15\neducationMode = "private"\n',
            encoding="utf-8",
        )
        config = load_config(path)
        assert config["prediction_years"] == 15
        assert config["education_mode"] == "private"
        assert config["data"] == "household.json"

    def test_invalid_toml_exits(self, tmp_path, capsys):
        path = tmp_path / "config.toml"
        path.write_text("prediction_years = = 1\n", encoding="utf-8")
        with pytest.raises(SystemExit):
            load_config(path)
        assert "設定ファイルの読み込みに失敗" in capsys.readouterr().err

    def test_settings_not_table_warns(self, tmp_path, capsys):
        path = tmp_path / "config.toml"
        path.write_text("settings = 5\nprediction_years = 20\n", encoding="utf-8")
        assert load_config(path) == {"prediction_years": 20}
        assert "settings はテーブルで指定してください" in capsys.readouterr().err


class TestResolve:
    def setup_method(self):
        self.parser = create_parser("test")
        self.stored = SimulationSettings(prediction_years=25, inflation_rate=1.5)

    def test_stored_when_nothing_given(self):
        r = resolve(self.parser.parse_args([]), {}, self.stored)
        assert r["prediction_years"] == 25
        assert r["inflation_rate"] == 1.5

    def test_config_over_stored(self):
        r = resolve(self.parser.parse_args([]), {"prediction_years": 10}, self.stored)
        assert r["prediction_years"] == 10

    def test_cli_over_config(self):
        args = self.parser.parse_args(["--years", "40"])
        r = resolve(args, {"prediction_years": 10}, self.stored)
        assert r["prediction_years"] == 40

    def test_config_values_cast(self):
        r = resolve(self.parser.parse_args([]), {"inflation_rate": 2}, self.stored)
        assert isinstance(r["inflation_rate"], float)

    def test_family_incomes_untouched(self):
        r = resolve(self.parser.parse_args([]), {}, self.stored)
        assert "family_incomes" not in r


class TestApplyOverrides:
    def test_returns_new_object(self):
        stored = SimulationSettings()
        updated = apply_overrides(stored, {"prediction_years": 5})
        assert updated.prediction_years == 5
        assert stored.prediction_years == 30

    def test_effective_settings_validates(self):
        parser = create_parser("test")
        with pytest.raises(ValueError):
            effective_settings(parser.parse_args(["--years", "0"]), {}, SimulationSettings())

    def test_effective_settings_applies(self):
        parser = create_parser("test")
        args = parser.parse_args(["--education-mode", "private", "--univ-housing", "away"])
        s = effective_settings(args, {}, SimulationSettings())
        assert s.education_mode == "private"
        assert s.univ_housing_type == "away"


class TestDataPath:
    def test_priority(self, tmp_path):
        parser = create_parser("test")
        assert resolve_data_path(parser.parse_args([]), {}) == DEFAULT_DATA_PATH
        assert resolve_data_path(parser.parse_args([]), {"data": "x.json"}).name == "x.json"
        cli = tmp_path / "cli.json"
        assert resolve_data_path(parser.parse_args(["--data", str(cli)]), {"data": "x.json"}) == cli
