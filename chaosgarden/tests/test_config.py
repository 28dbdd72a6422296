"""Tests for YAML config loading and inheritance."""

import pytest
import yaml
from pathlib import Path

# Import from run.py, which sits at chaosgarden/run.py outside the src package
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))
from run import _deep_merge, _parse_tick_range, load_config, main

CONFIG_DIR = Path(__file__).parent.parent / "config"


class TestDeepMerge:
    """Test recursive dict merging."""

    def test_simple_override(self):
        base = {"a": 1, "b": 2}
        override = {"b": 3}
        result = _deep_merge(base, override)
        assert result == {"a": 1, "b": 3}

    def test_nested_merge(self):
        base = {"a": {"x": 1, "y": 2}, "b": 3}
        override = {"a": {"y": 99}}
        result = _deep_merge(base, override)
        assert result == {"a": {"x": 1, "y": 99}, "b": 3}

    def test_deep_nested_merge(self):
        base = {"disasters": {"types": {"FIRE": 1.0, "FLOOD": 1.0}}}
        override = {"disasters": {"types": {"FLOOD": 0.0}}}
        result = _deep_merge(base, override)
        assert result["disasters"]["types"] == {"FIRE": 1.0, "FLOOD": 0.0}

    def test_list_replaced_not_merged(self):
        base = {"a": [1, 2, 3]}
        override = {"a": [4, 5]}
        result = _deep_merge(base, override)
        assert result["a"] == [4, 5]

    def test_original_not_mutated(self):
        base = {"a": {"x": 1}}
        override = {"a": {"y": 2}}
        _deep_merge(base, override)
        assert "y" not in base["a"]


class TestLoadConfig:
    """Test YAML loading with inheritance."""

    def test_load_default_config(self):
        config = load_config(CONFIG_DIR / "default.yaml")
        for section in ("simulation", "population", "environment", "events", "disasters", "metrics"):
            assert section in config

    def test_default_config_values(self):
        config = load_config(CONFIG_DIR / "default.yaml")
        assert config["simulation"]["seed"] == 20260210
        assert config["population"]["total"] == 22
        assert config["population"]["fungi"] == 3
        assert config["environment"]["weather"] == "CLEAR"
        assert config["disasters"]["enabled"] is False

    def test_drought_inherits_default(self):
        config = load_config(CONFIG_DIR / "experiments" / "drought.yaml")
        # Inherited
        assert config["simulation"]["seed"] == 20260210
        assert config["population"]["total"] == 22
        # Overridden
        assert config["environment"]["weather"] == "DROUGHT"
        assert config["environment"]["moisture"] == 0.2
        assert config["disasters"]["enabled"] is True
        assert config["disasters"]["types"]["FLOOD"] == 0.0
        # Deep-merged: start_tick still comes from default
        assert config["disasters"]["start_tick"] == 96
        assert "inherits" not in config

    def test_chaos_config(self):
        config = load_config(CONFIG_DIR / "experiments" / "chaos.yaml")
        assert config["population"]["total"] == 40
        assert config["events"]["echo_to_log"] is True
        assert config["disasters"]["start_tick"] == 24

    def test_all_experiment_configs_load(self):
        """Every experiment config should load without error."""
        for yaml_file in (CONFIG_DIR / "experiments").glob("*.yaml"):
            config = load_config(yaml_file)
            assert "simulation" in config, f"{yaml_file.name} missing simulation key"

    def test_inheritance_from_temp_files(self, tmp_path):
        (tmp_path / "experiments").mkdir()
        (tmp_path / "base.yaml").write_text(yaml.dump({"simulation": {"ticks": 10, "seed": 1}}))
        child = tmp_path / "experiments" / "child.yaml"
        child.write_text(yaml.dump({"inherits": "base", "simulation": {"ticks": 99}}))
        assert load_config(child) == {"simulation": {"ticks": 99, "seed": 1}}


class TestParseTickRange:
    def test_range(self):
        assert _parse_tick_range("100-200") == (100, 200)

    def test_malformed(self):
        with pytest.raises(ValueError):
            _parse_tick_range("abc-def")


class TestMain:
    """End-to-end CLI runs."""

    def test_short_run_writes_data_dir(self, monkeypatch, tmp_path):
        data_dir = tmp_path / "garden"
        monkeypatch.setattr(sys, "argv", [
            "run.py", "--ticks", "3", "--seed", "5", "--data-dir", str(data_dir),
        ])
        main()
        assert (data_dir / "logs" / "ticks" / "000003.json").exists()
        assert (data_dir / "analysis" / "population.csv").exists()
        assert yaml.safe_load((data_dir / "config.yaml").read_text())["simulation"]["seed"] == 5

    def test_missing_config_exits_nonzero(self, monkeypatch, tmp_path):
        monkeypatch.setattr(sys, "argv", ["run.py", "--config", str(tmp_path / "nope.yaml")])
        with pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 1

    def test_resume_without_run_exits_nonzero(self, monkeypatch, tmp_path):
        monkeypatch.setattr(sys, "argv", ["run.py", "--resume", str(tmp_path)])
        with pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 1
