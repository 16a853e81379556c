"""Tests for wormhole configuration."""

import pytest
import yaml
from pathlib import Path

from wormhole.config import DEFAULT_HARMONIC_RATIOS, ConfigManager, WormholeConfig
from wormhole.errors import ConfigurationError


class TestWormholeConfig:
    """Test WormholeConfig dataclass."""
    
    def test_defaults(self):
        config = WormholeConfig()
        
        assert config.dimensionality == 10
        assert config.admission_threshold == 0.7
        assert config.stability_steepness == 10.0
        assert config.stability_midpoint == 0.8
        assert config.base_frequency == 432.0
        assert config.harmonic_ratios == [1.0, 2.0, 0.5, 1.5, 0.667, 1.333]
        assert config.neighbor_count == 5
        assert config.min_stability == 0.8
        assert config.min_resonance == 0.7
    
    def test_harmonic_ratios_not_shared(self):
        config = WormholeConfig()
        config.harmonic_ratios.append(3.0)
        assert WormholeConfig().harmonic_ratios == DEFAULT_HARMONIC_RATIOS
    
    @pytest.mark.parametrize("field,value", [
        ("dimensionality", 0),
        ("dimensionality", 2.5),
        ("admission_threshold", 1.5),
        ("stability_steepness", 0),
        ("base_frequency", -1),
        ("harmonic_ratios", []),
        ("neighbor_count", -1),
        ("fingerprint_top_k", 0),
    ])
    def test_validation(self, field, value):
        with pytest.raises(ValueError):
            WormholeConfig(**{field: value})
    
    def test_round_trip_dict(self):
        config = WormholeConfig(dimensionality=16, min_resonance=0.5)
        assert WormholeConfig.from_dict(config.to_dict()) == config
    
    def test_from_dict_ignores_unknown_keys(self, caplog):
        config = WormholeConfig.from_dict({"dimensionality": 12, "colour": "blue"})
        
        assert config.dimensionality == 12
        assert "colour" in caplog.text
    
    def test_yaml_file(self, tmp_path):
        path = tmp_path / "nested" / "wormhole.yml"
        WormholeConfig(dimensionality=8).save_to_file(path)
        
        assert yaml.safe_load(path.read_text())["dimensionality"] == 8
        assert WormholeConfig.load_from_file(path).dimensionality == 8
    
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            WormholeConfig.load_from_file(tmp_path / "absent.yml")
    
    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("dimensionality: [unclosed\n")
        
        with pytest.raises(ConfigurationError) as exc_info:
            WormholeConfig.load_from_file(path)
        assert exc_info.value.config_path == str(path)
    
    def test_non_mapping_yaml(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- 1\n- 2\n")
        
        with pytest.raises(ConfigurationError):
            WormholeConfig.load_from_file(path)
    
    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert WormholeConfig.load_from_file(path) == WormholeConfig()


class TestConfigManager:
    """Test configuration resolution order and overrides."""
    
    @pytest.fixture(autouse=True)
    def isolated(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        for name in ("CONFIG", "DIMENSIONALITY", "ADMISSION_THRESHOLD", "MIN_STABILITY", "MIN_RESONANCE"):
            monkeypatch.delenv(f"WORMHOLE_{name}", raising=False)
    
    def test_defaults_without_files(self):
        assert ConfigManager().load() == WormholeConfig()
    
    def test_working_directory_file(self, tmp_path):
        WormholeConfig(dimensionality=6).save_to_file(tmp_path / ".wormhole.yml")
        assert ConfigManager().load().dimensionality == 6
    
    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.yml"
        WormholeConfig(neighbor_count=2).save_to_file(path)
        
        manager = ConfigManager(path)
        assert manager.config.neighbor_count == 2
    
    def test_explicit_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigManager(tmp_path / "nope.yml").load()
    
    def test_env_config_path_wins(self, tmp_path, monkeypatch):
        explicit = tmp_path / "explicit.yml"
        from_env = tmp_path / "env.yml"
        WormholeConfig(dimensionality=3).save_to_file(explicit)
        WormholeConfig(dimensionality=7).save_to_file(from_env)
        monkeypatch.setenv("WORMHOLE_CONFIG", str(from_env))
        
        assert ConfigManager(explicit).load().dimensionality == 7
    
    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("WORMHOLE_DIMENSIONALITY", "20")
        monkeypatch.setenv("WORMHOLE_MIN_STABILITY", "0.9")
        
        config = ConfigManager().load()
        assert config.dimensionality == 20
        assert config.min_stability == 0.9
    
    def test_invalid_env_override_is_ignored(self, monkeypatch, caplog):
        monkeypatch.setenv("WORMHOLE_ADMISSION_THRESHOLD", "high")
        
        config = ConfigManager().load()
        assert config.admission_threshold == 0.7
        assert "admission_threshold" in caplog.text
    
    def test_out_of_range_env_override_is_ignored(self, tmp_path, monkeypatch, caplog):
        WormholeConfig(dimensionality=7).save_to_file(tmp_path / ".wormhole.yml")
        monkeypatch.setenv("WORMHOLE_DIMENSIONALITY", "0")
        
        config = ConfigManager().load()
        assert config.dimensionality == 7
        assert "dimensionality" in caplog.text
    
    def test_valid_override_survives_invalid_sibling(self, monkeypatch, caplog):
        monkeypatch.setenv("WORMHOLE_ADMISSION_THRESHOLD", "5")
        monkeypatch.setenv("WORMHOLE_MIN_STABILITY", "0.9")
        
        config = ConfigManager().load()
        assert config.admission_threshold == 0.7
        assert config.min_stability == 0.9
        assert "admission_threshold" in caplog.text
    
    def test_save(self, tmp_path):
        manager = ConfigManager()
        written = manager.save(WormholeConfig(dimensionality=9))
        
        assert written == Path(".wormhole.yml")
        assert (tmp_path / ".wormhole.yml").exists()
        assert manager.config.dimensionality == 9
