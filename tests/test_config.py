"""Tests for engine configuration, presets and YAML persistence."""

import pytest
import yaml

from lifscope.simulation.config import (
    CONFIG_PRESETS,
    CONTROL_RANGES,
    EngineConfig,
    dump_config,
    get_preset,
    load_config,
)


class TestEngineConfig:
    def test_from_dict(self):
        cfg = EngineConfig.from_dict({"decay_rate": 0.02, "min_threshold": "0.8"})
        assert cfg.decay_rate == 0.02
        assert cfg.min_threshold == 0.8
        assert cfg.spike_magnitude == 0.5

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ValueError, match="refractory_period"):
            EngineConfig.from_dict({"refractory_period": 3})

    def test_update_in_place(self):
        cfg = EngineConfig()
        same = cfg.update(decay_rate=0.05, spike_magnitude=0.9)
        assert same is cfg
        assert cfg.decay_rate == 0.05
        assert cfg.spike_magnitude == 0.9

    def test_update_rejects_unknown(self):
        with pytest.raises(ValueError):
            EngineConfig().update(time_step=2)

    def test_to_dict_round_keys(self):
        assert set(EngineConfig().to_dict()) == set(CONTROL_RANGES)

    def test_clamp_to_controls(self):
        cfg = EngineConfig(decay_rate=5.0, min_threshold=0.0,
                           threshold_decay_rate=0.05, spike_magnitude=0.01)
        clamped = cfg.clamp_to_controls()
        assert clamped.decay_rate == 0.1
        assert clamped.min_threshold == 0.001
        assert clamped.threshold_decay_rate == 0.05
        assert clamped.spike_magnitude == 0.1
        # original untouched
        assert cfg.decay_rate == 5.0


class TestPresets:
    def test_default_preset_matches_defaults(self):
        assert get_preset("default") == EngineConfig()

    def test_preset_is_a_copy(self):
        cfg = get_preset("leaky")
        cfg.decay_rate = 1.0
        assert CONFIG_PRESETS["leaky"].decay_rate == 0.05

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="available"):
            get_preset("bursting")

    @pytest.mark.parametrize("name", sorted(CONFIG_PRESETS))
    def test_presets_within_control_ranges(self, name):
        cfg = CONFIG_PRESETS[name]
        assert cfg.clamp_to_controls() == cfg


class TestYaml:
    def test_dump_and_load(self, tmp_path):
        cfg = EngineConfig(decay_rate=0.03, threshold_decay_rate=0.002,
                           min_threshold=1.5, spike_magnitude=0.7)
        path = dump_config(cfg, tmp_path / "configs" / "neuron.yaml")
        assert path.exists()
        assert load_config(path) == cfg

    def test_load_preset_with_override(self, tmp_path):
        path = tmp_path / "excitable.yaml"
        path.write_text(yaml.dump({"preset": "excitable", "decay_rate": 0.02}))
        cfg = load_config(path)
        assert cfg.decay_rate == 0.02
        assert cfg.min_threshold == CONFIG_PRESETS["excitable"].min_threshold

    def test_load_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == EngineConfig()

    def test_load_rejects_unknown(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("decay_rate: 0.1\nleak: 3\n")
        with pytest.raises(ValueError):
            load_config(path)
