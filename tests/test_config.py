"""Tests for noise configs and the YAML loader."""

import logging

import pytest

from gradnoise import DEFAULT_SEED, ConfigLoader, NoiseConfig, PerlinNoise
from gradnoise.errors import ConfigError


class TestNoiseConfig:
    def test_defaults(self):
        config = NoiseConfig()
        assert config.seed == DEFAULT_SEED
        assert config.frequency == 8.0
        assert config.octaves == 8
        assert (config.width, config.height) == (512, 512)
        assert config.dtype == "float64"
        assert config.zero_to_one
        assert not config.normalized

    def test_clamps_frequency_and_octaves(self, caplog):
        with caplog.at_level(logging.WARNING, logger="gradnoise.config"):
            config = NoiseConfig(frequency=100.0, octaves=0)
        assert config.frequency == 64.0
        assert config.octaves == 1
        assert "frequency" in caplog.text
        assert "octaves" in caplog.text

        config = NoiseConfig(frequency=0.01, octaves=40)
        assert config.frequency == 0.1
        assert config.octaves == 16

    def test_numbers_become_floats(self):
        config = NoiseConfig(frequency=4, z=1, offset_x=2)
        assert isinstance(config.frequency, float)
        assert isinstance(config.z, float)
        assert config.offset_x == 2.0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"seed": -1},
            {"seed": 2**32},
            {"seed": "12"},
            {"width": 0},
            {"height": 2.5},
            {"octaves": 3.0},
            {"frequency": "fast"},
            {"z": None},
            {"frequency": float("nan")},
            {"frequency": float("inf")},
            {"offset_y": float("-inf")},
            {"z": float("nan")},
            {"dtype": "int8"},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigError):
            NoiseConfig(**kwargs)

    def test_from_dict(self):
        config = NoiseConfig.from_dict({"seed": 1234, "octaves": 4})
        assert config.seed == 1234
        assert config.octaves == 4

    def test_from_dict_unknown_key(self):
        with pytest.raises(ConfigError, match="colour"):
            NoiseConfig.from_dict({"colour": "red"})

    def test_from_dict_not_mapping(self):
        with pytest.raises(ConfigError):
            NoiseConfig.from_dict([1, 2, 3])

    def test_to_dict_round_trip(self):
        config = NoiseConfig(seed=5, normalized=True, dtype="float32")
        assert NoiseConfig.from_dict(config.to_dict()) == config

    def test_create_engine(self):
        engine = NoiseConfig(seed=1234, dtype="float32").create_engine()
        assert engine == PerlinNoise(1234, dtype="float32")


class TestConfigLoader:
    def test_load_by_name(self, tmp_path):
        (tmp_path / "hills.yaml").write_text("seed: 1234\nfrequency: 4.0\noctaves: 6\n")
        loader = ConfigLoader([tmp_path])
        config = loader.load("hills")
        assert config.seed == 1234
        assert config.frequency == 4.0
        assert config.octaves == 6

    def test_cache(self, tmp_path):
        path = tmp_path / "cached.yaml"
        path.write_text("seed: 1\n")
        loader = ConfigLoader([tmp_path])
        first = loader.load("cached")
        path.write_text("seed: 2\n")
        assert loader.load("cached") is first
        loader.clear_cache()
        assert loader.load("cached").seed == 2

    def test_search_order(self, tmp_path):
        first = tmp_path / "a"
        second = tmp_path / "b"
        first.mkdir()
        second.mkdir()
        (second / "terrain.yaml").write_text("seed: 2\n")
        loader = ConfigLoader([first, second])
        assert loader.load("terrain").seed == 2
        (first / "terrain.yaml").write_text("seed: 1\n")
        loader.clear_cache()
        assert loader.load("terrain").seed == 1

    def test_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigLoader([tmp_path]).load("nope")

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert ConfigLoader().load_file(path) == NoiseConfig()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("seed: [1, 2\n")
        with pytest.raises(ConfigError):
            ConfigLoader().load_file(path)

    def test_invalid_content(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError):
            ConfigLoader().load_file(path)

    def test_default_search_path_is_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "local.yaml").write_text("octaves: 3\n")
        assert ConfigLoader().load("local").octaves == 3
