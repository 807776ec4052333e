"""Tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from riverterrain.config import TerrainConfig, load_config

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "configs" / "default.toml"


class TestDefaults:
    """Tests for default parameter values."""

    def test_default_values(self) -> None:
        """Defaults are the reference terrain values."""
        config = TerrainConfig()
        assert config.terrain.scale == 0.005
        assert config.terrain.amplitude == 50.0
        assert config.river.width == 20.0
        assert config.erosion.radius == 120.0
        assert config.features.hill_steepness == 1.2
        assert config.river_position.direction == (1.0, 0.1)
        assert config.noise.octaves == 6
        assert config.classification.margin_cell_step == 2.0

    def test_frozen(self) -> None:
        """Parameter models are immutable."""
        config = TerrainConfig()
        with pytest.raises(ValidationError):
            config.terrain.amplitude = 3.0

    def test_with_seed(self) -> None:
        """with_seed changes only the terrain seed."""
        config = TerrainConfig()
        reseeded = config.with_seed(99)
        assert reseeded.terrain.seed == 99
        assert config.terrain.seed == 42
        assert reseeded.river == config.river


class TestLoadConfig:
    """Tests for TOML loading."""

    def test_shipped_default_matches_models(self) -> None:
        """configs/default.toml equals the model defaults."""
        assert load_config(DEFAULT_CONFIG_PATH) == TerrainConfig()

    def test_partial_override(self, tmp_path: Path) -> None:
        """Missing tables keep defaults."""
        path = tmp_path / "partial.toml"
        path.write_text(
            "[terrain]\nseed = 7\n\n[river_position]\nstart = [10.0, -3.0]\n"
        )
        config = load_config(path)
        assert config.terrain.seed == 7
        assert config.terrain.amplitude == 50.0
        assert config.river_position.start == (10.0, -3.0)

    def test_missing_file(self, tmp_path: Path) -> None:
        """Missing config raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")

    def test_wrong_type(self, tmp_path: Path) -> None:
        """Invalid values raise a validation error."""
        path = tmp_path / "bad.toml"
        path.write_text('[terrain]\namplitude = "tall"\n')
        with pytest.raises(ValidationError):
            load_config(path)
