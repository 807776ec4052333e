"""Shared test fixtures for terrain tests."""

import pytest

from riverterrain.config import (
    FeatureParams,
    GridConfig,
    RiverParams,
    RiverPosition,
    TerrainConfig,
    TerrainParams,
)
from riverterrain.heightfield import HeightField


@pytest.fixture
def default_config() -> TerrainConfig:
    """Configuration with all defaults."""
    return TerrainConfig()


@pytest.fixture
def default_field(default_config: TerrainConfig) -> HeightField:
    """Height field built from the default configuration."""
    return HeightField(default_config)


@pytest.fixture
def calm_config() -> TerrainConfig:
    """Low-amplitude terrain with a straight river along z = 0.

    Hills stay within a few units of zero so the channel (depth 8) is
    always classified as river and terrain far from it never is.

    Grid covers x, z in [-24, 24] at spacing 2 (exact integer coordinates).
    """
    return TerrainConfig(
        terrain=TerrainParams(amplitude=2.0, river_depth=8.0, seed=7),
        river=RiverParams(
            width=20.0,
            bank_slope_distance=4.0,
            meander_frequency=0.008,
            meander_amplitude=0.0,
        ),
        river_position=RiverPosition(start=(-256.0, 0.0), direction=(1.0, 0.0)),
        grid=GridConfig(origin_x=-24.0, origin_z=-24.0, width=25, height=25, spacing=2.0),
    )


@pytest.fixture
def calm_field(calm_config: TerrainConfig) -> HeightField:
    """Height field built from the calm configuration."""
    return HeightField(calm_config)


@pytest.fixture
def plateau_free_config() -> TerrainConfig:
    """Default terrain without flat-area masking."""
    return TerrainConfig(features=FeatureParams(flat_area_strength=0.0))
